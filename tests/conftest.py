"""
Pytest configuration and fixtures for Media Config Manager tests.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from media_config_manager.log_control import LogControl
from media_config_manager.manager import ConfigManager

SERVER_XML = """<?xml version="1.0" encoding="utf-8"?>
<Server version="{version}">
    <Name>MediaServer</Name>
    <Bind>
        <Providers>
            <RTMP>
                <Port>1935</Port>
            </RTMP>
        </Providers>
    </Bind>
    <VirtualHosts>
        <VirtualHost>
            <Name>default</Name>
        </VirtualHost>
        <VirtualHost>
            <Name>second</Name>
        </VirtualHost>
    </VirtualHosts>
</Server>
"""

LOGGER_XML = """<?xml version="1.0" encoding="utf-8"?>
<Logger version="{version}">
    <Tag name="config\\..*" level="debug" />
    <Tag name="Thread" level="{thread_level}" />
    <Path>{log_dir}</Path>
</Logger>
"""


class RecordingLogControl(LogControl):
    """LogControl that records every level mutation."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.set_enable_calls = []
        self.reset_calls = 0

    def reset_enable(self) -> None:
        self.reset_calls += 1
        super().reset_enable()

    def set_enable(self, tag: str, level: str, enable: bool = True) -> bool:
        self.set_enable_calls.append((tag, level))
        return super().set_enable(tag, level, enable)


@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create temporary configuration directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log_dir(temp_config_dir) -> Path:
    return temp_config_dir / "logs"


@pytest.fixture
def write_server_xml(temp_config_dir) -> Callable[..., Path]:
    """Write Server.xml with the given version."""
    def _write(version="9", directory: Path = None) -> Path:
        directory = directory or temp_config_dir
        path = directory / "Server.xml"
        path.write_text(SERVER_XML.format(version=version))
        return path
    return _write


@pytest.fixture
def write_logger_xml(temp_config_dir, log_dir) -> Callable[..., Path]:
    """Write Logger.xml with the given version and Thread level."""
    def _write(version="2", thread_level="info") -> Path:
        path = temp_config_dir / "Logger.xml"
        path.write_text(LOGGER_XML.format(version=version, thread_level=thread_level, log_dir=log_dir))
        return path
    return _write


@pytest.fixture
def log_control() -> Generator[RecordingLogControl, None, None]:
    control = RecordingLogControl()
    yield control
    control.reset_enable()
    control.close()


@pytest.fixture
def manager(log_control) -> Generator[ConfigManager, None, None]:
    config_manager = ConfigManager(log_control=log_control)
    yield config_manager
    config_manager.close()


@pytest.fixture
def loaded_manager(manager, temp_config_dir, write_server_xml, write_logger_xml) -> ConfigManager:
    """Manager with a valid Server.xml and Logger.xml loaded."""
    write_server_xml()
    write_logger_xml()
    result = manager.load_configs(temp_config_dir)
    assert result.success, result.message
    return manager
