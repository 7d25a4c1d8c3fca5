"""
On-disk layout of the configuration directory.
"""

from pathlib import Path

MAIN_FILE_NAME = "Server.xml"
MAIN_ROOT_NAME = "Server"
LOGGER_FILE_NAME = "Logger.xml"
LOGGER_ROOT_NAME = "Logger"
SERVER_ID_FILE_NAME = "Server.id"

# Written by SaveCurrentConfig-style API calls
LAST_APPLIED_FILE_NAME = "LastAppliedConfig.xml"

# Deprecated files, checked only for existence
LEGACY_LAST_CONFIG_FILE_NAME = "LastConfig.json"
LEGACY_LAST_CONFIG_FILE_NAME_OLD = "LastConfig.xml"


def default_config_dir() -> Path:
    """Default config directory: <install>/conf, relative to the installed package."""
    return Path(__file__).resolve().parent.parent.parent / "conf"
