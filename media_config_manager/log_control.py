"""
Log control for the media server process.

Wraps stdlib logging with the operations the logger document drives:
- global reset of per-tag levels
- per-tag level rules (tag names are regex patterns)
- redirection of the general log, statistics channels and event monitor to a log directory
"""

import logging
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

ROOT_LOGGER_NAME = __name__.split(".")[0]
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "media-server.log"
EVENT_LOG_FILE_NAME = "events.log"

LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Per-feature statistics logs
STAT_LOG_CHANNELS = (
    "webrtc_edge_session",
    "webrtc_edge_request",
    "webrtc_edge_viewers",
    "hls_edge_session",
    "hls_edge_request",
    "hls_edge_viewers",
)


def setup_logging(level: str = "INFO") -> None:
    """Configure console logging for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr
    )


def _redirect(target: logging.Logger, file_path: Path) -> None:
    """Replace the file sink of `target` with one writing to `file_path`."""
    for handler in list(target.handlers):
        if getattr(handler, "_media_sink", False):
            target.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(file_path, delay=True, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._media_sink = True
    target.addHandler(handler)


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Could not create log directory {path}: {e}")


class EventMonitor:
    """Event log sink; only its log location is managed here."""

    def __init__(self, logger_name: str = f"{ROOT_LOGGER_NAME}.monitoring.events"):
        self.log_path: Optional[Path] = None
        self.events = logging.getLogger(logger_name)

    def set_log_path(self, path: Path) -> None:
        self.log_path = Path(path)
        _ensure_dir(self.log_path)
        _redirect(self.events, self.log_path / EVENT_LOG_FILE_NAME)

    def close(self) -> None:
        for handler in list(self.events.handlers):
            if getattr(handler, "_media_sink", False):
                self.events.removeHandler(handler)
                handler.close()


class LogControl:
    """
    Per-tag log levels and log file locations.

    A tag is the part of a logger name below the root logger, e.g. the tag
    "config.loader" controls "media_config_manager.config.loader". Rules are
    applied in order; the last matching rule wins.
    """

    def __init__(
        self,
        root_name: str = ROOT_LOGGER_NAME,
        default_level: int = logging.INFO,
        monitor: Optional[EventMonitor] = None
    ):
        """
        Initialize log control.

        Args:
            root_name: Name of the logger all tags live under
            default_level: Level of tags no rule matches
            monitor: Event monitor receiving log path updates
        """
        self.root_name = root_name
        self.default_level = default_level
        self.monitor = monitor or EventMonitor(f"{root_name}.monitoring.events")
        self.log_path: Optional[Path] = None
        self.stat_log_paths: Dict[str, Path] = {}
        self._rules: List[Tuple[re.Pattern, int]] = []
        self._touched: set = set()

    def reset_enable(self) -> None:
        """Drop every level rule and restore default levels."""
        self._rules.clear()
        for name in self._touched:
            logging.getLogger(name).setLevel(logging.NOTSET)
        self._touched.clear()

    def set_enable(self, tag: str, level: str, enable: bool = True) -> bool:
        """
        Add a level rule for tags matching `tag`.

        Args:
            tag: Tag name or regex pattern
            level: Level name (debug, info, warn, error, critical)
            enable: False silences matching tags entirely

        Returns:
            False if the level is unknown or the pattern is invalid
        """
        level_no = LEVELS.get(level.strip().lower())
        if level_no is None:
            return False

        try:
            pattern = re.compile(tag)
        except re.error:
            return False

        if not enable:
            level_no = logging.CRITICAL + 1

        self._rules.append((pattern, level_no))

        prefix = f"{self.root_name}."
        for name in list(logging.root.manager.loggerDict):
            if name.startswith(prefix) and pattern.fullmatch(name[len(prefix):]):
                logging.getLogger(name).setLevel(level_no)
                self._touched.add(name)

        return True

    def level_for(self, tag: str) -> int:
        for pattern, level_no in reversed(self._rules):
            if pattern.fullmatch(tag):
                return level_no
        return self.default_level

    def get_logger(self, tag: str) -> logging.Logger:
        """Logger for `tag` with the level currently configured for it."""
        name = f"{self.root_name}.{tag}"
        tag_logger = logging.getLogger(name)
        tag_logger.setLevel(self.level_for(tag))
        self._touched.add(name)
        return tag_logger

    def set_path(self, path: Path) -> None:
        """Write the general log to `path`."""
        self.log_path = Path(path)
        _ensure_dir(self.log_path)
        _redirect(logging.getLogger(self.root_name), self.log_path / LOG_FILE_NAME)

    def set_stat_log_path(self, channel: str, path: Path) -> None:
        """Write the statistics channel `channel` to `path`."""
        stat_logger = logging.getLogger(f"{self.root_name}.stat.{channel}")
        stat_logger.propagate = False
        _ensure_dir(Path(path))
        _redirect(stat_logger, Path(path) / f"{channel}.log")
        self.stat_log_paths[channel] = Path(path)

    def redirect_all(self, path: Path) -> None:
        """Point the general log, every statistics channel and the event monitor at `path`."""
        self.set_path(path)
        self.monitor.set_log_path(path)
        for channel in STAT_LOG_CHANNELS:
            self.set_stat_log_path(channel, path)

    def close(self) -> None:
        """Detach every file sink installed by this instance."""
        names = [self.root_name] + [f"{self.root_name}.stat.{c}" for c in self.stat_log_paths]
        for name in names:
            target = logging.getLogger(name)
            for handler in list(target.handlers):
                if getattr(handler, "_media_sink", False):
                    target.removeHandler(handler)
                    handler.close()
        self.monitor.close()
