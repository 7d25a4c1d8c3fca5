"""
Logger configuration watcher.

Re-applies Logger.xml only when its modification time changed since the last
successful application. The stored timestamp starts at zero, so the first
check loads the file whenever it exists.
"""

import logging
import os
import threading
from pathlib import Path

from ..errors import LogTagError
from ..log_control import LogControl
from ..models import LoggerWatchState, WatchOutcome
from .layout import LOGGER_ROOT_NAME
from .logger_loader import LoggerDocumentLoader
from .version_table import VersionTable

logger = logging.getLogger(__name__)


class LoggerConfigWatcher:
    """Applies the logger document to LogControl when it changes."""

    def __init__(self, log_control: LogControl, version_table: VersionTable):
        """
        Initialize logger watcher.

        Args:
            log_control: Log control receiving levels and paths
            version_table: Table used to validate the logger document version
        """
        self.log_control = log_control
        self.version_table = version_table
        self.state = LoggerWatchState()
        self._lock = threading.Lock()

    def check_and_apply(self, config_path: Path) -> WatchOutcome:
        """
        Apply `config_path` if it changed since the last successful application.

        Args:
            config_path: Full path to Logger.xml

        Returns:
            MISSING, UNCHANGED or APPLIED

        Raises:
            ConfigError: If the document is invalid or a tag level cannot be applied
        """
        with self._lock:
            try:
                stat = os.stat(config_path)
            except OSError:
                logger.warning(
                    f"There is no configuration file for logs: {config_path}. "
                    f"The server will run with the default settings."
                )
                return WatchOutcome.MISSING

            observed = LoggerWatchState.from_mtime_ns(stat.st_mtime_ns)
            if observed == self.state:
                logger.debug(f"Logger config unchanged: {config_path}")
                return WatchOutcome.UNCHANGED

            self.log_control.reset_enable()

            config = LoggerDocumentLoader(config_path).parse()
            self.version_table.check_valid_version(LOGGER_ROOT_NAME, config.version)

            self.log_control.redirect_all(Path(config.log_path))
            logger.info(f"Trying to set logfile in directory... ({config.log_path})")

            for tag in config.tags:
                if not self.log_control.set_enable(tag.name, tag.level, True):
                    raise LogTagError(tag.name, tag.level)

            self.state = observed
            logger.info(f"Applied logger config: {len(config.tags)} tags")
            return WatchOutcome.APPLIED

    def reset(self) -> None:
        """Forget the last timestamp so the next check reloads."""
        with self._lock:
            self.state = LoggerWatchState()
