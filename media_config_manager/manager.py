"""
Configuration manager.

Owns the active configuration snapshot and sequences loading, validation,
reload and save:

    legacy guard -> logger config -> main document -> version check -> server ID

A new snapshot is built completely before it is published, so a failed load
never replaces the previous one. Readers take the snapshot reference under a
lock and serialize it outside the lock.
"""

import copy
import logging
import threading
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config.file_watcher import FileWatcher
from .config.identity_store import IdentityStore
from .config.layout import (
    LAST_APPLIED_FILE_NAME,
    LOGGER_FILE_NAME,
    MAIN_FILE_NAME,
    MAIN_ROOT_NAME,
    default_config_dir,
)
from .config.legacy_guard import check_legacy_configs
from .config.loader import DocumentLoader
from .config.logger_watcher import LoggerConfigWatcher
from .config.serializer import render_saved_document, tree_to_json, write_document
from .config.version_table import VersionTable
from .errors import ConfigError, ErrorCode
from .log_control import LogControl
from .models import ConfigSnapshot, DocumentFormat, LoadResult, Severity, WatchOutcome
from .settings import BuildInfo, ManagerSettings
from .state import ConfigurationState

logger = logging.getLogger(__name__)


class ConfigManager:
    """Configuration lifecycle context, constructed once per process."""

    def __init__(
        self,
        settings: Optional[ManagerSettings] = None,
        build_info: Optional[BuildInfo] = None,
        version_table: Optional[VersionTable] = None,
        log_control: Optional[LogControl] = None,
        loader: Optional[DocumentLoader] = None
    ):
        """
        Initialize configuration manager.

        Args:
            settings: Environment settings (defaults to built-in defaults)
            build_info: Version reported in saved configs
            version_table: Supported document versions
            log_control: Log control driven by Logger.xml
            loader: Document loader for the main document
        """
        self.settings = settings or ManagerSettings()
        self.build_info = build_info or self.settings.build_info(__version__)
        self.version_table = version_table or VersionTable()
        self.log_control = log_control or LogControl()
        self.loader = loader or DocumentLoader()
        self.logger_watcher = LoggerConfigWatcher(self.log_control, self.version_table)
        self.state = ConfigurationState()
        self.file_watcher: Optional[FileWatcher] = None

        self._lock = threading.Lock()
        self._snapshot: Optional[ConfigSnapshot] = None
        self._config_dir: Optional[Path] = None
        self._identity_store: Optional[IdentityStore] = None

    @property
    def snapshot(self) -> Optional[ConfigSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def config_dir(self) -> Optional[Path]:
        with self._lock:
            return self._config_dir

    @property
    def server_id(self) -> Optional[str]:
        snapshot = self.snapshot
        return snapshot.server_id if snapshot else None

    def resolve_config_dir(self, config_dir: Optional[Path] = None) -> Path:
        """Explicit directory, then MEDIA_CONFIG_DIR, then <install>/conf."""
        if config_dir:
            return Path(config_dir)
        if self.settings.config_dir:
            return Path(self.settings.config_dir)
        return default_config_dir()

    def load_configs(self, config_dir: Optional[Path] = None) -> LoadResult:
        """
        Load and validate every configuration document, then publish a new snapshot.

        Args:
            config_dir: Configuration directory (resolved from settings when omitted)

        Returns:
            LoadResult; fatal errors leave the previous snapshot in place
        """
        start_time = time.time()
        resolved = self.resolve_config_dir(config_dir)
        warnings: List[str] = []

        try:
            snapshot = self._build_snapshot(resolved, warnings)
        except ConfigError as e:
            logger.error(f"Failed to load configuration from {resolved}:\n{e.message}")
            self.state.record_load_attempt(False, self._elapsed_ms(start_time), e.to_dict())
            return LoadResult.from_error(e, warnings, str(resolved))

        with self._lock:
            self._snapshot = snapshot
            self._config_dir = resolved

        self.state.config_load_timestamp = snapshot.loaded_at
        self.state.record_load_attempt(True, self._elapsed_ms(start_time))
        logger.info(
            f"Configuration loaded: {snapshot.root_name}.xml v{snapshot.version}, "
            f"server ID {snapshot.server_id}"
        )

        return LoadResult(
            success=True,
            severity=Severity.WARNING if warnings else Severity.NONE,
            warnings=warnings,
            config_dir=str(resolved)
        )

    def _build_snapshot(self, config_dir: Path, warnings: List[str]) -> ConfigSnapshot:
        check_legacy_configs(config_dir)

        logger_path = config_dir / LOGGER_FILE_NAME
        outcome = self.logger_watcher.check_and_apply(logger_path)
        if outcome == WatchOutcome.MISSING:
            warnings.append(f"No logger configuration at {logger_path}; using default log settings")
        elif outcome == WatchOutcome.APPLIED:
            self.state.logger_applied_count += 1

        logger.info(f"Trying to load configurations... ({config_dir / MAIN_FILE_NAME})")
        document = self.loader.load(DocumentFormat.XML, config_dir, MAIN_FILE_NAME, MAIN_ROOT_NAME)
        self.version_table.check_valid_version(MAIN_ROOT_NAME, document.version)

        server_id = self._identity_store_for(config_dir).load_server_id()

        return ConfigSnapshot(
            document=document,
            server_id=server_id,
            config_dir=config_dir,
            loaded_at=time.time()
        )

    def _identity_store_for(self, config_dir: Path) -> IdentityStore:
        store = self._identity_store
        if store is None or store.config_dir != config_dir:
            store = IdentityStore(config_dir)
            self._identity_store = store
        return store

    def reload_configs(self) -> LoadResult:
        """
        Reload from the previously resolved directory.

        Returns:
            LoadResult; NO_CONFIG_LOADED if nothing was loaded before
        """
        config_dir = self.config_dir
        if config_dir is None:
            error = ConfigError(
                code=ErrorCode.NO_CONFIG_LOADED,
                message="Cannot reload: no configuration has been loaded yet",
                suggestion="Call load_configs() first"
            )
            logger.error(error.message)
            return LoadResult.from_error(error)

        logger.info(f"Reloading configuration from {config_dir}")
        return self.load_configs(config_dir)

    def _require_snapshot(self) -> ConfigSnapshot:
        snapshot = self.snapshot
        if snapshot is None:
            raise ConfigError(
                code=ErrorCode.NO_CONFIG_LOADED,
                message="No configuration has been loaded",
                fatal=False
            )
        return snapshot

    def get_current_config_as_json(self) -> Dict[str, Any]:
        """
        JSON-compatible copy of the active configuration.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        return tree_to_json(self._require_snapshot().document.root)

    def get_current_config_as_xml(self) -> ET.Element:
        """
        Copy of the active configuration tree.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        return copy.deepcopy(self._require_snapshot().document.root)

    def save_current_config(self, path: Optional[Path] = None) -> bool:
        """
        Persist the active configuration as XML with a provenance header.

        Args:
            path: Target file (defaults to LastAppliedConfig.xml in the config directory)

        Returns:
            True if the file was written
        """
        try:
            snapshot = self._require_snapshot()
        except ConfigError as e:
            logger.error(f"Could not save config: {e.message}")
            return False

        target = Path(path) if path else snapshot.config_dir / LAST_APPLIED_FILE_NAME
        content = render_saved_document(snapshot.document.root, self.build_info)

        try:
            write_document(target, content)
        except OSError as e:
            logger.error(f"Could not write config to file: {target} ({e})")
            return False

        logger.info(f"Current config is written to {target}")
        return True

    def apply_logger_config(self) -> WatchOutcome:
        """
        Run the logger timestamp check outside a full load.

        Raises:
            ConfigError: If nothing was loaded yet or Logger.xml is invalid
        """
        config_dir = self.config_dir
        if config_dir is None:
            raise ConfigError(
                code=ErrorCode.NO_CONFIG_LOADED,
                message="No configuration has been loaded",
                fatal=False
            )

        outcome = self.logger_watcher.check_and_apply(config_dir / LOGGER_FILE_NAME)
        if outcome == WatchOutcome.APPLIED:
            self.state.logger_applied_count += 1
        return outcome

    def start_watching(self, debounce_ms: int = 500) -> None:
        """
        Watch Logger.xml continuously in addition to on-demand checks.

        Raises:
            ConfigError: If nothing was loaded yet
        """
        config_dir = self.config_dir
        if config_dir is None:
            raise ConfigError(
                code=ErrorCode.NO_CONFIG_LOADED,
                message="Cannot watch logger config before a configuration is loaded",
                fatal=False
            )

        if self.file_watcher and self.file_watcher.is_running():
            return

        self.file_watcher = FileWatcher(
            watched_file=config_dir / LOGGER_FILE_NAME,
            callback=self.apply_logger_config,
            debounce_ms=debounce_ms
        )
        self.file_watcher.start()
        self.state.file_watcher_active = True

    def stop_watching(self) -> None:
        if self.file_watcher:
            self.file_watcher.stop()
        self.state.file_watcher_active = False

    def close(self) -> None:
        """Stop watching and detach log file sinks."""
        self.stop_watching()
        self.log_control.close()

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
