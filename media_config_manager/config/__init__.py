"""
Configuration subsystem for the media server.

Modules:
- layout: File names inside the configuration directory
- version_table: Supported document versions and migration notes
- legacy_guard: Refuse deprecated last-config files
- loader: Load XML/JSON document trees
- logger_loader: Parse and validate Logger.xml
- logger_watcher: Re-apply Logger.xml when its timestamp changes
- identity_store: Durable server identity
- serializer: XML/JSON conversion and saved-config rendering
- file_watcher: Optional continuous watch of Logger.xml
"""

from .version_table import VersionTable
from .legacy_guard import check_legacy_configs
from .loader import DocumentLoader
from .logger_loader import LoggerDocumentLoader
from .logger_watcher import LoggerConfigWatcher
from .identity_store import IdentityStore
from .file_watcher import FileWatcher

__all__ = [
    "VersionTable",
    "check_legacy_configs",
    "DocumentLoader",
    "LoggerDocumentLoader",
    "LoggerConfigWatcher",
    "IdentityStore",
    "FileWatcher",
]
