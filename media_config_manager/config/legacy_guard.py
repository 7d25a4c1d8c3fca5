"""
Legacy configuration guard.

Refuses to start when a deprecated last-config file is present. Those files
are never migrated automatically: the loader no longer understands their
format, so the operator must migrate or delete them.
"""

import logging
from pathlib import Path

from ..errors import LegacyConfigError
from .layout import LEGACY_LAST_CONFIG_FILE_NAME, LEGACY_LAST_CONFIG_FILE_NAME_OLD

logger = logging.getLogger(__name__)

LEGACY_FILE_NAMES = (LEGACY_LAST_CONFIG_FILE_NAME, LEGACY_LAST_CONFIG_FILE_NAME_OLD)


def check_legacy_configs(config_dir: Path) -> None:
    """
    Fail fast if a deprecated config file exists in `config_dir`.

    Args:
        config_dir: Configuration directory

    Raises:
        LegacyConfigError: If any legacy file is found
    """
    for name in LEGACY_FILE_NAMES:
        if (config_dir / name).is_file():
            logger.error(f"Legacy config file found: {config_dir / name}")
            raise LegacyConfigError(name, str(config_dir))
