"""
Process-level settings for the configuration manager.

Values come from the environment; every field has a default suitable for a
local install.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "MEDIA_CONFIG_"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class BuildInfo(BaseModel):
    """Version of the running server, used in saved-config provenance."""

    version: str = Field("1.0.0", description="Semantic version")
    git_extra: str = Field("", description="Optional build qualifier, e.g. -12-gabc1234")
    debug: bool = Field(False, description="Debug build")

    @property
    def label(self) -> str:
        mode = " [debug]" if self.debug else ""
        return f"v{self.version}{self.git_extra}{mode}"


class ManagerSettings(BaseModel):
    """Environment surface of the configuration manager."""

    config_dir: Optional[Path] = Field(None, description="Base config directory")
    ignore_last_config: bool = Field(
        False, description="Skip loading the last saved config (interpreted by the caller)"
    )
    debug: bool = Field(False, description="Debug build/run mode")
    log_level: str = Field("INFO", description="Console log level before Logger.xml is applied")

    @classmethod
    def from_env(cls) -> "ManagerSettings":
        """Build settings from MEDIA_CONFIG_* environment variables."""
        config_dir = os.environ.get(f"{ENV_PREFIX}DIR")
        return cls(
            config_dir=Path(config_dir) if config_dir else None,
            ignore_last_config=_env_bool(f"{ENV_PREFIX}IGNORE_LAST_CONFIG"),
            debug=_env_bool(f"{ENV_PREFIX}DEBUG"),
            log_level=os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
        )

    def build_info(self, version: str, git_extra: str = "") -> BuildInfo:
        return BuildInfo(version=version, git_extra=git_extra, debug=self.debug)
