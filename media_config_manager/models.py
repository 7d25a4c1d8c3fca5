"""
Data models for media server configuration management.

Pydantic models for validated values (log tags, load results, build info) and
frozen dataclasses for the opaque document trees.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError, ErrorCode


# Enumerations

class Severity(str, Enum):
    """Outcome severity of a configuration operation."""
    NONE = "none"
    WARNING = "warning"
    FATAL = "fatal"


class DocumentFormat(str, Enum):
    """On-disk document format."""
    XML = "xml"
    JSON = "json"


class WatchOutcome(str, Enum):
    """Result of a logger configuration check."""
    MISSING = "missing"
    UNCHANGED = "unchanged"
    APPLIED = "applied"


# Logger document

class LogTag(BaseModel):
    """Logging category pattern with its requested verbosity."""

    name: str = Field(..., min_length=1, description="Tag name or regex pattern")
    level: str = Field(..., description="Requested level (debug, info, warn, error, critical)")

    @field_validator('level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().lower()


class LoggerConfig(BaseModel):
    """Parsed logger document."""

    version: int = Field(0, description="Document version (0 when absent or unparsable)")
    log_path: str = Field(..., description="Directory for log files")
    tags: List[LogTag] = Field(default_factory=list, description="Tags in order of appearance")


@dataclass(frozen=True)
class LoggerWatchState:
    """Last observed modification time of the logger document."""

    seconds: int = 0
    nanoseconds: int = 0

    @classmethod
    def from_mtime_ns(cls, mtime_ns: int) -> "LoggerWatchState":
        seconds, nanoseconds = divmod(mtime_ns, 1_000_000_000)
        return cls(seconds=seconds, nanoseconds=nanoseconds)


# Main document

@dataclass(frozen=True)
class ConfigDocument:
    """A loaded document tree. Opaque beyond its root name and version."""

    root_name: str
    root: ET.Element
    source_path: Path

    @property
    def version(self) -> int:
        """Integer value of the root `version` attribute, 0 when absent or unparsable."""
        raw = self.root.get("version")
        if raw is None:
            return 0
        try:
            return int(raw.strip())
        except ValueError:
            return 0


@dataclass(frozen=True)
class ConfigSnapshot:
    """Fully validated configuration published to readers."""

    document: ConfigDocument
    server_id: str
    config_dir: Path
    loaded_at: float = field(default=0.0, compare=False)

    @property
    def root_name(self) -> str:
        return self.document.root_name

    @property
    def version(self) -> int:
        return self.document.version


# Results

class LoadResult(BaseModel):
    """Explicit outcome of a load or reload."""

    success: bool = Field(..., description="Whether a new snapshot was published")
    severity: Severity = Field(Severity.NONE)
    code: Optional[int] = Field(None, description="ErrorCode value for failures")
    message: Optional[str] = Field(None, description="Operator-facing error message")
    suggestion: Optional[str] = Field(None)
    warnings: List[str] = Field(default_factory=list)
    config_dir: Optional[str] = Field(None)

    @classmethod
    def from_error(cls, error: ConfigError, warnings: Optional[List[str]] = None,
                   config_dir: Optional[str] = None) -> "LoadResult":
        return cls(
            success=False,
            severity=Severity.FATAL if error.fatal else Severity.WARNING,
            code=error.code.value,
            message=error.message,
            suggestion=error.suggestion,
            warnings=warnings or [],
            config_dir=config_dir
        )

    @property
    def is_fatal(self) -> bool:
        return self.severity == Severity.FATAL

    def raise_if_fatal(self) -> None:
        """
        Re-raise a fatal outcome as ConfigError.

        Raises:
            ConfigError: If this result carries a fatal error
        """
        if self.is_fatal:
            raise ConfigError(
                code=ErrorCode(self.code),
                message=self.message or "Configuration load failed",
                suggestion=self.suggestion
            )
