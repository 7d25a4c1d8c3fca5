"""
Error handling for Media Config Manager.

Structured configuration errors with numeric codes and operator-facing messages.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for Media Config Manager.

    Custom codes (1000-1999):
    - 1000-1099: Document parse/structure errors
    - 1100-1199: Configuration errors
    - 1200-1299: File system errors
    - 1500-1599: State errors
    """

    # Document errors (1000-1099)
    PARSE_ERROR = 1000
    SCHEMA_ERROR = 1001

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    LEGACY_CONFIG_FOUND = 1101
    UNKNOWN_DOCUMENT = 1102
    MISSING_VERSION = 1103
    UNSUPPORTED_VERSION = 1104
    LOG_TAG_FAILED = 1105

    # File system errors (1200-1299)
    FILE_NOT_FOUND = 1200
    FILE_READ_ERROR = 1201
    FILE_WRITE_ERROR = 1202

    # State errors (1500-1599)
    NO_CONFIG_LOADED = 1500


class ConfigError(Exception):
    """Base exception for configuration management errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        fatal: bool = True
    ):
        """
        Initialize configuration error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message (may span several lines)
            suggestion: Suggested recovery action
            context: Additional context for debugging
            fatal: Whether the error must abort startup or reload
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.fatal = fatal
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for reporting.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message,
            "fatal": self.fatal
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigLoadError(ConfigError):
    """Configuration document could not be read or parsed."""

    def __init__(self, file_path: str, reason: str, code: ErrorCode = ErrorCode.CONFIG_LOAD_FAILED):
        """
        Initialize configuration load error.

        Args:
            file_path: Path to configuration file
            reason: Reason for load failure
            code: More specific error code (file missing, parse error, ...)
        """
        super().__init__(
            code=code,
            message=f"Failed to load configuration from {file_path}: {reason}",
            suggestion="Check file syntax and permissions",
            context={"file_path": file_path, "reason": reason}
        )


class LegacyConfigError(ConfigError):
    """A deprecated configuration file is present in the config directory."""

    def __init__(self, file_name: str, config_dir: str):
        super().__init__(
            code=ErrorCode.LEGACY_CONFIG_FOUND,
            message=(
                f"Legacy config file found. Please migrate '{file_name}' "
                f"manually or delete it and run the server again."
            ),
            suggestion=f"Move or delete {file_name} in {config_dir}",
            context={"file_name": file_name, "config_dir": config_dir}
        )


class VersionError(ConfigError):
    """Document is unknown or its version is missing or unsupported."""

    def __init__(self, code: ErrorCode, name: str, version: int, message: str):
        super().__init__(
            code=code,
            message=message,
            suggestion=f"Compare your {name}.xml against misc/conf_examples/{name}.xml",
            context={"document": name, "version": version}
        )


class LogTagError(ConfigError):
    """A log level requested by the logger document could not be applied."""

    def __init__(self, tag_name: str, level: str):
        super().__init__(
            code=ErrorCode.LOG_TAG_FAILED,
            message=f"Could not set log level for tag: {tag_name}",
            suggestion="Check the tag name pattern and level in Logger.xml",
            context={"tag": tag_name, "level": level}
        )
