"""
Logger document loader.

Parses Logger.xml:

    <Logger version="2">
        <Tag name="Thread" level="info" />
        <Tag name="RTMP.*" level="debug" />
        <Path>/var/log/media-server</Path>
    </Logger>

and validates its structure with JSON Schema before building a LoggerConfig.
"""

import logging
from pathlib import Path
from typing import Optional

import jsonschema

from ..errors import ConfigError, ErrorCode
from ..models import DocumentFormat, LoggerConfig, LogTag
from .layout import LOGGER_ROOT_NAME
from .loader import DocumentLoader
from .serializer import tree_to_json

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = "/var/log/media-server"

_TAG_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "level": {"type": "string", "minLength": 1},
    },
    "required": ["name", "level"],
}

LOGGER_SCHEMA = {
    "type": "object",
    "properties": {
        "version": {"type": "string"},
        "Path": {"type": "string"},
        "Tag": {
            "oneOf": [
                _TAG_SCHEMA,
                {"type": "array", "items": _TAG_SCHEMA},
            ]
        },
    },
}


class LoggerDocumentLoader:
    """Loads and validates the logger document."""

    def __init__(self, config_path: Path, loader: Optional[DocumentLoader] = None):
        """
        Initialize logger document loader.

        Args:
            config_path: Full path to Logger.xml
            loader: Document loader (defaults to a new DocumentLoader)
        """
        self.config_path = config_path
        self.loader = loader or DocumentLoader()

    def parse(self) -> LoggerConfig:
        """
        Parse the logger document.

        Returns:
            LoggerConfig with version, log path and tags

        Raises:
            ConfigLoadError: If the file cannot be read or parsed
            ConfigError: If the document structure is invalid
        """
        document = self.loader.load(
            DocumentFormat.XML,
            self.config_path.parent,
            self.config_path.name,
            LOGGER_ROOT_NAME
        )

        body = tree_to_json(document.root)[LOGGER_ROOT_NAME]
        if isinstance(body, str):
            body = {}

        try:
            jsonschema.validate(instance=body, schema=LOGGER_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path) or LOGGER_ROOT_NAME
            raise ConfigError(
                code=ErrorCode.SCHEMA_ERROR,
                message=f"Invalid logger configuration at {location}: {e.message}",
                suggestion="Each <Tag> needs 'name' and 'level' attributes",
                context={"file_path": str(self.config_path)}
            ) from e

        tags = body.get("Tag", [])
        if isinstance(tags, dict):
            tags = [tags]

        config = LoggerConfig(
            version=document.version,
            log_path=body.get("Path") or DEFAULT_LOG_PATH,
            tags=[LogTag(name=tag["name"], level=tag["level"]) for tag in tags]
        )

        logger.debug(f"Parsed logger config: {len(config.tags)} tags, path {config.log_path}")
        return config
