"""
Document loader for configuration files.

Turns a (format, directory, filename, root name) tuple into a ConfigDocument.
Supports:
- XML documents (Server.xml, LastAppliedConfig.xml, ...)
- JSON documents using the serializer's attribute/element convention
"""

import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from ..errors import ConfigLoadError, ErrorCode
from ..models import ConfigDocument, DocumentFormat
from .serializer import json_to_tree

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Loads versioned document trees from XML or JSON files."""

    def load(
        self,
        fmt: Union[DocumentFormat, str],
        directory: Path,
        filename: str,
        root_name: str
    ) -> ConfigDocument:
        """
        Load and parse a document.

        Args:
            fmt: Document format
            directory: Directory containing the document
            filename: Document file name
            root_name: Expected name of the root element

        Returns:
            ConfigDocument wrapping the parsed tree

        Raises:
            ConfigLoadError: If the file is missing, malformed, or has the wrong root
        """
        path = Path(directory) / filename
        try:
            fmt = DocumentFormat(fmt)
        except ValueError as e:
            raise ConfigLoadError(str(path), f"unsupported document format: {fmt}", ErrorCode.SCHEMA_ERROR) from e

        if not path.is_file():
            raise ConfigLoadError(str(path), "file not found", ErrorCode.FILE_NOT_FOUND)

        logger.debug(f"Parsing {fmt.value} document: {path}")

        if fmt == DocumentFormat.XML:
            root = self._parse_xml(path)
        else:
            root = self._parse_json(path)

        if root.tag != root_name:
            raise ConfigLoadError(
                str(path),
                f"unexpected root element <{root.tag}> (expected <{root_name}>)",
                ErrorCode.SCHEMA_ERROR
            )

        return ConfigDocument(root_name=root_name, root=root, source_path=path)

    def _parse_xml(self, path: Path) -> ET.Element:
        try:
            return ET.parse(path).getroot()
        except ET.ParseError as e:
            raise ConfigLoadError(str(path), f"invalid XML: {e}", ErrorCode.PARSE_ERROR) from e
        except OSError as e:
            raise ConfigLoadError(str(path), str(e), ErrorCode.FILE_READ_ERROR) from e

    def _parse_json(self, path: Path) -> ET.Element:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(str(path), f"invalid JSON: {e}", ErrorCode.PARSE_ERROR) from e
        except UnicodeDecodeError as e:
            raise ConfigLoadError(str(path), f"invalid UTF-8: {e}", ErrorCode.PARSE_ERROR) from e
        except OSError as e:
            raise ConfigLoadError(str(path), str(e), ErrorCode.FILE_READ_ERROR) from e

        try:
            return json_to_tree(data)
        except ValueError as e:
            raise ConfigLoadError(str(path), str(e), ErrorCode.SCHEMA_ERROR) from e
