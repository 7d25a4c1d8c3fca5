"""
Document serializer.

Converts document trees between XML elements and JSON-compatible dicts, and
renders the persisted form of the active configuration with a provenance
header.

JSON convention: attributes and child elements both become keys of the
element's dict, repeated children become lists, text-only elements become
strings, and text alongside attributes is kept under "#text". When going back
to XML, lower-case keys with scalar values become attributes and every other
key becomes a child element.
"""

import copy
import logging
import os
import platform
import tempfile
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..settings import BuildInfo

logger = logging.getLogger(__name__)

TEXT_KEY = "#text"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


def tree_to_json(root: ET.Element) -> Dict[str, Any]:
    """
    Convert an element tree to a JSON-compatible dict keyed by the root name.

    Args:
        root: Root element

    Returns:
        {root.tag: value}
    """
    return {root.tag: _element_to_value(root)}


def _element_to_value(element: ET.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text

    result: Dict[str, Any] = dict(element.attrib)
    for child in children:
        value = _element_to_value(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(value)
        else:
            result[child.tag] = value

    if text:
        result[TEXT_KEY] = text

    return result


def json_to_tree(data: Dict[str, Any]) -> ET.Element:
    """
    Convert a dict produced by tree_to_json (or an equivalent JSON document) to XML.

    Args:
        data: Dict with exactly one key, the root name

    Returns:
        Root element

    Raises:
        ValueError: If `data` does not have exactly one root key
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError("JSON document must contain exactly one root object")

    (root_name, value), = data.items()
    return _build_element(root_name, value)


def _build_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)

    if isinstance(value, dict):
        for key, item in value.items():
            if key == TEXT_KEY:
                element.text = _scalar(item)
            elif _is_attribute(key, item):
                element.set(key, _scalar(item))
            elif isinstance(item, list):
                for entry in item:
                    element.append(_build_element(key, entry))
            else:
                element.append(_build_element(key, item))
    elif value is not None and value != "":
        element.text = _scalar(value)

    return element


def _is_attribute(key: str, value: Any) -> bool:
    return key[:1].islower() and not isinstance(value, (dict, list))


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def tree_to_string(root: ET.Element) -> str:
    """Pretty-printed XML text of `root`. The input tree is not modified."""
    clone = copy.deepcopy(root)
    ET.indent(clone, space="\t")
    return ET.tostring(clone, encoding="unicode")


def provenance_comment(build_info: BuildInfo, created: Optional[datetime] = None) -> str:
    """
    Text of the comment block placed at the top of saved configurations.

    Args:
        build_info: Version information of the running server
        created: Creation time (defaults to now, UTC)

    Returns:
        Comment body (without the <!-- --> markers)
    """
    if created is None:
        created = datetime.now(timezone.utc)

    uts = platform.uname()
    comment = (
        "\n"
        "\tThis is an auto-generated configuration file through API call.\n"
        "\tThe server may not work if it is modified incorrectly.\n"
        "\tYou can use '-i' option to prevent loading this file when the server launches.\n\n"
        f"\tVersion: {build_info.label}\n"
        f"\tCreated: {created.isoformat(timespec='milliseconds')}\n"
        f"\tHost: {uts.node} ({uts.system} {uts.machine} - {uts.release}, {uts.version})\n"
    )
    # "--" is not allowed inside XML comments
    while "--" in comment:
        comment = comment.replace("--", "- -")
    return comment


def render_saved_document(
    root: ET.Element,
    build_info: BuildInfo,
    created: Optional[datetime] = None
) -> str:
    """
    Render a configuration tree as a self-describing XML file.

    Args:
        root: Root element of the configuration
        build_info: Version information for the provenance header
        created: Creation time (defaults to now, UTC)

    Returns:
        XML declaration, provenance comment, then the serialized tree
    """
    return (
        f"{XML_DECLARATION}\n"
        f"<!--{provenance_comment(build_info, created)}-->\n"
        f"{tree_to_string(root)}\n"
    )


def write_document(path: Path, content: str) -> None:
    """
    Write text to `path` atomically (temp file + rename).

    Args:
        path: Destination file
        content: File content

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=path.suffix)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)

    except Exception:
        if Path(temp_path).exists():
            os.unlink(temp_path)
        raise
