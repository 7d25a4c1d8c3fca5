"""
Document version compatibility table.

Maps each document name to the versions the loader accepts, and records the
breaking changes introduced at each version boundary so outdated documents
can be rejected with migration guidance.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import ErrorCode, VersionError

logger = logging.getLogger(__name__)

EXAMPLES_DIR = "misc/conf_examples"

# Modify if a supported document version is added or changed
DEFAULT_SUPPORTED_VERSIONS: Dict[str, Tuple[int, ...]] = {
    "Server": (8, 9),
    "Logger": (2,),
}

# Boundary b lists the changes made going from v<b> to v<b+1>
DEFAULT_CHANGELOG: Dict[str, Dict[int, Tuple[str, ...]]] = {
    "Server": {
        7: (
            "Added <Server>.<Bind>.<Managers>.<API> for setting API binding port",
            "Added <Server>.<API> for setting API server",
            "Added <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<OutputProfiles>",
            "Changed <Server>.<VirtualHosts>.<VirtualHost>.<Domain> to <Host>",
            "Changed <CrossDomain> to <CrossDomains>",
            "Deleted <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<Streams>",
            "Deleted <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<Encodes>",
        ),
        8: (
            "Added <Server>.<Bind>.<Managers>.<API>.<Storage> to store configs created using API",
        ),
    },
}


class VersionTable:
    """Immutable document name -> supported versions mapping."""

    def __init__(
        self,
        supported: Optional[Mapping[str, Iterable[int]]] = None,
        changelog: Optional[Mapping[str, Mapping[int, Iterable[str]]]] = None
    ):
        """
        Initialize version table.

        Args:
            supported: Document name to accepted versions (defaults to the built-in table)
            changelog: Document name to {boundary: changes} (defaults to the built-in changelog)
        """
        if supported is None:
            supported = DEFAULT_SUPPORTED_VERSIONS
        if changelog is None:
            changelog = DEFAULT_CHANGELOG

        self._supported: Dict[str, Tuple[int, ...]] = {
            name: tuple(sorted(set(versions)))
            for name, versions in supported.items()
        }
        self._changelog: Dict[str, Dict[int, Tuple[str, ...]]] = {
            name: {boundary: tuple(changes) for boundary, changes in sorted(entries.items())}
            for name, entries in changelog.items()
        }

    def __contains__(self, name: str) -> bool:
        return name in self._supported

    def supported_versions(self, name: str) -> Tuple[int, ...]:
        return self._supported.get(name, ())

    def latest_version(self, name: str) -> int:
        versions = self._supported.get(name, ())
        return versions[-1] if versions else 0

    def migration_notes(self, name: str, version: int) -> List[Tuple[int, Tuple[str, ...]]]:
        """
        Changes a document at `version` must go through, oldest boundary first.

        Args:
            name: Document name
            version: Version offered by the document

        Returns:
            (boundary, changes) pairs for every known boundary >= version
        """
        entries = self._changelog.get(name, {})
        return [(boundary, changes) for boundary, changes in entries.items() if version <= boundary]

    def check_valid_version(self, name: str, version: int) -> None:
        """
        Validate a document version against the table.

        Args:
            name: Document (root) name, e.g. "Server"
            version: Version read from the document, 0 when absent

        Raises:
            VersionError: If the document is unknown, unversioned, or unsupported
        """
        if name not in self._supported:
            raise VersionError(
                ErrorCode.UNKNOWN_DOCUMENT, name, version,
                f"Cannot find conf XML ({name}.xml)"
            )

        if version == 0:
            raise VersionError(
                ErrorCode.MISSING_VERSION, name, version,
                f"Could not obtain version in your XML. "
                f"If you have upgraded the server, see {EXAMPLES_DIR}/{name}.xml"
            )

        if version in self._supported[name]:
            logger.debug(f"{name}.xml version {version} accepted")
            return

        lines = [
            f"The version of {name}.xml is outdated "
            f"(Your XML version: {version}, Latest version: {self.latest_version(name)}).",
            f"If you have upgraded the server, see {EXAMPLES_DIR}/{name}.xml",
        ]
        for boundary, changes in self.migration_notes(name, version):
            lines.append(f"Major Changes (v{boundary} -> v{boundary + 1}):")
            lines.extend(f" - {change}" for change in changes)

        raise VersionError(ErrorCode.UNSUPPORTED_VERSION, name, version, "\n".join(lines))
