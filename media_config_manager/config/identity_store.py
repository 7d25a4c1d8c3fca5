"""
Server identity store.

Keeps a durable identifier for this installation in a one-line file under the
config directory. The identifier only needs to be stable and practically
unique, so a random UUID is generated once and reused afterwards.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from .layout import SERVER_ID_FILE_NAME

logger = logging.getLogger(__name__)


class IdentityStore:
    """Loads or generates the server identity."""

    def __init__(self, config_dir: Path):
        """
        Initialize identity store.

        Args:
            config_dir: Configuration directory holding the identity file
        """
        self.config_dir = config_dir
        self.id_file = config_dir / SERVER_ID_FILE_NAME
        # Generated but not yet persisted; reused until a store succeeds
        self.pending_id: Optional[str] = None

    def load_from_storage(self) -> Optional[str]:
        """
        Read the stored identity.

        Returns:
            First line of the identity file without its newline, or None if unreadable
        """
        try:
            with open(self.id_file, "r", encoding="utf-8", newline="") as f:
                line = f.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read server ID from {self.id_file}: {e}")
            return None

        return line.rstrip("\n")

    def store(self, server_id: str) -> bool:
        """
        Persist `server_id`, overwriting previous content.

        Returns:
            True on success, False if the file could not be written
        """
        try:
            with open(self.id_file, "w", encoding="utf-8") as f:
                f.write(server_id)
        except OSError as e:
            logger.error(f"Failed to store server ID to {self.id_file}: {e}")
            return False

        logger.info(f"Stored new server ID to {self.id_file}")
        return True

    @staticmethod
    def generate() -> str:
        return str(uuid.uuid4())

    def load_server_id(self) -> str:
        """
        Load the identity, generating and persisting a new one if none is stored.

        A persistence failure is logged; the generated identity is still returned
        and reused by later calls on this store until it is persisted.

        Returns:
            Server identity
        """
        server_id = self.load_from_storage()
        if server_id is not None:
            logger.debug(f"Loaded server ID: {server_id}")
            return server_id

        if self.pending_id is not None:
            if self.store(self.pending_id):
                server_id, self.pending_id = self.pending_id, None
                return server_id
            return self.pending_id

        server_id = self.generate()
        logger.info(f"Generated new server ID: {server_id}")
        if not self.store(server_id):
            self.pending_id = server_id
        return server_id
