"""
Server identity persistence tests.
"""

import uuid

from media_config_manager.config.identity_store import IdentityStore


class TestIdentityStore:

    def test_generated_identity_round_trip(self, temp_config_dir):
        """A generated ID is persisted and loaded back unchanged."""
        first = IdentityStore(temp_config_dir).load_server_id()
        second = IdentityStore(temp_config_dir).load_server_id()

        assert first == second
        assert (temp_config_dir / "Server.id").read_text() == first
        uuid.UUID(first)

    def test_deleting_storage_regenerates(self, temp_config_dir):
        store = IdentityStore(temp_config_dir)
        first = store.load_server_id()

        (temp_config_dir / "Server.id").unlink()
        second = store.load_server_id()

        assert second != first
        assert (temp_config_dir / "Server.id").read_text() == second

    def test_stored_value_used_as_is(self, temp_config_dir):
        """No format validation: any stored line is the identity."""
        (temp_config_dir / "Server.id").write_text("my-custom-server\nignored second line\n")

        assert IdentityStore(temp_config_dir).load_server_id() == "my-custom-server"

    def test_write_failure_still_returns_identity(self, temp_config_dir):
        missing_dir = temp_config_dir / "does-not-exist"
        store = IdentityStore(missing_dir)

        server_id = store.load_server_id()

        assert server_id
        assert not (missing_dir / "Server.id").exists()

    def test_store_reports_failure(self, temp_config_dir):
        store = IdentityStore(temp_config_dir / "does-not-exist")

        assert store.store("abc") is False
        assert IdentityStore(temp_config_dir).store("abc") is True
        assert IdentityStore(temp_config_dir).load_from_storage() == "abc"

    def test_undecodable_storage_regenerates(self, temp_config_dir):
        """Bytes that are not UTF-8 count as no stored identity."""
        (temp_config_dir / "Server.id").write_bytes(b"\xff\xfe\xfa\n")
        store = IdentityStore(temp_config_dir)

        assert store.load_from_storage() is None

        server_id = store.load_server_id()
        uuid.UUID(server_id)
        assert (temp_config_dir / "Server.id").read_text() == server_id

    def test_only_newline_is_stripped(self, temp_config_dir):
        (temp_config_dir / "Server.id").write_bytes(b"abc\r\n")

        assert IdentityStore(temp_config_dir).load_server_id() == "abc\r"

    def test_unsaved_identity_is_reused(self, temp_config_dir):
        """An ID that could not be persisted stays the same on later loads."""
        (temp_config_dir / "Server.id").mkdir()
        store = IdentityStore(temp_config_dir)

        first = store.load_server_id()
        second = store.load_server_id()

        assert first == second
        assert store.pending_id == first

    def test_unsaved_identity_persisted_once_writable(self, temp_config_dir):
        id_path = temp_config_dir / "Server.id"
        id_path.mkdir()
        store = IdentityStore(temp_config_dir)
        first = store.load_server_id()

        id_path.rmdir()

        assert store.load_server_id() == first
        assert id_path.read_text() == first
        assert store.pending_id is None
