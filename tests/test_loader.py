"""
Document loader tests.
"""

import json

import pytest

from media_config_manager.config.loader import DocumentLoader
from media_config_manager.errors import ConfigLoadError, ErrorCode
from media_config_manager.models import DocumentFormat


class TestXmlDocuments:

    def test_loads_version_and_root(self, temp_config_dir, write_server_xml):
        write_server_xml(version="8")

        document = DocumentLoader().load(DocumentFormat.XML, temp_config_dir, "Server.xml", "Server")

        assert document.root_name == "Server"
        assert document.version == 8
        assert document.source_path == temp_config_dir / "Server.xml"

    def test_missing_file(self, temp_config_dir):
        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("xml", temp_config_dir, "Server.xml", "Server")

        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND

    def test_malformed_xml(self, temp_config_dir):
        (temp_config_dir / "Server.xml").write_text("<Server version='9'>")

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("xml", temp_config_dir, "Server.xml", "Server")

        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    def test_wrong_root(self, temp_config_dir):
        (temp_config_dir / "Server.xml").write_text("<Logger version='2'/>")

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("xml", temp_config_dir, "Server.xml", "Server")

        assert exc_info.value.code == ErrorCode.SCHEMA_ERROR

    @pytest.mark.parametrize("attribute,expected", [
        ("", 0),
        ('version="abc"', 0),
        ('version=" 9 "', 9),
    ])
    def test_version_parsing(self, temp_config_dir, attribute, expected):
        (temp_config_dir / "Server.xml").write_text(f"<Server {attribute}/>")

        document = DocumentLoader().load("xml", temp_config_dir, "Server.xml", "Server")

        assert document.version == expected


class TestJsonDocuments:

    def test_loads_json_document(self, temp_config_dir):
        data = {"Server": {"version": 9, "Name": "MediaServer"}}
        (temp_config_dir / "Server.json").write_text(json.dumps(data))

        document = DocumentLoader().load(DocumentFormat.JSON, temp_config_dir, "Server.json", "Server")

        assert document.version == 9
        assert document.root.findtext("Name") == "MediaServer"

    def test_malformed_json(self, temp_config_dir):
        (temp_config_dir / "Server.json").write_text("{invalid json}")

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("json", temp_config_dir, "Server.json", "Server")

        assert exc_info.value.code == ErrorCode.PARSE_ERROR

    def test_json_without_single_root(self, temp_config_dir):
        (temp_config_dir / "Server.json").write_text("[1, 2]")

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("json", temp_config_dir, "Server.json", "Server")

        assert exc_info.value.code == ErrorCode.SCHEMA_ERROR

    def test_json_not_utf8(self, temp_config_dir):
        (temp_config_dir / "Server.json").write_bytes(b'{"Server": {"Name": "\xff\xfe"}}')

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("json", temp_config_dir, "Server.json", "Server")

        assert exc_info.value.code == ErrorCode.PARSE_ERROR


class TestDocumentFormats:

    def test_unknown_format(self, temp_config_dir, write_server_xml):
        write_server_xml()

        with pytest.raises(ConfigLoadError) as exc_info:
            DocumentLoader().load("yaml", temp_config_dir, "Server.xml", "Server")

        assert exc_info.value.code == ErrorCode.SCHEMA_ERROR
        assert "yaml" in exc_info.value.message
