"""
Document serializer tests.
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from media_config_manager.config.serializer import (
    XML_DECLARATION,
    json_to_tree,
    provenance_comment,
    render_saved_document,
    tree_to_json,
    write_document,
)
from media_config_manager.settings import BuildInfo

SAMPLE = """<Server version="9">
    <Name>MediaServer</Name>
    <VirtualHosts>
        <VirtualHost><Name>default</Name></VirtualHost>
        <VirtualHost><Name>second</Name></VirtualHost>
    </VirtualHosts>
    <Tag name="Thread">text</Tag>
</Server>"""


class TestJsonConversion:

    def test_tree_to_json(self):
        data = tree_to_json(ET.fromstring(SAMPLE))

        server = data["Server"]
        assert server["version"] == "9"
        assert server["Name"] == "MediaServer"
        assert server["VirtualHosts"]["VirtualHost"] == [{"Name": "default"}, {"Name": "second"}]
        assert server["Tag"] == {"name": "Thread", "#text": "text"}

    def test_json_to_tree_restores_structure(self):
        root = json_to_tree(tree_to_json(ET.fromstring(SAMPLE)))

        assert root.tag == "Server"
        assert root.get("version") == "9"
        assert [e.findtext("Name") for e in root.iter("VirtualHost")] == ["default", "second"]
        assert root.find("Tag").get("name") == "Thread"
        assert root.find("Tag").text == "text"

    def test_scalar_json_values(self):
        root = json_to_tree({"Server": {"version": 8, "enabled": True, "Port": 1935}})

        assert root.get("version") == "8"
        assert root.get("enabled") == "true"
        assert root.findtext("Port") == "1935"

    def test_json_requires_single_root(self):
        with pytest.raises(ValueError):
            json_to_tree({"Server": {}, "Logger": {}})


class TestSavedDocument:

    def test_header_layout(self):
        build = BuildInfo(version="0.15.1", git_extra="-3-gabc", debug=True)
        created = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

        text = render_saved_document(ET.fromstring(SAMPLE), build, created)

        assert text.startswith(XML_DECLARATION)
        assert "auto-generated configuration file" in text
        assert "Version: v0.15.1-3-gabc [debug]" in text
        assert "Created: 2026-01-02T03:04:05.678+00:00" in text
        assert "Host: " in text
        assert text.index("<!--") < text.index("<Server")

    def test_release_build_label(self):
        assert BuildInfo(version="1.0.0").label == "v1.0.0"

    def test_comment_has_no_double_dash(self):
        comment = provenance_comment(BuildInfo(version="1.0.0", git_extra="--dirty"))

        assert "--" not in comment

    def test_written_file_is_parseable(self, temp_config_dir):
        path = temp_config_dir / "out" / "Server.xml"
        write_document(path, render_saved_document(ET.fromstring(SAMPLE), BuildInfo()))

        root = ET.parse(path).getroot()
        assert root.tag == "Server"
        assert root.get("version") == "9"
        assert [p.name for p in path.parent.iterdir()] == ["Server.xml"]

    def test_source_tree_not_modified(self):
        root = ET.fromstring(SAMPLE)
        before = ET.tostring(root)

        render_saved_document(root, BuildInfo())

        assert ET.tostring(root) == before
