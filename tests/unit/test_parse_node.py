"""Tests for package.json parsing and writing."""

import json
import os
import stat

import pytest

from core.errors import InvalidManifest, ManifestWriteError
from core.models import ManifestFile
from core.parse_node import dump_package_json, parse_package_json, read_manifest, write_manifest


class TestParsePackageJson:
    """Test package.json parsing."""

    def test_parse_preserves_key_order(self, sample_package_json):
        data = parse_package_json(sample_package_json)
        assert list(data) == ["name", "version", "dependencies", "devDependencies"]
        assert list(data["dependencies"]) == ["express", "lodash"]

    def test_invalid_json(self):
        with pytest.raises(InvalidManifest):
            parse_package_json('{"name": ')

    def test_non_object_root(self):
        with pytest.raises(InvalidManifest):
            parse_package_json('["not", "a", "manifest"]')


class TestDumpPackageJson:
    """Test manifest serialization."""

    def test_two_space_indent_and_trailing_newline(self):
        content = dump_package_json({"name": "app", "dependencies": {"foo": "^1.0.0"}})
        assert content == '{\n  "name": "app",\n  "dependencies": {\n    "foo": "^1.0.0"\n  }\n}\n'

    def test_non_ascii_kept_verbatim(self):
        content = dump_package_json({"author": "Zoë"})
        assert "Zoë" in content

    def test_round_trip_is_stable(self, sample_package_json):
        assert dump_package_json(parse_package_json(sample_package_json)) == sample_package_json


class TestReadWriteManifest:
    """Test reading and atomically writing manifest files."""

    def test_read_manifest(self, make_manifest):
        path = make_manifest("app", {"name": "app"})
        manifest = read_manifest(path)
        assert manifest.path == path
        assert manifest.directory == path.parent
        assert manifest.data == {"name": "app"}

    def test_read_invalid_manifest_mentions_path(self, make_manifest):
        path = make_manifest("app", "{ not json")
        with pytest.raises(InvalidManifest) as exc_info:
            read_manifest(path)
        assert str(path) in str(exc_info.value)

    def test_read_missing_manifest(self, tmp_path):
        with pytest.raises(InvalidManifest):
            read_manifest(tmp_path / "package.json")

    def test_write_replaces_content_without_leftovers(self, make_manifest):
        path = make_manifest("app", {"name": "app"})
        manifest = read_manifest(path)
        manifest.data["version"] = "2.0.0"

        write_manifest(manifest)

        assert json.loads(path.read_text(encoding="utf-8")) == {"name": "app", "version": "2.0.0"}
        assert path.read_text(encoding="utf-8").endswith("}\n")
        assert os.listdir(path.parent) == ["package.json"]

    def test_write_keeps_file_mode(self, make_manifest):
        path = make_manifest("app", {"name": "app"})
        path.chmod(0o644)

        write_manifest(read_manifest(path))

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_write_into_missing_directory_fails(self, tmp_path):
        manifest = ManifestFile(path=tmp_path / "gone" / "package.json", data={})
        with pytest.raises(ManifestWriteError):
            write_manifest(manifest)
