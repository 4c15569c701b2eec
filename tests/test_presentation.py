"""Tests for node file-type, colour and purpose labels."""

from __future__ import annotations

import pytest

from repograph.presentation import FILE_TYPE_COLORS, classify_file, describe_folder, describe_purpose


class TestClassifyFile:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/index.ts", "entry"),
            ("cmd/server/main.go", "entry"),
            ("tests/test_api.py", "test"),
            ("src/Button.test.tsx", "test"),
            ("src/api/users.ts", "api"),
            ("app/controllers/users_controller.rb", "api"),
            ("src/components/Button.tsx", "component"),
            ("src/utils/format.ts", "util"),
            ("src/lib/strings.py", "util"),
            ("app/models/user.rb", "model"),
            ("src/services/auth.ts", "service"),
            ("docs/guide.md", "docs"),
            ("README.md", "docs"),
            ("package.json", "config"),
            ("vite.config.ts", "config"),
            ("src/thing.ts", "source"),
        ],
    )
    def test_file_types(self, path, expected):
        file_type, color = classify_file(path)
        assert file_type == expected
        assert color == FILE_TYPE_COLORS[expected]

    def test_directories_are_never_entry_points(self):
        assert classify_file("src/index/")[0] == "source"
        assert classify_file("components/")[0] == "component"

    def test_deterministic(self):
        assert classify_file("src/api/x.ts") == classify_file("src/api/x.ts")


class TestDescribePurpose:
    def test_isolated(self):
        assert describe_purpose("source", 0, 0) == "Source module"

    def test_leaf(self):
        assert describe_purpose("util", 3, 0) == "Shared utility, leaf module"

    def test_top_level(self):
        assert describe_purpose("entry", 0, 2) == "Entry point, top-level importer of 2 files"
        assert describe_purpose("entry", 0, 1) == "Entry point, top-level importer of 1 file"

    def test_hub(self):
        assert describe_purpose("model", 5, 1) == "Data model or schema, hub imported by 5 files"

    def test_middle(self):
        assert describe_purpose("service", 2, 3) == "Service or provider, imports 3, imported by 2"

    def test_unknown_type_uses_source_label(self):
        assert describe_purpose("mystery", 0, 0) == "Source module"


def test_describe_folder():
    assert describe_folder(1) == "Directory with 1 file"
    assert describe_folder(0) == "Directory with 0 files"
