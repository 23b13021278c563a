"""Tests for object key construction."""

import re

import pytest

from s3uploads.core.uploads.keys import build_key, file_extension, normalize_prefix

UUID4 = r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"


class TestNormalizePrefix:
    """Tests for prefix normalization."""

    @pytest.mark.parametrize(
        "configured, expected",
        [
            ("", ""),
            (None, ""),
            ("/", ""),
            ("uploads", "uploads/"),
            ("uploads/", "uploads/"),
            ("/uploads", "uploads/"),
            ("/uploads/", "uploads/"),
            ("forum/files", "forum/files/"),
        ],
    )
    def test_normalizes(self, configured, expected):
        assert normalize_prefix(configured) == expected

    def test_strips_only_one_leading_slash(self):
        assert normalize_prefix("//uploads") == "/uploads/"


class TestBuildKey:
    """Tests for unique key generation."""

    def test_key_is_prefix_uuid_extension(self):
        key = build_key("photo.png", "/uploads/")

        assert re.fullmatch(rf"uploads/{UUID4}\.png", key)

    def test_keys_are_unique_for_same_filename(self):
        keys = {build_key("a.png", "uploads") for _ in range(200)}

        assert len(keys) == 200

    def test_no_extension_means_no_suffix(self):
        key = build_key("README", "")

        assert re.fullmatch(UUID4, key)

    def test_only_last_extension_is_kept(self):
        assert build_key("backup.tar.gz").endswith(".gz")
        assert not build_key("backup.tar.gz").endswith(".tar.gz")


class TestFileExtension:

    def test_dotfile_has_no_extension(self):
        assert file_extension(".bashrc") == ""

    def test_directory_dots_are_ignored(self):
        assert file_extension("/tmp/some.dir/file") == ""
