"""
Unit tests for file_utils module.
"""

import pytest
from pathlib import Path

from tmx_splitter.utils import file_utils


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_create_nested_directories(self, tmp_path):
        """Test creating nested directories."""
        nested_dir = tmp_path / "level1" / "level2"

        file_utils.ensure_directory(nested_dir)

        assert nested_dir.is_dir()

    def test_existing_directory_no_error(self, tmp_path):
        """Test that existing directory doesn't raise error."""
        file_utils.ensure_directory(str(tmp_path))

    def test_file_in_the_way_raises(self, tmp_path):
        """Test that a file at the path raises OSError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(OSError):
            file_utils.ensure_directory(blocker)


class TestOutputPaths:
    """Tests for output path helpers."""

    def test_build_output_path(self, tmp_path):
        """Test split file naming."""
        path = file_utils.build_output_path("/data/memory.tmx", tmp_path, 3)

        assert path == tmp_path / "memory.split.3.tmx"

    def test_build_output_path_for_split_file(self, tmp_path):
        """Test re-splitting a split file does not collide with it."""
        path = file_utils.build_output_path(tmp_path / "memory.split.0.tmx", tmp_path, 0)

        assert path.name == "memory.split.0.split.0.tmx"

    def test_resolve_output_dir_defaults_to_input_dir(self, tmp_path):
        input_path = tmp_path / "memory.tmx"

        assert file_utils.resolve_output_dir(input_path, None) == tmp_path.resolve()

    def test_resolve_output_dir_explicit(self, tmp_path):
        target = tmp_path / "parts"

        assert file_utils.resolve_output_dir("memory.tmx", target) == target.resolve()


class TestListSplitFiles:
    """Tests for list_split_files function."""

    def test_sorted_by_sequence(self, tmp_path):
        """Test numeric (not lexical) ordering and filtering."""
        for name in [
            "memory.split.10.tmx",
            "memory.split.2.tmx",
            "memory.split.0.tmx",
            "memory.split.x.tmx",
            "other.split.1.tmx",
            "memory.tmx",
        ]:
            (tmp_path / name).write_text("")

        files = file_utils.list_split_files(tmp_path, Path("memory.tmx"))

        assert [f.name for f in files] == [
            "memory.split.0.tmx",
            "memory.split.2.tmx",
            "memory.split.10.tmx",
        ]
