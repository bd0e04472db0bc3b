"""
Unit tests for validation_utils module.
"""

import pytest

from tmx_splitter.utils.error_handlers import ValidationError
from tmx_splitter.utils.validation_utils import (
    MIN_THRESHOLD_BYTES,
    validate_threshold,
    validate_tmx_file,
)


class TestValidateThreshold:
    """Tests for validate_threshold function."""

    def test_floor_is_64kb(self):
        assert MIN_THRESHOLD_BYTES == 65536

    def test_floor_accepted(self):
        validate_threshold(65536)

    def test_below_floor_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_threshold(65535)

        assert exc_info.value.stage == "validation"
        assert "65535" in exc_info.value.message

    def test_float_rejected(self):
        with pytest.raises(ValidationError):
            validate_threshold(70000.0)


class TestValidateTmxFile:
    """Tests for validate_tmx_file function."""

    def test_existing_file(self, tmp_path):
        path = tmp_path / "memory.tmx"
        path.write_text("<tmx/>")

        assert validate_tmx_file(str(path)) == (True, "")

    def test_missing_file(self, tmp_path):
        is_valid, message = validate_tmx_file(str(tmp_path / "missing.tmx"))

        assert not is_valid
        assert "does not exist" in message

    def test_directory(self, tmp_path):
        is_valid, message = validate_tmx_file(str(tmp_path))

        assert not is_valid
        assert "not a file" in message

    def test_empty_path(self):
        assert validate_tmx_file("") == (False, "File path is empty")
