"""
Unit tests for output_writer module.
"""

import pytest

from tmx_splitter.processing.output_writer import OutputFile


class TestOutputFile:
    """Tests for OutputFile."""

    def test_position_counts_encoded_bytes(self, tmp_path):
        """Test position reflects bytes, not characters."""
        path = tmp_path / "part.tmx"

        with OutputFile(path, 0, "utf-16-le") as out:
            written = out.write("<tu>äö</tu>\n")

        assert written == 24
        assert out.position == 24
        assert path.read_bytes() == "<tu>äö</tu>\n".encode("utf-16-le")

    def test_bom_character_is_written_as_bom(self, tmp_path):
        """Test U+FEFF in the text comes out as the codec's BOM."""
        path = tmp_path / "bom.tmx"

        with OutputFile(path, 1, "utf-8") as out:
            out.write("\ufeff<tmx/>\n")

        assert path.read_bytes() == b"\xef\xbb\xbf<tmx/>\n"

    def test_close_is_idempotent(self, tmp_path):
        """Test closing twice is harmless."""
        out = OutputFile(tmp_path / "part.tmx", 0, "utf-8")
        out.open()
        out.close()
        out.close()

        assert out.closed

    def test_write_after_close_raises(self, tmp_path):
        """Test writing to a closed file is an error."""
        out = OutputFile(tmp_path / "part.tmx", 0, "utf-8")

        with pytest.raises(ValueError):
            out.write("text")

    def test_handle_closed_on_exception(self, tmp_path):
        """Test the context manager closes the file when the body fails."""
        path = tmp_path / "part.tmx"

        with pytest.raises(RuntimeError):
            with OutputFile(path, 0, "utf-8") as out:
                out.write("partial")
                raise RuntimeError("boom")

        assert out.closed
        assert path.read_bytes() == b"partial"
