"""Utility functions for the TMX splitter."""

from .file_utils import build_output_path, ensure_directory, resolve_output_dir
from .size_utils import format_size, parse_size
from .validation_utils import MIN_THRESHOLD_BYTES, validate_threshold, validate_tmx_file

__all__ = [
    "build_output_path",
    "ensure_directory",
    "resolve_output_dir",
    "format_size",
    "parse_size",
    "MIN_THRESHOLD_BYTES",
    "validate_threshold",
    "validate_tmx_file",
]
