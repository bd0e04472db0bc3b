"""
Validation utilities for the TMX Splitter.

Provides validation functions for split parameters and input paths.
"""

import os
from typing import Tuple

from .error_handlers import ValidationError


MIN_THRESHOLD_BYTES = 64 * 1024


def validate_threshold(threshold_bytes: int) -> None:
    """
    Check the split threshold against the 64 KiB floor.

    Args:
        threshold_bytes: Threshold in bytes.

    Raises:
        ValidationError: If the threshold is not an int or below the floor.
    """
    if isinstance(threshold_bytes, bool) or not isinstance(threshold_bytes, int):
        raise ValidationError(
            f"Threshold must be an integer byte count, got {threshold_bytes!r}",
            field_name="threshold",
        )

    if threshold_bytes < MIN_THRESHOLD_BYTES:
        raise ValidationError(
            f"Threshold must be at least {MIN_THRESHOLD_BYTES} bytes (64KB), "
            f"got {threshold_bytes}",
            field_name="threshold",
        )


def validate_tmx_file(file_path: str) -> Tuple[bool, str]:
    """
    Validate that the input document exists and is a regular file.

    The extension is not enforced; any line-oriented TMX document is accepted.

    Args:
        file_path: Path to the input document

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not file_path:
        return False, "File path is empty"

    if not os.path.exists(file_path):
        return False, f"File does not exist: {file_path}"

    if not os.path.isfile(file_path):
        return False, f"Path is not a file: {file_path}"

    if not os.access(file_path, os.R_OK):
        return False, f"Permission denied to read file: {file_path}"

    return True, ""
