"""
Size notation utilities for the TMX Splitter.

Parses threshold shorthand such as ``100MB`` into bytes and formats byte
counts for progress and summary output. Units are binary multiples.
"""

import re
from typing import Union


SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMGT]?B)?\s*$", re.IGNORECASE)


def parse_size(value: Union[str, int]) -> int:
    """
    Convert a size value to a byte count.

    Accepts plain integers or digit strings optionally suffixed with
    ``KB``, ``MB``, ``GB`` or ``TB`` (case-insensitive, 2^10 steps).

    Args:
        value: Size as int or string (e.g. ``65536``, ``"64KB"``, ``"2 GB"``).

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the value is negative or not in a recognized notation.

    Example:
        >>> parse_size("64KB")
        65536
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid size: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Size cannot be negative: {value}")
        return value

    match = _SIZE_PATTERN.match(str(value))
    if not match:
        raise ValueError(
            f"Invalid size format: {value!r} (expected e.g. 65536, 64KB, 100MB)"
        )

    number, unit = match.groups()
    multiplier = SIZE_UNITS[unit.upper()] if unit else 1
    return int(number) * multiplier


def format_size(size_bytes: int, precision: int = 1) -> str:
    """
    Format a byte count as a human-readable string.

    Args:
        size_bytes: Number of bytes.
        precision: Decimal places for non-byte units.

    Returns:
        String such as ``"512 B"``, ``"64.0 KB"`` or ``"1.5 GB"``.
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in ["KB", "MB", "GB"]:
        size /= 1024
        if size < 1024:
            return f"{size:.{precision}f} {unit}"

    return f"{size / 1024:.{precision}f} TB"
