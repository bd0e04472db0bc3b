"""
File utilities for the TMX Splitter.

Provides functions for output path resolution and directory management.
"""

import os
from pathlib import Path
from typing import List, Optional, Union


PathType = Union[str, os.PathLike]

SPLIT_FILE_TEMPLATE = "{stem}.split.{sequence}.tmx"


def ensure_directory(path: PathType) -> None:
    """
    Create directory if it doesn't exist, including parent directories.

    Args:
        path: Directory path to create

    Raises:
        OSError: If directory creation fails
    """
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OSError(f"Failed to create directory {path}: {e}") from e


def resolve_output_dir(input_path: PathType, output_dir: Optional[PathType]) -> Path:
    """
    Determine where split files are written.

    Args:
        input_path: Path of the document being split
        output_dir: Explicit output directory, or None to write next to the input

    Returns:
        Absolute output directory path
    """
    if output_dir is None or str(output_dir) == "":
        return Path(input_path).resolve().parent
    return Path(output_dir).expanduser().resolve()


def build_output_path(input_path: PathType, output_dir: PathType, sequence: int) -> Path:
    """
    Build the path of the N-th split file.

    Format: <output_dir>/<input stem>.split.<N>.tmx
    Example: memory.tmx -> memory.split.0.tmx, memory.split.1.tmx, ...

    Args:
        input_path: Path of the document being split
        output_dir: Directory receiving the split files
        sequence: 0-based sequence number

    Returns:
        Output file path
    """
    stem = Path(input_path).stem
    return Path(output_dir) / SPLIT_FILE_TEMPLATE.format(stem=stem, sequence=sequence)


def list_split_files(output_dir: PathType, input_path: PathType) -> List[Path]:
    """
    List split files previously produced for an input, in sequence order.

    Args:
        output_dir: Directory holding the split files
        input_path: Path of the original document

    Returns:
        Existing split file paths sorted by sequence number
    """
    stem = Path(input_path).stem
    prefix = f"{stem}.split."
    found = []
    for item in Path(output_dir).iterdir():
        name = item.name
        if not (item.is_file() and name.startswith(prefix) and name.endswith(".tmx")):
            continue
        sequence = name[len(prefix) : -len(".tmx")]
        if sequence.isdigit():
            found.append((int(sequence), item))
    return [path for _, path in sorted(found)]
