"""
Encoding detection for TMX documents.

Determines the text encoding of a document from its byte-order mark. Codec
names are chosen so that decoding keeps the BOM as U+FEFF in the text; the
BOM is then copied into the head of every split file and written back by the
same codec, which preserves it byte for byte.
"""

import locale
import logging
import os
from typing import List, Tuple

from ..utils.error_handlers import STAGE_DETECTION, SplitIOError

logger = logging.getLogger(__name__)

PREFIX_SIZE = 4

# Checked in order; the first matching signature wins.
BOM_SIGNATURES: List[Tuple[bytes, str]] = [
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xfe\xff", "utf-16-be"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\x2b\x2f\x76", "utf-7"),
]


def default_encoding() -> str:
    """Return the platform default text encoding."""
    return locale.getpreferredencoding(False)


def encoding_from_prefix(prefix: bytes) -> str:
    """
    Match a raw byte prefix against the known BOM signatures.

    Args:
        prefix: First bytes of the document (at most PREFIX_SIZE are used).

    Returns:
        Codec name, or the platform default when the prefix is shorter than
        PREFIX_SIZE or carries no known BOM.
    """
    if len(prefix) < PREFIX_SIZE:
        return default_encoding()

    prefix = prefix[:PREFIX_SIZE]
    for signature, encoding in BOM_SIGNATURES:
        if prefix.startswith(signature):
            return encoding

    return default_encoding()


class EncodingDetector:
    """Detects the encoding of a document from its first bytes."""

    def detect(self, file_path: str) -> str:
        """
        Detect the encoding of a document.

        Args:
            file_path: Path to the document.

        Returns:
            Codec name usable with open() and codecs.

        Raises:
            SplitIOError: If the file cannot be read.
        """
        try:
            if os.path.getsize(file_path) < PREFIX_SIZE:
                encoding = default_encoding()
            else:
                with open(file_path, "rb") as f:
                    encoding = encoding_from_prefix(f.read(PREFIX_SIZE))
        except OSError as e:
            raise SplitIOError(
                f"Cannot read input for encoding detection: {e}",
                stage=STAGE_DETECTION,
                source_file=str(file_path),
                path=str(file_path),
                original_error=e,
            ) from e

        logger.debug(f"Detected encoding {encoding} for {file_path}")
        return encoding


def detect_encoding(file_path: str) -> str:
    """Convenience wrapper around EncodingDetector.detect()."""
    return EncodingDetector().detect(file_path)
