"""
Envelope extraction for TMX documents.

The envelope is the boilerplate around the document body: the head (XML
declaration, ``<tmx>`` and ``<header>`` block, up to and including the
``<body>`` line) and the tail (the ``</body>`` line through end of file).
Every split file after the first starts with the head, and every split file
before the last ends with the tail.

Both parts are found with two bounded reads that happen before the main scan:

    * the head is read forward, line by line, until the body-open tag is seen
      outside comments and CDATA sections;
    * the tail is read backwards in growing byte blocks until a body-close
      tag that starts its own line is seen.

Neither read depends on a fixed number of lines. Both are capped (16 MiB by
default) so a document with a missing or misplaced marker is never loaded
whole. A marker that cannot be found is reported as MalformedEnvelopeError
rather than a partial envelope.

Typical usage example:
    encoding = detect_encoding("memory.tmx")
    envelope = EnvelopeExtractor().extract("memory.tmx", encoding)
"""

import codecs
import logging
import os
import re
from typing import Optional

from ..models.data_structures import Envelope
from ..utils.error_handlers import (
    STAGE_EXTRACTION,
    MalformedEnvelopeError,
    SplitIOError,
)

logger = logging.getLogger(__name__)

BODY_OPEN_MARKER = "<body>"
BODY_CLOSE_MARKER = "</body>"

DEFAULT_TAIL_BLOCK_SIZE = 64 * 1024
DEFAULT_MAX_HEAD_SIZE = 16 * 1024 * 1024
DEFAULT_MAX_TAIL_SIZE = 16 * 1024 * 1024

# Comments and CDATA sections are consumed whole (or up to end of the text
# read so far when still open) so that a <body> inside them is skipped.
_HEAD_TOKEN = re.compile(
    r"<!--.*?(?:-->|\Z)"
    r"|<!\[CDATA\[.*?(?:\]\]>|\Z)"
    r"|<body(?:\s[^>]*)?>[ \t]*(?:\r\n|\r|\n)?",
    re.DOTALL,
)

_TAIL_START = re.compile(r"(?:\r\n|\r|\n)([ \t]*</body\s*>)")


def code_unit_width(encoding: str) -> int:
    """Return the byte width of one code unit of the codec (1, 2 or 4)."""
    name = codecs.lookup(encoding).name
    if name.startswith("utf-16"):
        return 2
    if name.startswith("utf-32"):
        return 4
    return 1


class EnvelopeExtractor:
    """
    Finds the head and tail of a TMX document.

    Attributes:
        tail_block_size: Initial size of the backwards read used to find the
            tail; doubled until the marker is found or the file is covered.
        max_head_size: Limit on the number of decoded characters read while
            looking for the body-open tag (None: unlimited).
        max_tail_size: Limit on the bytes read from the end of the file while
            looking for the body-close tag (None: unlimited).
    """

    def __init__(
        self,
        tail_block_size: int = DEFAULT_TAIL_BLOCK_SIZE,
        max_head_size: Optional[int] = DEFAULT_MAX_HEAD_SIZE,
        max_tail_size: Optional[int] = DEFAULT_MAX_TAIL_SIZE,
    ):
        if tail_block_size <= 0:
            raise ValueError(f"tail_block_size must be positive, got {tail_block_size}")
        if max_tail_size is not None and max_tail_size <= 0:
            raise ValueError(f"max_tail_size must be positive, got {max_tail_size}")
        self.tail_block_size = tail_block_size
        self.max_head_size = max_head_size
        self.max_tail_size = max_tail_size

    def extract(self, file_path: str, encoding: str) -> Envelope:
        """
        Extract the envelope of a document.

        Args:
            file_path: Path to the document.
            encoding: Codec detected for the document.

        Returns:
            Envelope holding head and tail text.

        Raises:
            MalformedEnvelopeError: If the body-open or body-close tag is missing.
            SplitIOError: If the document cannot be read or decoded.
        """
        head = self.find_head(file_path, encoding)
        if head is None:
            raise MalformedEnvelopeError(
                f"Body-open tag {BODY_OPEN_MARKER} not found in {file_path}",
                marker=BODY_OPEN_MARKER,
                source_file=str(file_path),
            )

        tail = self.find_tail(file_path, encoding)
        if tail is None:
            raise MalformedEnvelopeError(
                f"Body-close tag {BODY_CLOSE_MARKER} not found at the start of a "
                f"line in {file_path}",
                marker=BODY_CLOSE_MARKER,
                source_file=str(file_path),
            )

        logger.debug(
            f"Envelope of {file_path}: head {len(head)} chars, tail {len(tail)} chars"
        )
        return Envelope(head=head, tail=tail, encoding=encoding)

    def find_head(self, file_path: str, encoding: str) -> Optional[str]:
        """
        Read forward until the body-open tag and return the text through it.

        The returned text ends after the tag plus any spaces, tabs and the
        line break that follow it on the same line.

        Returns:
            The head text, or None if the tag was not found.
        """
        text = ""
        scan_from = 0

        try:
            with open(file_path, "r", encoding=encoding, newline="") as reader:
                for line in reader:
                    text += line
                    pos = scan_from

                    while True:
                        match = _HEAD_TOKEN.search(text, pos)
                        if match is None:
                            # Restart from the last '<' in case a tag is split
                            # across lines.
                            last_open = text.rfind("<", pos)
                            scan_from = last_open if last_open != -1 else len(text)
                            break

                        token = match.group(0)
                        if token.startswith("<body"):
                            return text[: match.end()]
                        if not token.endswith(("-->", "]]>")):
                            # Still inside a comment or CDATA section
                            scan_from = match.start()
                            break
                        pos = match.end()

                    if self.max_head_size is not None and len(text) > self.max_head_size:
                        logger.warning(
                            f"No {BODY_OPEN_MARKER} within the first "
                            f"{self.max_head_size} characters of {file_path}"
                        )
                        return None
        except (OSError, UnicodeDecodeError) as e:
            raise self._read_error(file_path, encoding, e) from e

        return None

    def find_tail(self, file_path: str, encoding: str) -> Optional[str]:
        """
        Read backwards until a line starting with the body-close tag.

        Windows are aligned to the codec's code unit; any characters garbled
        by a window boundary lie before the line break that anchors the
        match and are never part of the result.

        Returns:
            The tail text (indentation of the ``</body>`` line through end of
            file), or None if no such line exists within max_tail_size bytes
            of the end.
        """
        unit = code_unit_width(encoding)
        is_utf8 = codecs.lookup(encoding).name == "utf-8"
        block = self.tail_block_size
        if self.max_tail_size is not None:
            block = min(block, self.max_tail_size)

        try:
            size = os.path.getsize(file_path)
            with open(file_path, "rb") as f:
                while True:
                    offset = max(0, size - block)
                    offset -= offset % unit
                    f.seek(offset)
                    data = f.read(size - offset)

                    if is_utf8:
                        # Skip UTF-8 continuation bytes at the window start
                        start = 0
                        while start < len(data) and (data[start] & 0xC0) == 0x80:
                            start += 1
                        data = data[start:]

                    text = data.decode(encoding, errors="replace")
                    matches = list(_TAIL_START.finditer(text))
                    if matches:
                        return text[matches[-1].start(1) :]

                    if offset == 0:
                        return None
                    if self.max_tail_size is not None:
                        if block >= self.max_tail_size:
                            logger.warning(
                                f"No {BODY_CLOSE_MARKER} line within the last "
                                f"{self.max_tail_size} bytes of {file_path}"
                            )
                            return None
                        block = min(block * 2, self.max_tail_size)
                    else:
                        block *= 2
        except OSError as e:
            raise self._read_error(file_path, encoding, e) from e

    @staticmethod
    def _read_error(file_path: str, encoding: str, error: Exception) -> SplitIOError:
        if isinstance(error, UnicodeDecodeError):
            message = f"Cannot decode {file_path} as {encoding}: {error}"
        else:
            message = f"Cannot read {file_path}: {error}"
        return SplitIOError(
            message,
            stage=STAGE_EXTRACTION,
            source_file=str(file_path),
            path=str(file_path),
            original_error=error,
        )
