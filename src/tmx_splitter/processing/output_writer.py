"""
Output file writer for split TMX documents.

OutputFile encodes text with the input's codec and keeps an exact count of
the bytes written, which the splitter compares against its threshold.
"""

import codecs
import logging
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class OutputFile:
    """
    One split file, open for writing.

    Use as a context manager so the handle is flushed and closed on every
    exit path:

        with OutputFile(path, 0, "utf-8") as out:
            out.write(envelope.head)

    Attributes:
        path: Destination path.
        sequence: 0-based number of this file in the split.
        encoding: Codec used to encode written text.
        position: Number of bytes written so far.
        record_count: Number of record-closing lines written.
    """

    def __init__(self, path: Path, sequence: int, encoding: str):
        self.path = Path(path)
        self.sequence = sequence
        self.encoding = encoding
        self.position = 0
        self.record_count = 0
        self._encoder = codecs.getincrementalencoder(encoding)()
        self._handle: Optional[BinaryIO] = None

    def __enter__(self) -> "OutputFile":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._handle is None

    def open(self) -> None:
        """Create (or truncate) the destination file."""
        self._handle = open(self.path, "wb")
        logger.debug(f"Opened split file {self.sequence}: {self.path}")

    def write(self, text: str) -> int:
        """
        Encode and write text.

        Returns:
            Number of bytes written.
        """
        if self._handle is None:
            raise ValueError(f"Output file is not open: {self.path}")

        data = self._encoder.encode(text)
        self._handle.write(data)
        self.position += len(data)
        return len(data)

    def close(self) -> None:
        """Flush pending encoder state and close the handle. Idempotent."""
        if self._handle is None:
            return

        handle = self._handle
        self._handle = None
        try:
            data = self._encoder.encode("", final=True)
            if data:
                handle.write(data)
                self.position += len(data)
        finally:
            handle.close()
