"""
Core data structures for the TMX Splitter.

Defines the envelope extracted from the input document, the splitter state
machine, and the structured report returned by a split run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class SplitState(Enum):
    """States of the streaming split pass."""

    WRITING = "writing"
    THRESHOLD_CHECK = "threshold_check"
    DRAIN_RECORD = "drain_record"
    ROLL_FILE = "roll_file"
    FINALIZE = "finalize"


@dataclass(frozen=True)
class Envelope:
    """Structural boilerplate repeated around the body of every output file.

    Attributes:
        head: Text from the start of the document through the body-open
            marker and the rest of its line (line break included).
        tail: Text from the start of the body-close marker's line through
            the end of the document.
        encoding: Codec the texts were decoded with.
    """

    head: str
    tail: str
    encoding: str


@dataclass
class OutputFileInfo:
    """Summary of one produced output file."""

    sequence: int
    path: Path
    size_bytes: int
    record_count: int


@dataclass
class SplitReport:
    """Structured result of a split run.

    Attributes:
        input_path: Document that was split.
        encoding: Detected codec of the input (and of every output).
        threshold_bytes: Size after which the splitter looked for a cut.
        files: Produced files in sequence order.
        bytes_read: Encoded size of the input consumed by the scan.
        elapsed_seconds: Wall-clock duration of the run.
    """

    input_path: Path
    encoding: str
    threshold_bytes: int
    files: List[OutputFileInfo] = field(default_factory=list)
    bytes_read: int = 0
    elapsed_seconds: float = 0.0

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_records(self) -> int:
        return sum(info.record_count for info in self.files)

    @property
    def total_output_bytes(self) -> int:
        return sum(info.size_bytes for info in self.files)
