"""
Streaming splitter for TMX documents.

This module performs the single sequential pass that copies the input, line
by line, into a series of output files. Each output file stays structurally
complete on its own:

    file 0:      original prolog ... records ... tail
    file 1..n-1: head ... records ... tail
    file n:      head ... records ... original ending

State machine (one output file open at a time):

    WRITING -> THRESHOLD_CHECK -> WRITING          (below threshold)
                               -> DRAIN_RECORD     (threshold reached)
    DRAIN_RECORD -> ROLL_FILE                      (record-closing line written)
    ROLL_FILE -> WRITING                           (tail, close, open, head)
    any -> FINALIZE                                (input exhausted)

A roll is deferred until the next non-blank line is read. If that line opens
the document's own ending (the ``</body>`` line) or the input ends first, no
roll happens: the current file is finished by the genuine ending and no
empty-bodied file is produced. Blank lines read while the roll is pending
go to whichever file receives that next line. Threshold crossings while draining a record
are ignored, so a record larger than the threshold yields one oversized file.

Typical usage example:
    report = split("memory.tmx", "out/", parse_size("100MB"))
    for info in report.files:
        print(info.path, info.size_bytes)
"""

import logging
import os
import re
import time
from pathlib import Path
from typing import Callable, Optional

from ..models.data_structures import Envelope, OutputFileInfo, SplitReport, SplitState
from ..utils.error_handlers import STAGE_SCANNING, SplitIOError, TmxSplitError
from ..utils.file_utils import (
    PathType,
    build_output_path,
    ensure_directory,
    list_split_files,
    resolve_output_dir,
)
from ..utils.validation_utils import validate_threshold
from .encoding_detector import EncodingDetector
from .envelope_extractor import EnvelopeExtractor
from .output_writer import OutputFile

logger = logging.getLogger(__name__)

# Type aliases
ProgressCallback = Callable[[int, int], None]
FileCompleteCallback = Callable[[OutputFileInfo], None]

RECORD_BOUNDARY_MARKER = "</tu>"
DEFAULT_PROGRESS_INTERVAL = 1024 * 1024
MAX_PENDING_WHITESPACE = 1024 * 1024

_BODY_CLOSE_LINE = re.compile(r"^[ \t]*</body\s*>")


class StreamSplitter:
    """
    Splits one TMX document into size-bounded, self-contained documents.

    Attributes:
        threshold_bytes: Output size after which the next record boundary
            ends the current file.
        output_dir: Directory for split files, or None for the input's directory.
        record_marker: Literal text that closes a record.
        detector: Encoding detector.
        extractor: Envelope extractor.
        progress_callback: Optional callable receiving (bytes_read, total_bytes).
        on_file_complete: Optional callable receiving each finished file's info.
        last_report: Report of the latest run, complete or partial.
    """

    def __init__(
        self,
        threshold_bytes: int,
        output_dir: Optional[PathType] = None,
        record_marker: str = RECORD_BOUNDARY_MARKER,
        detector: Optional[EncodingDetector] = None,
        extractor: Optional[EnvelopeExtractor] = None,
        progress_callback: Optional[ProgressCallback] = None,
        on_file_complete: Optional[FileCompleteCallback] = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ):
        """
        Initialize StreamSplitter.

        Raises:
            ValidationError: If threshold_bytes is below the 64 KiB floor.
            ValueError: If record_marker is empty.
        """
        validate_threshold(threshold_bytes)
        if not record_marker:
            raise ValueError("record_marker must be a non-empty string")

        self.threshold_bytes = threshold_bytes
        self.output_dir = output_dir
        self.record_marker = record_marker
        self.detector = detector or EncodingDetector()
        self.extractor = extractor or EnvelopeExtractor()
        self.progress_callback = progress_callback
        self.on_file_complete = on_file_complete
        self.progress_interval = progress_interval
        self.last_report: Optional[SplitReport] = None

    def run(self, input_path: PathType) -> SplitReport:
        """
        Split a document.

        Args:
            input_path: Path to the TMX document.

        Returns:
            SplitReport describing the produced files.

        Raises:
            SplitIOError: If reading the input or writing an output fails.
                Files completed before the failure remain on disk.
            MalformedEnvelopeError: If the body markers cannot be found.
        """
        started = time.monotonic()
        input_path = Path(input_path)

        encoding = self.detector.detect(str(input_path))
        envelope = self.extractor.extract(str(input_path), encoding)

        report = SplitReport(
            input_path=input_path,
            encoding=encoding,
            threshold_bytes=self.threshold_bytes,
        )
        self.last_report = report

        output_dir = resolve_output_dir(input_path, self.output_dir)
        try:
            ensure_directory(output_dir)
            total_bytes = os.path.getsize(input_path)
            self._scan(input_path, output_dir, envelope, report, total_bytes)
        except TmxSplitError:
            raise
        except (OSError, UnicodeError) as e:
            raise SplitIOError(
                f"Split of {input_path} failed after {report.file_count} "
                f"complete file(s): {e}",
                stage=STAGE_SCANNING,
                source_file=str(input_path),
                path=getattr(e, "filename", None) or str(input_path),
                original_error=e,
            ) from e
        finally:
            report.elapsed_seconds = time.monotonic() - started

        logger.info(
            f"Split {input_path.name} into {report.file_count} file(s) "
            f"in {report.elapsed_seconds:.2f}s"
        )
        self._warn_stale_files(input_path, output_dir, report.file_count)
        return report

    def _scan(
        self,
        input_path: Path,
        output_dir: Path,
        envelope: Envelope,
        report: SplitReport,
        total_bytes: int,
    ) -> None:
        """Copy every input line into the output files."""
        state = SplitState.WRITING
        next_progress = self.progress_interval
        # Blank lines read while a roll is pending; they go to whichever
        # file receives the next content.
        pending = []
        pending_size = 0

        with open(input_path, "r", encoding=envelope.encoding, newline="") as reader:
            out = self._open_output(input_path, output_dir, 0, envelope.encoding)
            try:
                for line in reader:
                    if state is SplitState.ROLL_FILE:
                        if not line.strip() and pending_size < MAX_PENDING_WHITESPACE:
                            pending.append(line)
                            pending_size += len(line)
                            continue
                        if _BODY_CLOSE_LINE.match(line):
                            logger.debug("Threshold reached on the last record")
                        else:
                            out = self._roll(out, input_path, output_dir, envelope, report)
                        state = SplitState.WRITING
                        for blank in pending:
                            report.bytes_read += out.write(blank)
                        pending = []
                        pending_size = 0

                    report.bytes_read += out.write(line)
                    out.record_count += line.count(self.record_marker)

                    if state is SplitState.WRITING:
                        state = SplitState.THRESHOLD_CHECK
                    if state is SplitState.THRESHOLD_CHECK:
                        if out.position >= self.threshold_bytes:
                            state = SplitState.DRAIN_RECORD
                        else:
                            state = SplitState.WRITING
                    if state is SplitState.DRAIN_RECORD and self.record_marker in line:
                        state = SplitState.ROLL_FILE

                    if self.progress_callback and report.bytes_read >= next_progress:
                        self.progress_callback(report.bytes_read, total_bytes)
                        next_progress = report.bytes_read + self.progress_interval

                for blank in pending:
                    report.bytes_read += out.write(blank)

                logger.debug(f"Input exhausted in state {state.name}")
                state = SplitState.FINALIZE
                self._finish(out, report)
            finally:
                out.close()

        if self.progress_callback:
            self.progress_callback(report.bytes_read, total_bytes)

    def _roll(
        self,
        out: OutputFile,
        input_path: Path,
        output_dir: Path,
        envelope: Envelope,
        report: SplitReport,
    ) -> OutputFile:
        """Close the current file with the tail and open the next with the head."""
        out.write(envelope.tail)
        self._finish(out, report)

        next_out = self._open_output(
            input_path, output_dir, out.sequence + 1, envelope.encoding
        )
        next_out.write(envelope.head)
        return next_out

    def _open_output(
        self, input_path: Path, output_dir: Path, sequence: int, encoding: str
    ) -> OutputFile:
        path = build_output_path(input_path, output_dir, sequence)
        out = OutputFile(path, sequence, encoding)
        try:
            out.open()
        except OSError as e:
            raise SplitIOError(
                f"Cannot create split file {path}: {e}",
                stage=STAGE_SCANNING,
                source_file=str(input_path),
                path=str(path),
                original_error=e,
            ) from e
        return out

    def _finish(self, out: OutputFile, report: SplitReport) -> None:
        out.close()
        info = OutputFileInfo(
            sequence=out.sequence,
            path=out.path,
            size_bytes=out.position,
            record_count=out.record_count,
        )
        report.files.append(info)
        logger.info(
            f"Wrote {out.path.name}: {out.position} bytes, {out.record_count} record(s)"
        )
        if self.on_file_complete:
            self.on_file_complete(info)

    @staticmethod
    def _warn_stale_files(input_path: Path, output_dir: Path, file_count: int) -> None:
        stale = list_split_files(output_dir, input_path)[file_count:]
        if stale:
            logger.warning(
                f"{len(stale)} split file(s) from an earlier run remain in "
                f"{output_dir}, starting with {stale[0].name}"
            )


def split(
    input_path: PathType,
    output_dir: Optional[PathType],
    threshold_bytes: int,
    record_marker: str = RECORD_BOUNDARY_MARKER,
    progress_callback: Optional[ProgressCallback] = None,
    on_file_complete: Optional[FileCompleteCallback] = None,
) -> SplitReport:
    """
    Split a TMX document into files of roughly threshold_bytes each.

    The threshold is validated before any file is touched.

    Args:
        input_path: Path to the TMX document.
        output_dir: Directory for split files (None: next to the input).
        threshold_bytes: Minimum 65536.
        record_marker: Literal text that closes a record.
        progress_callback: Optional callable receiving (bytes_read, total_bytes).
        on_file_complete: Optional callable receiving each OutputFileInfo.

    Returns:
        SplitReport describing the produced files.

    Raises:
        ValidationError: If threshold_bytes < 65536.
        SplitIOError: On I/O failure in detection, extraction or scanning.
        MalformedEnvelopeError: If the body markers cannot be found.
    """
    splitter = StreamSplitter(
        threshold_bytes=threshold_bytes,
        output_dir=output_dir,
        record_marker=record_marker,
        progress_callback=progress_callback,
        on_file_complete=on_file_complete,
    )
    return splitter.run(input_path)
