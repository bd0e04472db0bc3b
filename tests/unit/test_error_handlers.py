"""
Unit tests for error_handlers module.
"""

import logging
from datetime import datetime
from pathlib import Path

from tmx_splitter.models.data_structures import OutputFileInfo, SplitReport
from tmx_splitter.utils.error_handlers import (
    STAGE_SCANNING,
    ConfigurationError,
    MalformedEnvelopeError,
    SplitIOError,
    TmxSplitError,
    ValidationError,
    create_error_report,
    log_error_with_context,
)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_all_derive_from_base(self):
        for error in [
            ValidationError("bad"),
            SplitIOError("io", stage=STAGE_SCANNING),
            MalformedEnvelopeError("no body", marker="<body>"),
            ConfigurationError("config"),
        ]:
            assert isinstance(error, TmxSplitError)

    def test_stages(self):
        assert ValidationError("bad").stage == "validation"
        assert MalformedEnvelopeError("x", marker="</body>").stage == "extraction"
        assert ConfigurationError("x").stage == "initialization"
        assert SplitIOError("x", stage="detection").stage == "detection"

    def test_split_io_error_to_dict(self):
        """Test wrapped OSError details are included."""
        cause = PermissionError(13, "Permission denied")
        error = SplitIOError(
            "Cannot create split file",
            stage=STAGE_SCANNING,
            source_file="memory.tmx",
            path="out/memory.split.1.tmx",
            original_error=cause,
        )

        result = error.to_dict()

        assert result["error_type"] == "SplitIOError"
        assert result["stage"] == "scanning"
        assert result["path"] == "out/memory.split.1.tmx"
        assert result["original_error_type"] == "PermissionError"
        assert set(result) == {
            "error_type",
            "message",
            "source_file",
            "stage",
            "path",
            "original_error_type",
            "original_error_message",
        }

    def test_malformed_envelope_to_dict(self):
        result = MalformedEnvelopeError("missing", marker="</body>").to_dict()

        assert result["marker"] == "</body>"
        assert "original_error_type" not in result

    def test_str_is_message(self):
        assert str(ValidationError("Threshold too small")) == "Threshold too small"


class TestLogErrorWithContext:
    """Tests for log_error_with_context function."""

    def test_error_fields_take_precedence(self, caplog):
        logger = logging.getLogger("test_error_handlers")
        error = SplitIOError(
            "disk full",
            stage=STAGE_SCANNING,
            source_file="memory.tmx",
            original_error=OSError("No space left on device"),
        )

        with caplog.at_level(logging.ERROR, logger="test_error_handlers"):
            log_error_with_context(
                error, logger, {"source_file": "other.tmx", "stage": "x", "run": 3}
            )

        assert "Error in scanning for memory.tmx: [SplitIOError] disk full" in caplog.text
        assert "Original error: [OSError] No space left on device" in caplog.text
        assert "run: 3" in caplog.text

    def test_plain_exception_uses_context(self, caplog):
        logger = logging.getLogger("test_error_handlers")

        with caplog.at_level(logging.ERROR, logger="test_error_handlers"):
            log_error_with_context(
                ValueError("bad size"), logger, {"source_file": "a.tmx", "stage": "cli"}
            )

        assert "Error in cli for a.tmx: [ValueError] bad size" in caplog.text


class TestCreateErrorReport:
    """Tests for create_error_report function."""

    def test_report_fields(self):
        timestamp = datetime(2024, 5, 1, 12, 0, 0)
        error = ValidationError("Threshold too small", field_name="threshold")

        report = create_error_report(error, timestamp=timestamp)

        assert report["error_type"] == "ValidationError"
        assert report["error_message"] == "Threshold too small"
        assert report["timestamp"] == "2024-05-01T12:00:00"
        assert report["field_name"] == "threshold"
        assert "partial_results" not in report

    def test_partial_results(self):
        split_report = SplitReport(
            input_path=Path("memory.tmx"), encoding="utf-8", threshold_bytes=65536
        )
        split_report.files.append(
            OutputFileInfo(
                sequence=0,
                path=Path("out/memory.split.0.tmx"),
                size_bytes=70000,
                record_count=12,
            )
        )

        report = create_error_report(
            SplitIOError("failed", stage=STAGE_SCANNING), split_report=split_report
        )

        assert report["partial_results"]["completed_files"] == [
            str(Path("out/memory.split.0.tmx"))
        ]
