"""
Error handling utilities for the TMX Splitter.

This module provides the exception hierarchy raised by the splitting pipeline
and helpers to log and report those errors with enough context to tell which
stage of a run failed (detection, extraction, or scanning).

Classes:
    TmxSplitError: Base exception for all splitting errors.
    ValidationError: Exception for rejected inputs (threshold floor, paths).
    SplitIOError: Exception for I/O failures, tagged with the failing stage.
    MalformedEnvelopeError: Exception for missing body-open/body-close markers.
    ConfigurationError: Exception for configuration errors.

Functions:
    log_error_with_context: Log error with full context for debugging.
    create_error_report: Create structured error report for storage/analysis.
"""

import logging
import traceback
from datetime import datetime
from typing import Any, Dict, Optional


STAGE_VALIDATION = "validation"
STAGE_DETECTION = "detection"
STAGE_EXTRACTION = "extraction"
STAGE_SCANNING = "scanning"
STAGE_INITIALIZATION = "initialization"


class TmxSplitError(Exception):
    """
    Base exception for TMX splitting errors.

    Every error ends the run; a split is never retried.

    Attributes:
        message: Error message describing what went wrong.
        source_file: Optional path of the document being split.
        stage: Optional pipeline stage where the error occurred.
        original_error: Optional underlying exception that was wrapped.
    """

    def __init__(
        self,
        message: str,
        source_file: Optional[str] = None,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize TmxSplitError.

        Args:
            message: Error message describing the issue.
            source_file: Optional input document path.
            stage: Optional pipeline stage name.
            original_error: Optional underlying exception that caused this error.
        """
        self.message = message
        self.source_file = source_file
        self.stage = stage
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging and storage.

        Returns:
            Dictionary containing error_type, message, source_file, stage,
            and original error information if available.
        """
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source_file": self.source_file,
            "stage": self.stage,
        }

        if self.original_error:
            result["original_error_type"] = type(self.original_error).__name__
            result["original_error_message"] = str(self.original_error)

        return result


class ValidationError(TmxSplitError):
    """
    Exception for rejected inputs, raised before any output is written.

    Attributes:
        field_name: Optional name of the value that failed validation.
    """

    def __init__(
        self,
        message: str,
        source_file: Optional[str] = None,
        field_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            source_file=source_file,
            stage=STAGE_VALIDATION,
            original_error=original_error,
        )
        self.field_name = field_name

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["field_name"] = self.field_name
        return result


class SplitIOError(TmxSplitError):
    """
    Exception for I/O failures while reading the input or writing outputs.

    Output files completed before the failure are left on disk.

    Attributes:
        path: Optional path of the file whose I/O failed.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        source_file: Optional[str] = None,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize SplitIOError.

        Args:
            message: Error message describing the I/O issue.
            stage: Stage that was running (detection, extraction, scanning).
            source_file: Optional input document path.
            path: Optional path of the file that failed (input or output).
            original_error: Optional underlying OSError.
        """
        super().__init__(
            message=message,
            source_file=source_file,
            stage=stage,
            original_error=original_error,
        )
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


class MalformedEnvelopeError(TmxSplitError):
    """
    Exception raised when the body-open or body-close marker cannot be found.

    Attributes:
        marker: The marker that was searched for (e.g. ``<body>``).
    """

    def __init__(
        self,
        message: str,
        marker: str,
        source_file: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            source_file=source_file,
            stage=STAGE_EXTRACTION,
        )
        self.marker = marker

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["marker"] = self.marker
        return result


class ConfigurationError(TmxSplitError):
    """
    Exception for configuration errors.

    Attributes:
        config_key: Optional configuration key that caused the error.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            stage=STAGE_INITIALIZATION,
            original_error=original_error,
        )
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result


def log_error_with_context(
    error: Exception, logger: logging.Logger, context: Dict[str, Any]
) -> None:
    """
    Log error with comprehensive context information for debugging.

    Logs error details including type, message, and all contextual information.
    In DEBUG mode, also logs the full stack trace.

    Args:
        error: The exception that occurred.
        logger: Logger instance to use for logging.
        context: Dictionary with contextual information (source_file, stage, etc.).
            Values carried by a TmxSplitError take precedence.
    """
    error_type = type(error).__name__
    error_message = str(error)

    source_file = context.get("source_file", "unknown")
    stage = context.get("stage", "unknown")
    if isinstance(error, TmxSplitError):
        source_file = error.source_file or source_file
        stage = error.stage or stage

    logger.error(f"Error in {stage} for {source_file}: [{error_type}] {error_message}")

    if isinstance(error, TmxSplitError) and error.original_error:
        original_type = type(error.original_error).__name__
        original_msg = str(error.original_error)
        logger.error(f"  Original error: [{original_type}] {original_msg}")

    for key, value in context.items():
        if key not in ["source_file", "stage"]:
            logger.error(f"  {key}: {value}")

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Stack trace:")
        logger.debug(traceback.format_exc())


def create_error_report(
    error: Exception,
    split_report: Optional[Any] = None,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Create a structured error report for storage and analysis.

    Args:
        error: The exception that occurred.
        split_report: Optional partial SplitReport describing the output
            files completed before the failure.
        timestamp: Optional timestamp for the error. Defaults to current time.

    Returns:
        A dictionary containing error_type, error_message, traceback,
        timestamp, the TmxSplitError fields if applicable, and
        ``partial_results`` listing completed output files if available.

    Example:
        >>> error = ValidationError("Threshold too small", field_name="threshold")
        >>> create_error_report(error)["stage"]
        'validation'
    """
    if timestamp is None:
        timestamp = datetime.now()

    report = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "traceback": traceback.format_exc(),
        "timestamp": timestamp.isoformat(),
    }

    if isinstance(error, TmxSplitError):
        report.update(error.to_dict())

    if split_report is not None:
        report["partial_results"] = {
            "input_path": getattr(split_report, "input_path", None),
            "completed_files": [
                str(info.path) for info in getattr(split_report, "files", [])
            ],
        }

    return report
