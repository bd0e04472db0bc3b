"""
TMX Splitter

Streaming splitter for large TMX translation-memory documents.
"""

__version__ = "1.0.0"
__author__ = "TMX Splitter Team"

# Core exports
from .models import Envelope, OutputFileInfo, SplitReport
from .processing import EnvelopeExtractor, StreamSplitter, detect_encoding, split
from .utils.error_handlers import (
    MalformedEnvelopeError,
    SplitIOError,
    TmxSplitError,
    ValidationError,
)

__all__ = [
    "Envelope",
    "OutputFileInfo",
    "SplitReport",
    "EnvelopeExtractor",
    "StreamSplitter",
    "detect_encoding",
    "split",
    "MalformedEnvelopeError",
    "SplitIOError",
    "TmxSplitError",
    "ValidationError",
    "__version__",
]
