"""
Processing modules for the TMX Splitter.

This package contains encoding detection, envelope extraction and the
streaming splitter.
"""

from .encoding_detector import EncodingDetector, detect_encoding
from .envelope_extractor import EnvelopeExtractor
from .output_writer import OutputFile
from .stream_splitter import StreamSplitter, split

__all__ = [
    "EncodingDetector",
    "detect_encoding",
    "EnvelopeExtractor",
    "OutputFile",
    "StreamSplitter",
    "split",
]
