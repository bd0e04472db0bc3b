"""Data models for the TMX splitter."""

from .data_structures import Envelope, OutputFileInfo, SplitReport, SplitState

__all__ = ["Envelope", "OutputFileInfo", "SplitReport", "SplitState"]
