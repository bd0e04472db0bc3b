"""
CLI interface for the TMX splitter.
"""

from .main import main


__all__ = ["main"]
