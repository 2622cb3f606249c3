"""
Data Models Layer.

This package contains the data structures used throughout the application,
such as the validated configuration and the track, job and batch records.
"""

from .config import ExtractionConfig
from .track import BatchResult, ConversionJob, TrackDescriptor

__all__ = ["BatchResult", "ConversionJob", "ExtractionConfig", "TrackDescriptor"]
