"""
Core application engine for orchestrating the extraction process.

This package contains the primary logic. The inventory module turns the
engine's scan report into tracks, the `ExtractionManager` acts as the
batch coordinator, and it delegates each conversion to the `JobRunner`.
"""
