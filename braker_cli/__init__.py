"""
braker-cli: concurrent disc track extraction driven by an external transcoding engine.
"""

__version__ = "1.0.0"
