"""gitglance: read-only Git metadata and diff extraction."""

__version__ = "0.1.0"
