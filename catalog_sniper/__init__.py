"""Incremental collector for paginated catalog search APIs."""

__version__ = "0.1.0"
