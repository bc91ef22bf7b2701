"""Gazer error hierarchy.

All gazer-specific errors inherit from GazerError for easy catching.
"""


class GazerError(Exception):
    """Base error for all gazer operations."""


class ConfigError(GazerError):
    """Invalid or missing configuration."""


class HistoryError(GazerError):
    """A version-control query failed (bad reference, untracked file, git missing)."""


class ProtocolError(GazerError):
    """A client message could not be parsed or is missing required fields."""


class EditorError(GazerError):
    """The external editor command could not be run."""
