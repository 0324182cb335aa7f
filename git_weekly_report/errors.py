"""Exceptions raised while building a weekly report."""


class WeeklyReportError(Exception):
    """Base class for all fatal report errors."""


class ConfigurationError(WeeklyReportError, ValueError):
    """Raised when configuration or command-line settings are invalid."""


class EventSourceError(WeeklyReportError, RuntimeError):
    """Raised when events cannot be fetched from the forge."""


class EventDecodeError(WeeklyReportError, ValueError):
    """Raised when an event payload cannot be interpreted."""
