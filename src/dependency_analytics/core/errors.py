from __future__ import annotations


class DependencyAnalyticsError(Exception):
    """Base class for errors raised by dependency_analytics."""


class ManifestParseError(DependencyAnalyticsError):
    """Raised by a collector when a manifest cannot be parsed.

    Attributes:
        line: 0-based line of the offending text, when known.
    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class BatchFetchError(DependencyAnalyticsError):
    """Raised when one component-analysis batch request fails.

    Attributes:
        status: HTTP status code for non-success responses, None for transport errors.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConfigLoadError(DependencyAnalyticsError):
    """Raised when a local override file (e.g. ~/.analysis_rc) is malformed."""
