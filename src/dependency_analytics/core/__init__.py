"""Diagnostics orchestration core: domain, ports, services and use cases."""

from .errors import BatchFetchError, ConfigLoadError, DependencyAnalyticsError, ManifestParseError

__all__ = [
    "DependencyAnalyticsError",
    "ManifestParseError",
    "BatchFetchError",
    "ConfigLoadError",
]
