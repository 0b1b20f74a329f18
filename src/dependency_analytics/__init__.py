"""dependency_analytics package: app/core/infra/config/shared.

Expose library-friendly API client at the package level.
"""

from .app.api import AppConfig, DependencyAnalyticsClient

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "DependencyAnalyticsClient",
    "AppConfig",
]
