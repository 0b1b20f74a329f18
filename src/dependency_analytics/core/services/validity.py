from __future__ import annotations

import logging
import re
from typing import Sequence

from ..domain.enums import Ecosystem
from ..domain.models import Dependency

logger = logging.getLogger(__name__)

# Up to four dot-separated alphanumeric segments, e.g. "1", "1.2", "4.17.21", "2.0.0.RELEASE".
VERSION_RE = re.compile(r"^([a-zA-Z0-9]+\.)?([a-zA-Z0-9]+\.)?([a-zA-Z0-9]+\.)?([a-zA-Z0-9]+)$")


def is_valid_version(version: str) -> bool:
    return VERSION_RE.match(version.strip()) is not None


def filter_valid(ecosystem: Ecosystem, dependencies: Sequence[Dependency]) -> list[Dependency]:
    """Drop dependencies the remote service cannot resolve.

    Module-versioned ecosystems are passed through untouched; their resolution
    happens in the aggregator.
    """
    if ecosystem.has_module_versions:
        return list(dependencies)
    valid = [d for d in dependencies if is_valid_version(d.version.value)]
    skipped = len(dependencies) - len(valid)
    if skipped:
        logger.debug(f"Skipping {skipped} {ecosystem.value} dependencies with unresolvable versions")
    return valid
