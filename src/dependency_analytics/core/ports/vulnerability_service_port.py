from __future__ import annotations

from typing import Any, Protocol

from ..domain.models import RequestBatch


class VulnerabilityServicePort(Protocol):
    async def fetch(self, batch: RequestBatch, *, manifest_hash: str, request_id: str) -> list[dict[str, Any]]:
        """Query the remote service for one batch.

        Returns the raw per-package records. Raises BatchFetchError on transport
        errors and non-success responses.
        """
        ...
