from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..domain.enums import Ecosystem
from ..domain.models import DependencyIdentity, RequestBatch
from ..errors import BatchFetchError
from ..ports.vulnerability_service_port import VulnerabilityServicePort
from .batching import DEFAULT_BATCH_SIZE, slice_payload

logger = logging.getLogger(__name__)

BatchCallback = Callable[[RequestBatch, list[dict[str, Any]]], None]


@dataclass
class BatchOutcome:
    total: int = 0
    succeeded: int = 0
    failed: int = 0

    @property
    def settled(self) -> int:
        return self.succeeded + self.failed


class BatchRequestScheduler:
    """Fans cache misses out to the remote service in bounded, concurrent batches.

    Every batch settles independently: a successful one is handed to the
    callback as soon as it resolves, a failed one is logged and contributes
    nothing. Nothing is retried.

    Args:
        service: Remote vulnerability service.
        batch_size: Maximum number of packages per request.
        max_concurrency: Upper bound on in-flight requests. None or 0 means one
            request per batch, all at once.
    """

    def __init__(
        self,
        service: VulnerabilityServicePort,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_concurrency: Optional[int] = None,
    ) -> None:
        self._service = service
        self._batch_size = batch_size
        self._max_concurrency = max_concurrency or None

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def slice(self, items: Sequence[DependencyIdentity], ecosystem: Ecosystem) -> list[RequestBatch]:
        return slice_payload(items, ecosystem, self._batch_size)

    async def run(
        self,
        batches: Sequence[RequestBatch],
        *,
        manifest_hash: str,
        request_id: str,
        on_result: BatchCallback,
    ) -> BatchOutcome:
        outcome = BatchOutcome(total=len(batches))
        if not batches:
            return outcome

        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None

        async def _fetch(batch: RequestBatch) -> list[dict[str, Any]]:
            if semaphore is None:
                return await self._service.fetch(batch, manifest_hash=manifest_hash, request_id=request_id)
            async with semaphore:
                return await self._service.fetch(batch, manifest_hash=manifest_hash, request_id=request_id)

        async def _run(batch: RequestBatch) -> None:
            try:
                records = await _fetch(batch)
            except BatchFetchError as e:
                outcome.failed += 1
                logger.warning(f"Batch of {len(batch)} {batch.ecosystem.value} packages failed: {e}")
                return
            on_result(batch, records)
            outcome.succeeded += 1

        results = await asyncio.gather(*(_run(b) for b in batches), return_exceptions=True)
        for batch, result in zip(batches, results):
            if isinstance(result, BaseException):
                outcome.failed += 1
                logger.error(
                    f"Unexpected error while processing a batch of {len(batch)} packages",
                    exc_info=result,
                )
        return outcome
