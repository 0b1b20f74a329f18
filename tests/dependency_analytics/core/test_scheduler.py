from __future__ import annotations

import asyncio

import pytest

from dependency_analytics.core.domain.enums import Ecosystem
from dependency_analytics.core.domain.models import DependencyIdentity, RequestBatch
from dependency_analytics.core.errors import BatchFetchError
from dependency_analytics.core.services.scheduler import BatchRequestScheduler


class FakeService:
    def __init__(self, fail_on: set[str] | None = None, crash_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.crash_on = crash_on or set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[RequestBatch] = []

    async def fetch(self, batch, *, manifest_hash, request_id):
        self.calls.append(batch)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            first = batch.items[0].name
            if first in self.fail_on:
                raise BatchFetchError("HTTP 500", status=500)
            if first in self.crash_on:
                raise RuntimeError("unexpected")
            return [{"package": i.name, "version": i.version} for i in batch.items]
        finally:
            self.in_flight -= 1


def _items(n: int) -> list[DependencyIdentity]:
    return [DependencyIdentity(f"p{i}", "1.0") for i in range(n)]


@pytest.mark.asyncio
async def test_scheduler_bounds_in_flight_requests():
    service = FakeService()
    scheduler = BatchRequestScheduler(service, batch_size=1, max_concurrency=2)
    received = []

    outcome = await scheduler.run(
        scheduler.slice(_items(6), Ecosystem.NPM),
        manifest_hash="h",
        request_id="r",
        on_result=lambda batch, records: received.extend(records),
    )

    assert service.max_in_flight == 2
    assert outcome.total == outcome.succeeded == 6
    assert len(received) == 6


@pytest.mark.asyncio
async def test_scheduler_unbounded_runs_every_batch_at_once():
    service = FakeService()
    scheduler = BatchRequestScheduler(service, batch_size=2, max_concurrency=0)

    outcome = await scheduler.run(
        scheduler.slice(_items(10), Ecosystem.NPM), manifest_hash="h", request_id="r", on_result=lambda b, r: None
    )

    assert service.max_in_flight == 5
    assert outcome.settled == 5


@pytest.mark.asyncio
async def test_failed_batches_settle_without_results():
    service = FakeService(fail_on={"p10"}, crash_on={"p20"})
    scheduler = BatchRequestScheduler(service, batch_size=10, max_concurrency=None)
    received = []

    outcome = await scheduler.run(
        scheduler.slice(_items(25), Ecosystem.NPM),
        manifest_hash="h",
        request_id="r",
        on_result=lambda batch, records: received.extend(r["package"] for r in records),
    )

    assert outcome.total == 3
    assert outcome.succeeded == 1
    assert outcome.failed == 2
    assert received == [f"p{i}" for i in range(10)]


@pytest.mark.asyncio
async def test_scheduler_passes_request_context_to_service():
    seen = []

    class RecordingService:
        async def fetch(self, batch, *, manifest_hash, request_id):
            seen.append((manifest_hash, request_id))
            return []

    scheduler = BatchRequestScheduler(RecordingService(), batch_size=1)
    await scheduler.run(scheduler.slice(_items(2), Ecosystem.NPM), manifest_hash="abc", request_id="rid", on_result=lambda b, r: None)
    assert seen == [("abc", "rid"), ("abc", "rid")]


@pytest.mark.asyncio
async def test_scheduler_with_no_batches():
    outcome = await BatchRequestScheduler(FakeService()).run([], manifest_hash="h", request_id="r", on_result=lambda b, r: None)
    assert outcome.total == 0
