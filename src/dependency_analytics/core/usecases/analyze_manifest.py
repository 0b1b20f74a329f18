from __future__ import annotations

import inspect
import logging
import time
import uuid
from typing import Any, Callable, Sequence

from ...config.tokens import manifest_hash
from ..domain.enums import Ecosystem
from ..domain.models import CycleReport, Dependency, DependencyMap, ProgressNotification, RequestBatch
from ..errors import ManifestParseError
from ..ports.cache_port import CacheFactoryPort
from ..ports.collector_port import CollectorPort
from ..ports.notifier_port import NotifierPort
from ..services.aggregators import aggregator_for
from ..services.code_actions import CodeActionRegistry
from ..services.pipeline import AnalysisCycle, DiagnosticsPipeline
from ..services.scheduler import BatchRequestScheduler
from ..services.summary import CHECKING_MESSAGE, build_summary_message
from ..services.validity import filter_valid

logger = logging.getLogger(__name__)


def _always_current() -> bool:
    return True


class AnalyzeManifestUseCase:
    """One analysis cycle: collect, filter, serve cache hits, fetch misses, summarize."""

    def __init__(
        self,
        cache: CacheFactoryPort,
        scheduler: BatchRequestScheduler,
        pipeline: DiagnosticsPipeline,
        notifier: NotifierPort,
        code_actions: CodeActionRegistry,
    ) -> None:
        self._cache = cache
        self._scheduler = scheduler
        self._pipeline = pipeline
        self._notifier = notifier
        self._code_actions = code_actions

    async def execute(
        self,
        *,
        uri: str,
        ecosystem: Ecosystem,
        contents: str,
        collector: CollectorPort,
        cycle_id: int = 0,
        is_current: Callable[[], bool] = _always_current,
    ) -> CycleReport:
        report = CycleReport(uri=uri, ecosystem=ecosystem, cycle_id=cycle_id)
        self._notifier.notify_progress(ProgressNotification(uri=uri, data=CHECKING_MESSAGE, done=False))

        try:
            dependencies = await self._collect(collector, contents)
        except ManifestParseError as e:
            logger.warning(f"Error: {e}")
            report.error = str(e)
            if is_current():
                self._notifier.notify_error(uri, str(e))
            return report
        report.dependency_count = len(dependencies)

        if not is_current():
            report.superseded = True
            return report

        valid = filter_valid(ecosystem, dependencies)
        dep_map = DependencyMap(valid)
        aggregator = aggregator_for(ecosystem)
        cycle = AnalysisCycle(
            uri=uri,
            ecosystem=ecosystem,
            cycle_id=cycle_id,
            dependencies=dep_map,
            aggregator=aggregator,
            plan=aggregator.plan(dep_map.identities()),
            code_actions=self._code_actions.reset(uri),
        )
        # Start every cycle from an empty set.
        self._notifier.publish_diagnostics(uri, [])

        start = time.monotonic()
        cache = self._cache.namespace(ecosystem.value)
        lookups = cache.get(list(cycle.plan.queries))
        hits = [lookup.value for lookup in lookups if lookup.value is not None]
        misses = [lookup.key for lookup in lookups if lookup.value is None]
        logger.info(f"cache hit: {len(hits)} miss: {len(misses)}")
        self._run_pipeline(hits, cycle)

        def cache_and_run_pipeline(batch: RequestBatch, records: list[dict[str, Any]]) -> None:
            cache.add(records)
            if not is_current():
                logger.info(f"Dropping {len(records)} results of superseded cycle {cycle_id} for {uri}")
                return
            self._run_pipeline(records, cycle)

        batches = self._scheduler.slice(misses, ecosystem)
        outcome = await self._scheduler.run(
            batches,
            manifest_hash=manifest_hash(uri),
            request_id=str(uuid.uuid4()),
            on_result=cache_and_run_pipeline,
        )
        logger.info(f"fetch vulns took {(time.monotonic() - start) * 1000:.0f} ms")

        report.batches = outcome.total
        report.failed_batches = outcome.failed
        report.diagnostics = list(cycle.diagnostics)
        report.counts = cycle.counts
        if not is_current():
            report.superseded = True
            return report

        report.message = build_summary_message(dependencies, cycle.diagnostics, cycle.counts)
        self._notifier.notify_progress(
            ProgressNotification(
                uri=uri,
                data=report.message,
                done=True,
                diag_count=len(cycle.diagnostics),
                dep_count=len(dependencies),
                vuln_count=cycle.counts,
            )
        )
        return report

    @staticmethod
    async def _collect(collector: CollectorPort, contents: str) -> Sequence[Dependency]:
        start = time.monotonic()
        result = collector.collect(contents)
        if inspect.isawaitable(result):
            result = await result
        dependencies = list(result)
        logger.info(
            f"manifest parse took {(time.monotonic() - start) * 1000:.0f} ms, found {len(dependencies)} deps"
        )
        return dependencies

    def _run_pipeline(self, records: list[dict[str, Any]], cycle: AnalysisCycle) -> int:
        added = self._pipeline.run(records, cycle)
        self._notifier.publish_diagnostics(cycle.uri, list(cycle.diagnostics))
        logger.debug(f"Published {len(cycle.diagnostics)} diagnostics for {cycle.uri} (+{added})")
        return added
