from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .container import Container, build_container
from .server import AnalysisServer
from ..config.loader import load_config
from ..config.settings import AppConfig
from ..core.domain.models import CodeAction, CycleReport, Diagnostic
from ..core.errors import DependencyAnalyticsError
from ..infra.notifiers import RecordingNotifier


class UnsupportedManifestError(DependencyAnalyticsError):
    """Raised when no collector is registered for a document's file name."""


class DependencyAnalyticsClient:
    """Async client running dependency vulnerability analysis on manifests.

    The container and its cache, HTTP client and code-action registry are
    created once and reused across calls, so repeated analyses of the same
    manifest are served from the cache.

    Example:
        async with DependencyAnalyticsClient() as client:
            report = await client.analyze("file:///work/app/package.json", text)
            for diagnostic in report.diagnostics:
                print(diagnostic.message)

        # Override the server and token
        async with DependencyAnalyticsClient(server_url="https://...", api_token="xxx") as client:
            ...
    """

    def __init__(
        self,
        *,
        config: Optional[AppConfig] = None,
        server_url: str | None = None,
        api_token: str | None = None,
        home_dir: str | Path | None = None,
        max_concurrent_batches: int | None = None,
    ):
        """Initialize the client.

        Args:
            config: Complete configuration. If None, it is read from the
                    environment (DEPENDENCY_ANALYTICS_*) and ~/.analysis_rc.
            server_url: Optional component analysis API base URL.
            api_token: Optional bearer token.
            home_dir: Optional directory searched for .analysis_rc.
            max_concurrent_batches: Optional bound on in-flight requests (0 = unbounded).
        """
        overrides = {}
        if api_token is not None:
            overrides["api_token"] = api_token
        if home_dir is not None:
            overrides["home_dir"] = Path(home_dir)
        if max_concurrent_batches is not None:
            overrides["max_concurrent_batches"] = max_concurrent_batches

        if config is None:
            config = load_config(AppConfig(**overrides)) if overrides else load_config()
        elif overrides:
            config = config.model_copy(update=overrides)
        # An explicit server URL wins over ~/.analysis_rc
        if server_url is not None:
            config = config.model_copy(update={"server_url": server_url})

        self.config = config
        self._container: Container = build_container(config)

    @property
    def notifier(self) -> RecordingNotifier:
        return self._container.notifier()

    async def analyze(self, uri: str, contents: str) -> CycleReport:
        """Run one analysis cycle on a manifest and return its report.

        Raises:
            UnsupportedManifestError: If the file name is not a supported manifest.

        Parse errors do not raise; they are reported in ``CycleReport.error``.
        """
        handler = self._container.handlers().match(uri)
        if handler is None:
            raise UnsupportedManifestError(f"Unsupported manifest: {uri}")
        uc = self._container.analyze_uc()
        return await uc.execute(
            uri=uri,
            ecosystem=handler.ecosystem,
            contents=contents,
            collector=handler.collector_factory(),
        )

    def code_actions(self, uri: str, diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
        """Quick fixes (and the report action, when enabled) for the given diagnostics."""
        return self._container.code_actions_uc().execute(uri, diagnostics)

    def server(self) -> AnalysisServer:
        """Document-event front end sharing this client's cache and notifier."""
        return self._container.server()

    def clear_cache(self, ecosystem: str | None = None) -> None:
        """Clear cached vulnerability records for one ecosystem, or all when None."""
        self._container.cache().clear(ecosystem)

    async def aclose(self) -> None:
        """Close the HTTP client. Call it, or use ``async with``."""
        await self._container.http_client().close()

    async def __aenter__(self) -> DependencyAnalyticsClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


__all__ = [
    "DependencyAnalyticsClient",
    "UnsupportedManifestError",
    "AppConfig",
]
