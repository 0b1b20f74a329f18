from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.loader import load_config
from ..core.services.code_actions import CodeActionRegistry
from ..core.services.pipeline import DiagnosticsPipeline
from ..core.services.scheduler import BatchRequestScheduler
from ..core.services.security_engine import SecurityEngine
from ..core.usecases.analyze_manifest import AnalyzeManifestUseCase
from ..core.usecases.code_actions import ProvideCodeActionsUseCase
from ..infra.component_analysis import ComponentAnalysisAdapter
from ..infra.http_client import HttpClient
from ..infra.memory_cache import NamespacedMemoryCache
from ..infra.notifiers import RecordingNotifier
from .handlers import default_handlers
from .server import AnalysisServer

logger = logging.getLogger(__name__)


class Container(containers.DeclarativeContainer):
	config = providers.Configuration()

	# One cache per process, shared by every document and cycle
	cache = providers.Singleton(
		NamespacedMemoryCache,
		max_items=config.cache_max_items,
		max_age_seconds=config.cache_max_age_seconds,
	)

	# Async client; closed explicitly by the owner (see DependencyAnalyticsClient.aclose)
	http_client = providers.Singleton(
		HttpClient,
		timeout_seconds=config.request_timeout_seconds,
	)

	service = providers.Singleton(
		ComponentAnalysisAdapter,
		http_client=http_client,
		server_url=config.server_url,
		api_token=config.api_token,
		user_key=config.three_scale_user_token,
		source=config.source,
		uuid=config.uuid,
	)

	scheduler = providers.Factory(
		BatchRequestScheduler,
		service=service,
		batch_size=config.batch_size,
		max_concurrency=config.max_concurrent_batches,
	)

	engines = providers.List(
		providers.Factory(SecurityEngine),
	)

	pipeline = providers.Factory(DiagnosticsPipeline, engines=engines)

	notifier = providers.Singleton(RecordingNotifier)
	code_actions = providers.Singleton(CodeActionRegistry)

	analyze_uc = providers.Factory(
		AnalyzeManifestUseCase,
		cache=cache,
		scheduler=scheduler,
		pipeline=pipeline,
		notifier=notifier,
		code_actions=code_actions,
	)
	code_actions_uc = providers.Factory(
		ProvideCodeActionsUseCase,
		registry=code_actions,
		provide_fullstack_action=config.provide_fullstack_action,
	)

	handlers = providers.Singleton(default_handlers)

	server = providers.Singleton(
		AnalysisServer,
		handlers=handlers,
		analyze_uc=analyze_uc,
		code_actions_uc=code_actions_uc,
		code_actions=code_actions,
		notifier=notifier,
		debounce_seconds=config.debounce_seconds,
	)


def build_container(config=None) -> Container:
	"""Container configured from ``config`` or from the environment and ~/.analysis_rc."""
	container = Container()
	container.config.from_pydantic(config or load_config())
	return container
