from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration with automatic environment variable loading.

    All settings can be overridden via environment variables with the DEPENDENCY_ANALYTICS_ prefix.
    For example:
        - DEPENDENCY_ANALYTICS_SERVER_URL=https://recommender.example.com/api/v2
        - DEPENDENCY_ANALYTICS_API_TOKEN=xxx
        - DEPENDENCY_ANALYTICS_MAX_CONCURRENT_BATCHES=0   (unbounded fan-out)

    A JSON file ``~/.analysis_rc`` containing ``{"server": "<url>"}`` overrides the
    server URL; see ``config.loader.load_config``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEPENDENCY_ANALYTICS_",
        case_sensitive=False,
        extra="forbid",
    )

    server_url: str = Field(
        default="https://recommender.api.openshift.io/api/v2",
        description="Base URL of the component analysis API",
    )

    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent in the Authorization header",
    )

    three_scale_user_token: Optional[str] = Field(
        default=None,
        description="API gateway user key, sent as the user_key query parameter when set",
    )

    source: Optional[str] = Field(
        default=None,
        description="Client identifier sent as the utm_source query parameter",
    )

    uuid: Optional[str] = Field(
        default=None,
        description="Installation id sent as the uuid header when set",
    )

    provide_fullstack_action: bool = Field(
        default=False,
        description="Offer the 'Detailed Vulnerability Report' code action next to analytics diagnostics",
    )

    home_dir: Path = Field(
        default_factory=Path.home,
        description="Directory searched for the .analysis_rc override file",
    )

    cache_max_items: int = Field(
        default=1000,
        ge=1,
        description="Capacity of each ecosystem's in-memory vulnerability cache",
    )

    cache_max_age_seconds: float = Field(
        default=30 * 60,
        gt=0,
        description="Age after which cached vulnerability records are treated as absent",
    )

    batch_size: int = Field(
        default=10,
        ge=1,
        description="Maximum number of packages per component-analyses request",
    )

    max_concurrent_batches: int = Field(
        default=5,
        ge=0,
        description="Upper bound on in-flight requests per cycle; 0 disables the bound",
    )

    debounce_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Quiescence window after the last edit before a document is re-analyzed",
    )

    request_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="HTTP timeout for component-analyses requests",
    )
