from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config.urls import get_component_analyses_url
from ..core.domain.models import RequestBatch
from ..core.errors import BatchFetchError
from ..core.ports.vulnerability_service_port import VulnerabilityServicePort
from .http_client import HttpClient
from .schemas import ComponentAnalysisRequest

logger = logging.getLogger(__name__)


class ComponentAnalysisAdapter(VulnerabilityServicePort):
    """Client for the batch component-analyses endpoint.

    Every call is a single attempt: transport errors, non-success statuses and
    undecodable bodies are logged and raised as BatchFetchError.
    """

    def __init__(
        self,
        http_client: HttpClient,
        *,
        server_url: str,
        api_token: Optional[str] = None,
        user_key: Optional[str] = None,
        source: Optional[str] = None,
        uuid: Optional[str] = None,
    ) -> None:
        self._http = http_client
        self._url = get_component_analyses_url(server_url)
        self._api_token = api_token
        self._user_key = user_key
        self._source = source
        self._uuid = uuid

    def build_params(self, manifest_hash: str) -> dict[str, str]:
        params: dict[str, str] = {}
        if self._user_key:
            params["user_key"] = self._user_key
        params["utm_content"] = manifest_hash
        if self._source:
            params["utm_source"] = self._source
        return params

    def build_headers(self, request_id: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_token or ''}",
            "request_id": request_id,
            "x-3scale-account-secret": "not-set",
        }
        if self._uuid:
            headers["uuid"] = self._uuid
        return headers

    async def fetch(self, batch: RequestBatch, *, manifest_hash: str, request_id: str) -> list[dict[str, Any]]:
        body = ComponentAnalysisRequest.from_batch(batch).model_dump()
        logger.info(f"fetching vuln for {len(batch)} packages")
        try:
            data = await self._http.post_json(
                self._url,
                body,
                params=self.build_params(manifest_hash),
                headers=self.build_headers(request_id),
            )
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"fetch error. http status {status}")
            raise BatchFetchError(f"component-analyses returned HTTP {status}", status=status) from e
        except httpx.HTTPError as e:
            logger.warning(f"Exception while fetch: {e!r}")
            raise BatchFetchError(f"component-analyses request failed: {e}") from e
        except (ValueError, TypeError) as e:
            logger.warning(f"Undecodable component-analyses response: {e}")
            raise BatchFetchError(f"component-analyses returned an invalid body: {e}") from e

        if isinstance(data, dict):
            data = [data]
        records = [item for item in data if isinstance(item, dict)]
        if len(records) != len(data):
            logger.warning(f"Ignoring {len(data) - len(records)} non-object entries in component-analyses response")
        return records
