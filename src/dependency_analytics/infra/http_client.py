from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx


class HttpClient:
    def __init__(
        self,
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers=dict(base_headers or {}),
            follow_redirects=True,
            max_redirects=10,
        )

    async def post_json(
        self,
        url: str,
        payload: dict,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        resp = await self._client.post(url, json=payload, params=dict(params or {}), headers=dict(headers or {}))
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, (dict, list)):
            raise TypeError("HttpClient invariant violated: expected JSON object or array")
        return data

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()
