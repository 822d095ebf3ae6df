"""
HTTP Graph Provider

Fetches graph data from the recommendation service REST API.

ENDPOINTS:
==========
GET /api/similarity/graph/{category}?limit=&crossMedia=      -> GraphData
GET /api/similarity/{type}/{id}?limit=&depth=                -> GraphData (depth > 1)
                                                                 or {center, connections}
GET /api/similarity/search?q=&type=&limit=&graph=true        -> {graph: GraphData}

PRINCIPLES:
===========
1. Every failure becomes a ProviderResponse with an explicit error code
2. Non-2xx statuses are failures even when the body parses
3. No retries; the caller decides what a failure means
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
import time

import httpx

from ...config import ProviderConfig
from ...contracts import (
    BrowseCategory, FetchOutcome, GraphData, InvalidGraphPayload,
    MediaFilter, MediaType,
)
from .base import GraphProvider, ProviderResponse


class HttpGraphProvider(GraphProvider):
    """
    Graph provider backed by the similarity service.

    GUARANTEES:
    ===========
    1. Timeouts map to TIMEOUT, connection problems to NETWORK_ERROR
    2. Non-2xx statuses map to HTTP_ERROR with the status kept
    3. Unreadable bodies map to INVALID_RESPONSE
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._config = config or ProviderConfig()
        self._transport = transport

    @property
    def provider_id(self) -> str:
        return "http"

    async def browse(
        self,
        category: BrowseCategory,
        limit: int,
        cross_media: bool
    ) -> ProviderResponse:
        return await self._get(
            f"/api/similarity/graph/{category.value}",
            params={"limit": str(limit), "crossMedia": _flag(cross_media)},
            extract=GraphData.from_payload,
        )

    async def similar(
        self,
        node_id: str,
        media_type: MediaType,
        limit: int,
        depth: int
    ) -> ProviderResponse:
        return await self._get(
            f"/api/similarity/{media_type.value}/{node_id}",
            params={"limit": str(limit), "depth": str(depth)},
            extract=GraphData.from_payload,
        )

    async def search(
        self,
        query: str,
        media_filter: MediaFilter,
        limit: int
    ) -> ProviderResponse:
        return await self._get(
            "/api/similarity/search",
            params={
                "q": query,
                "type": media_filter.value,
                "limit": str(limit),
                "graph": "true",
            },
            extract=_search_graph,
        )

    async def _get(
        self,
        path: str,
        params: Dict[str, str],
        extract: Callable[[Any], GraphData]
    ) -> ProviderResponse:
        """Issue one GET and classify the outcome."""
        requested_at = datetime.now(timezone.utc)
        started = time.monotonic()

        try:
            async with self._client() as client:
                response = await client.get(path, params=params)
        except httpx.TimeoutException:
            return ProviderResponse.failed(
                FetchOutcome.TIMEOUT, "Request timed out",
                requested_at=requested_at, latency_ms=_since(started),
            )
        except httpx.HTTPError as e:
            return ProviderResponse.failed(
                FetchOutcome.NETWORK_ERROR, str(e) or type(e).__name__,
                requested_at=requested_at, latency_ms=_since(started),
            )

        latency_ms = _since(started)

        if not response.is_success:
            return ProviderResponse.failed(
                FetchOutcome.HTTP_ERROR,
                _error_message(response),
                http_status=response.status_code,
                requested_at=requested_at,
                latency_ms=latency_ms,
            )

        try:
            data = extract(response.json())
        except (ValueError, InvalidGraphPayload, TypeError, AttributeError) as e:
            return ProviderResponse.failed(
                FetchOutcome.INVALID_RESPONSE, f"Unreadable graph payload: {e}",
                http_status=response.status_code,
                requested_at=requested_at,
                latency_ms=latency_ms,
            )

        return ProviderResponse.ok(data, requested_at=requested_at, latency_ms=latency_ms)

    def _client(self) -> httpx.AsyncClient:
        cookies = None
        if self._config.session_cookie:
            cookies = {self._config.cookie_name: self._config.session_cookie}

        return httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            headers={"User-Agent": self._config.user_agent},
            cookies=cookies,
            transport=self._transport,
            follow_redirects=True,
        )


def _search_graph(payload: Any) -> GraphData:
    if not isinstance(payload, dict) or "graph" not in payload:
        raise InvalidGraphPayload("Search response has no graph")
    return GraphData.from_payload(payload["graph"])


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _since(started: float) -> float:
    return (time.monotonic() - started) * 1000.0
