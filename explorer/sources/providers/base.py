"""
Graph Provider Abstraction Layer
================================

Abstract interface for the services that produce graph data:
browse-category graphs, focused-node similarity graphs and semantic
search graphs.

BOUNDARY ENFORCEMENT:
- Providers are stateless request handlers
- Failures are explicit ProviderResponse values, never exceptions
- Providers know nothing about modes, generations or display state
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...contracts import (
    BrowseCategory, FetchOutcome, GraphData, MediaFilter, MediaType,
)


@dataclass(frozen=True)
class ProviderResponse:
    """
    Immutable response from a graph provider.

    INVARIANT: Either (success=True, data set) or (success=False, error_code set)
    """
    success: bool
    data: Optional[GraphData] = None

    # Failure info (only set if success=False)
    error_code: Optional[FetchOutcome] = None
    error_message: Optional[str] = None
    http_status: Optional[int] = None

    # Invocation metadata
    requested_at: Optional[datetime] = None
    latency_ms: float = 0.0

    def __post_init__(self):
        if self.success and self.data is None:
            raise ValueError("Successful response must have data")
        if not self.success and self.error_code is None:
            raise ValueError("Failed response must have error_code")
        if self.error_code is not None and not self.error_code.is_failure:
            raise ValueError("error_code must describe a failure")

    @staticmethod
    def ok(data: GraphData, requested_at: Optional[datetime] = None, latency_ms: float = 0.0) -> ProviderResponse:
        return ProviderResponse(success=True, data=data, requested_at=requested_at, latency_ms=latency_ms)

    @staticmethod
    def failed(
        error_code: FetchOutcome,
        message: str,
        http_status: Optional[int] = None,
        requested_at: Optional[datetime] = None,
        latency_ms: float = 0.0
    ) -> ProviderResponse:
        return ProviderResponse(
            success=False,
            error_code=error_code,
            error_message=message,
            http_status=http_status,
            requested_at=requested_at,
            latency_ms=latency_ms,
        )


class GraphProvider(ABC):
    """
    Abstract graph provider interface.

    GUARANTEES:
    - Every method returns a ProviderResponse and never raises
    - A successful response may carry an empty graph (no matches)

    EXPLICIT FAILURE STATES:
    - NETWORK_ERROR: Connection failed
    - TIMEOUT: Request exceeded the configured timeout
    - HTTP_ERROR: Service answered with a non-2xx status
    - INVALID_RESPONSE: Body could not be read as graph data
    """

    @abstractmethod
    async def browse(
        self,
        category: BrowseCategory,
        limit: int,
        cross_media: bool
    ) -> ProviderResponse:
        """Graph for a fixed browse category."""
        pass

    @abstractmethod
    async def similar(
        self,
        node_id: str,
        media_type: MediaType,
        limit: int,
        depth: int
    ) -> ProviderResponse:
        """Similarity graph centered on one node."""
        pass

    @abstractmethod
    async def search(
        self,
        query: str,
        media_filter: MediaFilter,
        limit: int
    ) -> ProviderResponse:
        """Graph of library content matching a free-text query."""
        pass

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique provider identifier."""
        pass
