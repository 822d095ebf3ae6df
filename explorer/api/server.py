"""
Explore Navigator: API Server
=============================

HTTP surface hosting one navigator session. Every mutating endpoint runs
the corresponding navigator operation to completion and returns the
resulting ExploreStateDTO.

Endpoints:
- GET    /health
- GET    /api/explore/state                  -> Resolved display + navigation state
- POST   /api/explore/search                 -> Run a semantic search
- DELETE /api/explore/search                 -> Clear search results
- POST   /api/explore/browse                 -> Select a browse category
- POST   /api/explore/cross-media            -> Toggle cross-media browsing
- POST   /api/explore/media-filter           -> Media restriction for searches
- POST   /api/explore/nodes/click            -> Drill into a displayed node
- POST   /api/explore/nodes/double-click     -> Detail route for a displayed node
- GET    /api/explore/nodes/{id}/connections -> Neighbors of a displayed node
- POST   /api/explore/history/{index}        -> Jump back in history
- POST   /api/explore/start-over
- POST   /api/explore/refresh
- DELETE /api/explore/recent/{query}

Usage:
    uvicorn explorer.api.server:app --reload
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..config import ExplorerConfig
from ..contracts import BrowseCategory, DetailRoute, GraphNode, MediaFilter, MediaType
from ..navigator import ExploreNavigator, parse_focus
from ..sources import HttpGraphProvider
from ..topology import GraphTopology
from .mapper import map_navigator_to_dto, map_route

logger = logging.getLogger(__name__)


NavigatorFactory = Callable[[], ExploreNavigator]


# =============================================================================
# REQUEST MODELS
# =============================================================================

class SearchRequest(BaseModel):
    query: str


class BrowseRequest(BaseModel):
    category: str


class CrossMediaRequest(BaseModel):
    enabled: bool


class MediaFilterRequest(BaseModel):
    filter: str


class NodeRequest(BaseModel):
    id: str
    type: str


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

def default_navigator() -> ExploreNavigator:
    """Navigator against the similarity service configured in the environment."""
    config = ExplorerConfig.from_env()
    logger.info("Connecting navigator to %s", config.provider.base_url)
    return ExploreNavigator(
        HttpGraphProvider(config.provider),
        config=config,
        on_exit=_log_exit,
        initial_focus=parse_focus(os.environ.get("EXPLORER_FOCUS")),
    )


def _log_exit(route: DetailRoute) -> None:
    logger.info("Leaving explorer for %s", route.path)


def create_app(navigator_factory: Optional[NavigatorFactory] = None) -> FastAPI:
    """Build the API around one navigator session."""
    factory = navigator_factory or default_navigator

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the navigator session on startup, tear it down on shutdown."""
        navigator = factory()
        app.state.navigator = navigator
        await navigator.start()
        logger.info("Navigator session started")

        yield

        logger.info("Shutting down navigator session")
        navigator.close()
        app.state.navigator = None

    app = FastAPI(
        title="Explore Navigator API",
        version="0.1.0",
        description="Interactive similarity-graph exploration",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


def get_navigator(request: Request) -> ExploreNavigator:
    navigator = getattr(request.app.state, "navigator", None)
    if navigator is None:
        raise HTTPException(status_code=503, detail="Navigator not initialized")
    return navigator


# =============================================================================
# ENDPOINTS
# =============================================================================

def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    async def health_check(request: Request):
        """System status."""
        if getattr(request.app.state, "navigator", None) is None:
            raise HTTPException(status_code=503, detail="Navigator not initialized")
        return {"status": "online"}

    @app.get("/api/explore/state")
    async def get_state(navigator: ExploreNavigator = Depends(get_navigator)):
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/search")
    async def run_search(body: SearchRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        if not body.query.strip():
            raise HTTPException(status_code=400, detail="Query must not be empty")
        await navigator.run_search(body.query)
        return map_navigator_to_dto(navigator)

    @app.delete("/api/explore/search")
    async def clear_search(navigator: ExploreNavigator = Depends(get_navigator)):
        navigator.clear_search()
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/browse")
    async def select_browse(body: BrowseRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        category = _parse_enum(BrowseCategory, body.category, "category")
        await navigator.select_browse_category(category)
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/cross-media")
    async def set_cross_media(body: CrossMediaRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        await navigator.set_cross_media(body.enabled)
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/media-filter")
    async def set_media_filter(body: MediaFilterRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        navigator.set_media_filter(_parse_enum(MediaFilter, body.filter, "filter"))
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/nodes/click")
    async def click_node(body: NodeRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        await navigator.on_node_click(_displayed_node(navigator, body))
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/nodes/double-click")
    async def double_click_node(body: NodeRequest, navigator: ExploreNavigator = Depends(get_navigator)):
        route = navigator.on_node_double_click(_displayed_node(navigator, body))
        return map_route(route)

    @app.get("/api/explore/nodes/{node_id}/connections")
    async def node_connections(node_id: str, navigator: ExploreNavigator = Depends(get_navigator)):
        data = navigator.display.data
        if data is None or data.node(node_id) is None:
            raise HTTPException(status_code=404, detail=f"Node {node_id} is not displayed")
        return {
            "id": node_id,
            "connections": [
                {
                    "id": c.node_id,
                    "title": c.title,
                    "similarity": c.similarity,
                    "reasons": [{"type": r.type.value, "value": r.value} for r in c.reasons],
                }
                for c in GraphTopology(data).connections(node_id)
            ],
        }

    @app.post("/api/explore/history/{index}")
    async def go_to_history(index: int, navigator: ExploreNavigator = Depends(get_navigator)):
        if index < 0 or index > len(navigator.history):
            raise HTTPException(status_code=400, detail=f"History index {index} out of range")
        await navigator.go_to_history(index)
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/start-over")
    async def start_over(navigator: ExploreNavigator = Depends(get_navigator)):
        await navigator.start_over()
        return map_navigator_to_dto(navigator)

    @app.post("/api/explore/refresh")
    async def refresh(navigator: ExploreNavigator = Depends(get_navigator)):
        await navigator.refresh()
        return map_navigator_to_dto(navigator)

    @app.delete("/api/explore/recent/{query}")
    async def remove_recent(query: str, navigator: ExploreNavigator = Depends(get_navigator)):
        return {"recent_searches": list(navigator.remove_recent_search(query))}


def _parse_enum(enum_cls, value: str, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise HTTPException(status_code=400, detail=f"Invalid {field} '{value}' (expected one of: {allowed})")


def _displayed_node(navigator: ExploreNavigator, body: NodeRequest) -> GraphNode:
    """Resolve a node reference against the currently displayed graph."""
    media_type = _parse_enum(MediaType, body.type, "type")
    data = navigator.display.data
    node = data.node(body.id) if data is not None else None
    if node is None or node.media_type is not media_type:
        raise HTTPException(status_code=404, detail=f"Node {body.type}:{body.id} is not displayed")
    return node


app = create_app()
