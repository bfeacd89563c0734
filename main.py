"""
Main API module for Click Tracker.

Responsibilities:
    - Issue visitor identifiers
    - Record outbound link clicks, counting each visitor once per link per day
    - Expose per-link totals and the links a visitor already clicked today

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory Storage by default; Postgres via CLICK_STORAGE_BACKEND=postgres.
    - ClickManager owns validation and the insert-then-increment protocol;
      routes only translate HTTP to manager calls and errors to status codes.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from click_tracker.config import settings
from click_tracker.errors import InvalidInput, StorageUnavailable
from click_tracker.manager.click_manager import ClickManager
from click_tracker.storage.base import BaseStorage
from click_tracker.storage.storage_factory import get_storage

LOCAL_ORIGINS = ("localhost", "127.0.0.1")


class ClickRequest(BaseModel):
    """Request payload for a link click."""
    userId: Optional[str] = None
    linkId: Optional[str] = None
    linkUrl: Optional[str] = None


def create_app(storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use; chosen from env when omitted.

    Returns:
        FastAPI: A configured application with its own storage and manager.
    """
    app = FastAPI(
        title="Click Tracker",
        description="Outbound link click tracker with daily per-visitor deduplication",
        docs_url="/docs",
    )
    log = logging.getLogger("click_tracker")

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    if storage is None:
        storage = get_storage(ensure_schema=settings.DB_ENSURE_SCHEMA)
    manager = ClickManager(storage=storage)
    app.state.manager = manager

    log.info("Click tracker storage backend: %s", type(storage).__name__)

    # ----------------------------------------------------------------
    # Error mapping
    # ----------------------------------------------------------------
    @app.exception_handler(InvalidInput)
    async def _invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request body"})

    @app.exception_handler(StorageUnavailable)
    async def _storage_unavailable(request: Request, exc: StorageUnavailable) -> JSONResponse:
        log.warning("Storage unavailable on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"success": False, "message": "Storage unavailable"})

    def _is_local_origin(request: Request) -> bool:
        origin = request.headers.get("origin", "")
        return any(host in origin for host in LOCAL_ORIGINS)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/register")
    def register() -> Dict[str, Any]:
        """Issue a fresh visitor id."""
        return {"success": True, "userId": manager.register_visitor()}

    @app.post("/api/click")
    def click(req: ClickRequest, request: Request) -> Dict[str, Any]:
        """
        Record a click.

        Returns:
            dict: {"success": True, "totalCount": n} when counted,
                  {"success": False, "alreadyClicked": True} on a repeat click today.
        """
        if settings.IGNORE_LOCAL_ORIGINS and _is_local_origin(request):
            return {"success": False, "message": "Localhost clicks ignored"}

        result = manager.process_click(req.userId or "", req.linkId or "", req.linkUrl or "")
        if not result.counted:
            return {"success": False, "alreadyClicked": True}
        return {"success": True, "totalCount": result.total_count}

    @app.get("/api/stats")
    def stats(
        linkIds: Optional[List[str]] = Query(None, description="Only return these link ids."),
    ) -> Dict[str, Any]:
        """Per-link totals: {linkId: {"totalCount": int, "linkUrl": str}}."""
        counters = manager.get_stats(linkIds)
        return {
            "success": True,
            "stats": {
                link_id: {"totalCount": data["total_count"], "linkUrl": data["link_url"]}
                for link_id, data in counters.items()
            },
        }

    @app.get("/api/hasClicked")
    def has_clicked(userId: str = Query("", description="Visitor id.")) -> Dict[str, Any]:
        """Links the visitor was already counted for today."""
        if not userId:
            raise InvalidInput("userId required")
        return {"success": True, "clickedLinks": sorted(manager.list_clicked_links_today(userId))}

    return app


# `uvicorn main:app --reload` and `from main import app` keep working.
app = create_app()
