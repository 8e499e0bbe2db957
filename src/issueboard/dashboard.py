"""Dashboard API for the issueboard issue tracker.

A FastAPI app serving a single project's issues as JSON. The app is a thin
adapter: every endpoint translates a request into one ``IssueRepository``
call and maps core errors onto HTTP status codes.

Usage:
    issueboard dashboard                 # Serve on localhost:8377
    issueboard dashboard --port 9000     # Custom port
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from typing import Any

from issueboard.core import DB_FILENAME, find_issueboard_root, read_config
from issueboard.db_store import SQLiteIssueStore
from issueboard.repository import IssueRepository

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8377

# Module-level store, set by main() or by tests before create_app().
_store: SQLiteIssueStore | None = None


def _get_repository() -> IssueRepository:
    """FastAPI dependency: a repository over the active store."""
    from fastapi import HTTPException

    if _store is None:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return IssueRepository(_store)


def create_app() -> Any:
    """Create the FastAPI application with all dashboard endpoints."""
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse

    from issueboard.dashboard_routes.issues import create_router

    app = FastAPI(title="issueboard Dashboard", docs_url=None, redoc_url=None)
    app.include_router(create_router(), prefix="/api")

    @app.get("/api/health")
    async def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok", "database": "ready" if _store is not None else "missing"})

    return app


def main(port: int = DEFAULT_PORT, *, no_browser: bool = False) -> None:
    """Start the dashboard server for the project discovered from cwd."""
    import uvicorn

    from issueboard.logging import setup_logging

    global _store

    issueboard_dir = find_issueboard_root()
    setup_logging(issueboard_dir)
    config = read_config(issueboard_dir)
    _store = SQLiteIssueStore(
        issueboard_dir / DB_FILENAME,
        prefix=config.get("prefix", "issueboard"),
        check_same_thread=False,
    )
    _store.initialize()

    app = create_app()

    if not no_browser:
        threading.Timer(0.5, lambda: webbrowser.open(f"http://localhost:{port}/api/issues")).start()

    logger.info("Dashboard starting on port %d for %s", port, issueboard_dir.parent)
    print(f"issueboard Dashboard: http://localhost:{port}")
    try:
        uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")
    finally:
        _store.close()
        _store = None
