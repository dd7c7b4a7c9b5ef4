"""Local JSON API for attimo.

Exposes the collaborator operations (categories, columns, datatypes, rows,
close, pending) over HTTP for a single project. A module-level ``_db`` is set
at startup and injected via ``Depends(_get_db)``.

Usage:
    attimo dashboard                    # Serves http://localhost:8378/api
    attimo dashboard --port 9000        # Custom port
"""

from __future__ import annotations

import logging
from typing import Any

from attimo.core import DB_FILENAME, AttimoDB, find_attimo_root, read_config
from attimo.db_base import DEFAULT_PAGE_SIZE
from attimo.logging import setup_logging

DEFAULT_PORT = 8378

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level state -- set by main() or test fixtures
# ---------------------------------------------------------------------------

_db: AttimoDB | None = None


def _get_db() -> AttimoDB:
    """Return the active database connection."""
    from fastapi import HTTPException

    if _db is None:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return _db


def create_app() -> Any:
    """Create the FastAPI application with all API endpoints under ``/api``."""
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse

    from attimo import __version__
    from attimo.dashboard_routes import categories, pending

    app = FastAPI(title="Attimo", version=__version__, docs_url=None, redoc_url=None)
    app.include_router(categories.create_router(), prefix="/api")
    app.include_router(pending.create_router(), prefix="/api")

    @app.get("/api/health")
    async def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    return app


def main(port: int = DEFAULT_PORT) -> None:
    """Start the API server for the project found from the current directory."""
    import uvicorn

    global _db

    attimo_dir = find_attimo_root()
    setup_logging(attimo_dir)
    config = read_config(attimo_dir)
    _db = AttimoDB(
        attimo_dir / DB_FILENAME,
        seed_defaults=config.get("seed_defaults", True),
        datatypes=config.get("datatypes"),
        categories=config.get("categories"),
        page_size=config.get("page_size", DEFAULT_PAGE_SIZE),
        check_same_thread=False,
    )
    _db.initialize()

    app = create_app()

    print(f"Attimo API: http://localhost:{port}/api")
    logger.info("Serving %s on port %d", attimo_dir, port)
    try:
        uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")
    finally:
        _db.close()
        _db = None
