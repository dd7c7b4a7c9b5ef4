"""Pending index route handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.requests import Request

if TYPE_CHECKING:
    from fastapi import APIRouter

from attimo.core import AttimoDB
from attimo.dashboard_routes.common import _get_bool_param


def create_router() -> APIRouter:
    """Build the APIRouter for the pending endpoint."""
    from fastapi import APIRouter, Depends
    from fastapi.responses import JSONResponse

    from attimo.dashboard import _get_db

    router = APIRouter()

    @router.get("/pending")
    async def api_pending(request: Request, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        """Open items, most recent first; ``?pointers_only=true`` returns bare pointers."""
        pointers_only = _get_bool_param(request.query_params, "pointers_only", False)
        if not isinstance(pointers_only, bool):
            return pointers_only
        if pointers_only:
            return JSONResponse(db.list_pending_pointers())
        return JSONResponse(db.get_pending_items())

    return router
