"""Category, column, datatype, and row route handlers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

if TYPE_CHECKING:
    from fastapi import APIRouter

from attimo.core import AttimoDB
from attimo.dashboard_routes.common import (
    _attimo_error_response,
    _error_response,
    _parse_csv_param,
    _parse_json_body,
    _safe_int,
)
from attimo.datatypes import coerce_value
from attimo.dates import parse_time_input
from attimo.db_pending import format_pointer
from attimo.errors import AttimoError, ValidationError

logger = logging.getLogger(__name__)

# Query parameters of the rows listing that are not column filters.
_LIST_PARAMS = frozenset({"page", "page_size"})

# ---------------------------------------------------------------------------
# Router factory
# ---------------------------------------------------------------------------


def create_router() -> APIRouter:
    """Build the APIRouter for category, column, datatype, and row endpoints.

    NOTE: All handlers are intentionally async despite doing synchronous
    SQLite I/O. This serializes DB access on the event loop thread,
    avoiding concurrent multi-thread access to the shared DB connection.
    """
    from fastapi import APIRouter, Depends
    from fastapi.responses import JSONResponse

    from attimo.dashboard import _get_db

    router = APIRouter()

    # -- Schema --------------------------------------------------------------

    @router.get("/categories")
    async def api_categories(db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        return JSONResponse(db.list_categories())

    @router.get("/categories/{category}/columns")
    async def api_columns(category: str, request: Request, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        """Columns of a category, filtered by ``include``/``exclude`` (comma lists) and ``fill``."""
        params = request.query_params
        fill = params.get("fill")
        if fill is not None and fill not in ("open", "close"):
            return _error_response(
                f'Invalid value for fill: "{fill}". Must be open or close.',
                "VALIDATION_ERROR",
                400,
                {"param": "fill", "value": fill},
            )
        try:
            columns = db.list_category_columns(
                category,
                include=_parse_csv_param(params.get("include")),
                exclude=_parse_csv_param(params.get("exclude")),
                fill_behavior=fill,  # type: ignore[arg-type]
            )
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse(columns)

    @router.get("/categories/{category}/columns/{column}/datatype")
    async def api_column_datatype(category: str, column: str, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        try:
            datatype = db.get_column_datatype(category, column)
        except ValidationError as e:
            return _error_response(str(e), "COLUMN_NOT_FOUND", 404, {"category": category, "column": column})
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse(datatype.to_dict())

    @router.get("/datatypes")
    async def api_datatypes(db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        return JSONResponse([dt.to_dict() for dt in db.list_datatypes()])

    # -- Rows ----------------------------------------------------------------

    @router.get("/categories/{category}/rows")
    async def api_list_rows(category: str, request: Request, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        """Paginated live rows. Any query param other than page/page_size is an equality filter."""
        params = request.query_params
        page = _safe_int(params.get("page", "1"), "page")
        if not isinstance(page, int):
            return page
        page_size = _safe_int(params.get("page_size", str(db.page_size)), "page_size")
        if not isinstance(page_size, int):
            return page_size
        try:
            filters: dict[str, Any] = {}
            for key, raw in params.items():
                if key in _LIST_PARAMS:
                    continue
                datatype = db.get_column_datatype(category, key)
                filters[datatype.name] = coerce_value(datatype, raw)
            result = db.list_rows_paginated(category, filters, page, page_size)
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse(result)

    @router.post("/categories/{category}/rows")
    async def api_create_row(category: str, request: Request, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        """Open a new item. The body is a JSON object of column -> value."""
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        try:
            name = db.resolve_category(category)
            item_id = db.create_row(name, body)
            row = db.read_row(name, item_id)
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse({"id": item_id, "pointer": format_pointer(name, item_id), "row": row}, status_code=201)

    @router.get("/categories/{category}/rows/{item_id}")
    async def api_read_row(category: str, item_id: int, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        try:
            row = db.read_row(category, item_id)
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse(row)

    @router.patch("/categories/{category}/rows/{item_id}")
    async def api_update_row(
        category: str, item_id: int, request: Request, db: AttimoDB = Depends(_get_db)
    ) -> JSONResponse:
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        try:
            db.update_row(category, item_id, body)
            row = db.read_row(category, item_id)
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse(row)

    @router.delete("/categories/{category}/rows/{item_id}")
    async def api_delete_row(category: str, item_id: int, db: AttimoDB = Depends(_get_db)) -> JSONResponse:
        try:
            name = db.resolve_category(category)
            db.delete_row(name, item_id)
        except AttimoError as e:
            return _attimo_error_response(e)
        return JSONResponse({"deleted": format_pointer(name, item_id)})

    @router.post("/categories/{category}/rows/{item_id}/close")
    async def api_close_row(
        category: str, item_id: int, request: Request, db: AttimoDB = Depends(_get_db)
    ) -> JSONResponse:
        """Close an item. Body: ``{"value": ..., "column": ...}``, both optional.

        For date close columns, ``value`` may be omitted (today) or given as
        ``+N``/``-N`` minutes from now.
        """
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        column = body.get("column")
        value = body.get("value")
        if column is not None and not isinstance(column, str):
            return _error_response("column must be a string", "VALIDATION_ERROR", 400, {"column": column})
        try:
            name = db.resolve_category(category)
            close_columns = db.list_category_columns(name, fill_behavior="close")
            target = column or (close_columns[0] if len(close_columns) == 1 else None)
            if target is not None:
                datatype = db.get_column_datatype(name, target)
                if datatype.variable_type == "time" and (value is None or isinstance(value, str)):
                    value = parse_time_input(value or "")
            db.close_item(name, item_id, value, column=column)
        except AttimoError as e:
            return _attimo_error_response(e)
        except ValueError as e:
            return _error_response(str(e), "VALIDATION_ERROR", 400)
        return JSONResponse({"closed": format_pointer(name, item_id), "value": value})

    return router
