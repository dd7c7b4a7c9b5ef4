"""RowsMixin -- validated CRUD on category tables.

Values are always bound as parameters; only identifiers that were read back
from the live schema (and re-checked) are interpolated. Each write runs in
one transaction together with its pending-index bookkeeping, so a row and
its pointer are committed or rolled back together.
"""

from __future__ import annotations

import math
import sqlite3
from typing import TYPE_CHECKING, Any

from attimo.datatypes import Datatype, normalize_value
from attimo.db_base import AUDIT_COLUMNS, DEFAULT_PAGE_SIZE, DBMixinProtocol, _now_iso, quote_ident
from attimo.db_pending import parse_pointer
from attimo.errors import ConfigurationError, NotFoundError, ValidationError
from attimo.types.core import ListRowsResult, RowData, RowDict
from attimo.validation import check_identifiers

# variable type -> Python types a value may have once normalised
_ACCEPTED_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "int": (int,),
    "float": (int, float),
    "bool": (bool,),
    "time": (str,),
    "csv": (str,),
}


class RowsMixin(DBMixinProtocol):
    """Create, read, update, list, soft-delete, and close category rows.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``AttimoDB`` at composition time via MRO.
    """

    if TYPE_CHECKING:

        def resolve_category(self, category: str) -> str: ...
        def _category_datatypes(self, category: str) -> dict[str, Datatype]: ...
        def _register_pending(self, conn: sqlite3.Connection, category: str, item_id: int) -> None: ...
        def _deregister_pending(self, conn: sqlite3.Connection, category: str, item_id: int) -> bool: ...

    # -- Validation ----------------------------------------------------------

    def _check_value(self, datatype: Datatype, value: Any) -> None:
        column = datatype.name
        if value is None:
            msg = f"Column {column}: a value is required"
            raise ValidationError(column, msg, value)
        accepted = _ACCEPTED_TYPES[datatype.variable_type]
        if (isinstance(value, bool) and bool not in accepted) or not isinstance(value, accepted):
            msg = f"Column {column}: expected a {datatype.variable_type} value, got {type(value).__name__}"
            raise ValidationError(column, msg, value)
        if not self.checks.validate_check(datatype, value):
            msg = f"Invalid value for column {column}: {value!r} fails check '{datatype.value_check}'"
            raise ValidationError(column, msg, value)

    def _resolve_column(self, category: str, datatypes: dict[str, Datatype], key: Any) -> str:
        lowered = str(key).lower()
        for column in datatypes:
            if column.lower() == lowered:
                return column
        if lowered in AUDIT_COLUMNS:
            msg = f"Column '{key}' is an audit column and cannot be written"
        else:
            msg = f"Column '{key}' does not exist in category {category}"
        raise ValidationError(str(key), msg)

    def _validate_row_data(self, category: str, data: Any, datatypes: dict[str, Datatype]) -> dict[str, Any]:
        """Check every key and value of *data*; return normalised values by column.

        Raises ValidationError on the first offending column.
        """
        if not isinstance(data, dict):
            msg = f"Row data must be a mapping of column to value, got {type(data).__name__}"
            raise ValidationError("", msg)
        cleaned: dict[str, Any] = {}
        for key, raw in data.items():
            column = self._resolve_column(category, datatypes, key)
            if column in cleaned:
                msg = f"Column {column} given more than once"
                raise ValidationError(column, msg, raw)
            datatype = datatypes[column]
            if datatype.fill_behavior == "close":
                msg = f"Column {column} is filled when the item is closed; use close_item()"
                raise ValidationError(column, msg, raw)
            value = normalize_value(datatype, raw)
            self._check_value(datatype, value)
            cleaned[column] = value
        return cleaned

    # -- Create / read / update ----------------------------------------------

    def create_row(self, category: str, data: RowData) -> int:
        """Insert a validated row and return its id.

        If the category has any open-fill column the new item is registered
        as pending in the same transaction.
        """
        with self.transaction() as conn:
            name = self.resolve_category(category)
            datatypes = self._category_datatypes(name)
            cleaned = self._validate_row_data(name, data, datatypes)
            for column, datatype in datatypes.items():
                if datatype.fill_behavior == "open" and datatype.variable_type == "time" and column not in cleaned:
                    msg = f"Missing required column {column} for category {name}"
                    raise ValidationError(column, msg)
            check_identifiers(name, *cleaned)

            now = _now_iso()
            columns = ["created_at", "updated_at", *cleaned]
            placeholders = ", ".join("?" * len(columns))
            cursor = conn.execute(
                f"INSERT INTO {quote_ident(name)} ({', '.join(quote_ident(c) for c in columns)}) VALUES ({placeholders})",
                [now, now, *cleaned.values()],
            )
            item_id = cursor.lastrowid
            if item_id is None:  # pragma: no cover -- INSERT always sets lastrowid
                msg = "INSERT did not produce a lastrowid"
                raise RuntimeError(msg)
            if any(dt.fill_behavior == "open" for dt in datatypes.values()):
                self._register_pending(conn, name, item_id)

        self.logger.info("Created %s:%d", name, item_id, extra={"category": name, "item_id": item_id})
        return item_id

    def read_row(self, category: str, item_id: int) -> RowDict:
        name = self.resolve_category(category)
        row = self.conn.execute(
            f"SELECT * FROM {quote_ident(name)} WHERE id = ? AND deleted_at IS NULL",
            (item_id,),
        ).fetchone()
        if row is None:
            raise NotFoundError(name, item_id)
        return dict(row)

    def update_row(self, category: str, item_id: int, data: RowData) -> None:
        with self.transaction() as conn:
            name = self.resolve_category(category)
            datatypes = self._category_datatypes(name)
            cleaned = self._validate_row_data(name, data, datatypes)
            if not cleaned:
                msg = "No columns to update"
                raise ValidationError("", msg)
            check_identifiers(name, *cleaned)

            assignments = ", ".join(f"{quote_ident(c)} = ?" for c in cleaned)
            cursor = conn.execute(
                f"UPDATE {quote_ident(name)} SET {assignments}, updated_at = ? WHERE id = ? AND deleted_at IS NULL",
                [*cleaned.values(), _now_iso(), item_id],
            )
            if cursor.rowcount == 0:
                raise NotFoundError(name, item_id)

        self.logger.info(
            "Updated %s:%d (%s)",
            name,
            item_id,
            ", ".join(cleaned),
            extra={"category": name, "item_id": item_id},
        )

    # -- Listing -------------------------------------------------------------

    def list_rows(
        self,
        category: str,
        filters: RowData | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[RowDict], int]:
        """Return one page of live rows (newest first) and the total match count.

        Filters are equality matches on category columns; a ``None`` value
        matches NULL. ``page`` and ``page_size`` must already be positive.
        """
        if page < 1 or page_size < 1:
            msg = f"page and page_size must be positive, got page={page} page_size={page_size}"
            raise ValueError(msg)
        name = self.resolve_category(category)
        datatypes = self._category_datatypes(name)

        clauses = ["deleted_at IS NULL"]
        params: list[Any] = []
        for key, raw in (filters or {}).items():
            column = self._resolve_column(name, datatypes, key)
            check_identifiers(column)
            if raw is None:
                clauses.append(f"{quote_ident(column)} IS NULL")
            else:
                clauses.append(f"{quote_ident(column)} = ?")
                params.append(normalize_value(datatypes[column], raw))
        where = " AND ".join(clauses)

        with self.transaction(write=False) as conn:
            total: int = conn.execute(f"SELECT COUNT(*) FROM {quote_ident(name)} WHERE {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM {quote_ident(name)} WHERE {where} ORDER BY id DESC LIMIT ? OFFSET ?",
                [*params, page_size, (page - 1) * page_size],
            ).fetchall()
        return [dict(r) for r in rows], total

    def list_rows_paginated(
        self,
        category: str,
        filters: RowData | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ListRowsResult:
        """List rows with pagination metadata, clamping out-of-range paging.

        Returns ``{rows, total_rows, current_page, total_pages, page_size}``.
        """
        page = max(page, 1)
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE
        rows, total = self.list_rows(category, filters, page, page_size)
        return ListRowsResult(
            rows=rows,
            total_rows=total,
            current_page=page,
            total_pages=math.ceil(total / page_size),
            page_size=page_size,
        )

    # -- Delete / close ------------------------------------------------------

    def delete_row(self, category: str, item_id: int) -> None:
        """Soft-delete a live row and drop its pending pointer."""
        with self.transaction() as conn:
            name = self.resolve_category(category)
            now = _now_iso()
            cursor = conn.execute(
                f"UPDATE {quote_ident(name)} SET deleted_at = ?, updated_at = ? WHERE id = ? AND deleted_at IS NULL",
                (now, now, item_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(name, item_id)
            self._deregister_pending(conn, name, item_id)

        self.logger.info("Deleted %s:%d", name, item_id, extra={"category": name, "item_id": item_id})

    def close_item(self, category: str, item_id: int, close_value: Any, *, column: str | None = None) -> None:
        """Fill the close column of an open item and drop its pending pointer.

        ``column`` picks the close-fill column when the category has more
        than one. An item that does not exist, is deleted, or is already
        closed raises NotFoundError.
        """
        if column is not None and not isinstance(column, str):
            msg = f"Close column must be a column name, got {column!r}"
            raise ConfigurationError(msg)
        with self.transaction() as conn:
            name = self.resolve_category(category)
            datatypes = self._category_datatypes(name)
            close_columns = [c for c, dt in datatypes.items() if dt.fill_behavior == "close"]
            if column is not None:
                target = next((c for c in close_columns if c.lower() == column.lower()), None)
                if target is None:
                    msg = f"Column '{column}' is not a close column of category {name}"
                    raise ConfigurationError(msg)
            elif not close_columns:
                msg = f"Category {name} has no close column"
                raise ConfigurationError(msg)
            elif len(close_columns) > 1:
                msg = f"Category {name} has several close columns ({', '.join(close_columns)}); choose one"
                raise ConfigurationError(msg)
            else:
                target = close_columns[0]

            datatype = datatypes[target]
            value = normalize_value(datatype, close_value)
            self._check_value(datatype, value)
            check_identifiers(name, target)

            col = quote_ident(target)
            cursor = conn.execute(
                f"UPDATE {quote_ident(name)} SET {col} = ?, updated_at = ? "
                f"WHERE id = ? AND deleted_at IS NULL AND {col} IS NULL",
                (value, _now_iso(), item_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(name, item_id)
            self._deregister_pending(conn, name, item_id)

        self.logger.info(
            "Closed %s:%d (%s=%s)",
            name,
            item_id,
            target,
            value,
            extra={"category": name, "item_id": item_id, "column": target},
        )

    def close_pointer(self, pointer: str, close_value: Any, *, column: str | None = None) -> None:
        """Close the item named by a ``"category:id"`` pending pointer."""
        category, item_id = parse_pointer(pointer)
        self.close_item(category, item_id, close_value, column=column)
