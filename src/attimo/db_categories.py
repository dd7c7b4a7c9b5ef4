"""CategoriesMixin -- schema builder and category/column introspection.

Category tables are generated from datatype definitions. SQLite cannot bind
identifiers as parameters, so every category and column name passes
``check_category_name`` / ``check_column_name`` before it is quoted and
interpolated into DDL. The live schema is the source of truth after
creation: column lists are read back from ``pragma_table_info``.
"""

from __future__ import annotations

import sqlite3

from attimo.datatypes import CategoryTemplate, Datatype
from attimo.db_base import AUDIT_COLUMNS, SYSTEM_TABLES, DBMixinProtocol, FillBehavior, quote_ident
from attimo.errors import ConfigurationError, UnknownCategoryError, ValidationError
from attimo.validation import check_category_name, check_column_name, is_identifier_safe

_AUDIT_DDL = (
    "id INTEGER PRIMARY KEY AUTOINCREMENT",
    "created_at DATETIME NOT NULL",
    "updated_at DATETIME NOT NULL",
    "deleted_at DATETIME",
)


class CategoriesMixin(DBMixinProtocol):
    """Category table creation and column listing.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``AttimoDB`` at composition time via MRO.
    """

    # -- Schema builder ------------------------------------------------------

    def _create_category_table(self, conn: sqlite3.Connection, template: CategoryTemplate) -> None:
        """Emit one CREATE TABLE for *template*. Caller owns the transaction.

        Every identifier is validated before any SQL runs, so a bad name
        never leaves a half-built table behind.
        """
        name = check_category_name(template.name)
        clash = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND lower(name) = lower(?)",
            (name,),
        ).fetchone()
        if clash is not None:
            msg = f"Category '{name}' already exists (as '{clash['name']}')"
            raise ConfigurationError(msg)

        datatypes: list[Datatype] = []
        seen: set[str] = set()
        for ref in template.columns:
            datatype = self.resolve_datatype(ref)
            check_column_name(datatype.name)
            if datatype.name.lower() in seen:
                msg = f"Category '{name}' references datatype '{datatype.name}' more than once"
                raise ConfigurationError(msg)
            seen.add(datatype.name.lower())
            datatypes.append(datatype)

        column_ddl = [f"{quote_ident(dt.name)} {dt.storage_type}" for dt in datatypes]
        ddl = f"CREATE TABLE {quote_ident(name)} ({', '.join([*_AUDIT_DDL, *column_ddl])})"
        conn.execute(ddl)
        self.logger.info(
            "Created category table %s with columns %s",
            name,
            [dt.name for dt in datatypes],
            extra={"category": name},
        )

    def create_category(self, template: CategoryTemplate) -> str:
        """Materialize a new category table in its own transaction."""
        with self.transaction() as conn:
            self._create_category_table(conn, template)
        return template.name

    # -- Introspection -------------------------------------------------------

    def list_categories(self) -> list[str]:
        rows = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\' ORDER BY name"
        ).fetchall()
        return [r["name"] for r in rows if r["name"] not in SYSTEM_TABLES]

    def resolve_category(self, category: str) -> str:
        """Return the stored spelling of *category* or raise UnknownCategoryError."""
        if not is_identifier_safe(category):
            raise UnknownCategoryError(str(category))
        for existing in self.list_categories():
            if existing.lower() == category.lower():
                return existing
        raise UnknownCategoryError(category)

    def _table_columns(self, category: str) -> list[str]:
        rows = self.conn.execute("SELECT name FROM pragma_table_info(?) ORDER BY cid", (category,)).fetchall()
        return [r["name"] for r in rows if r["name"] not in AUDIT_COLUMNS]

    def list_category_columns(
        self,
        category: str,
        *,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        fill_behavior: FillBehavior | None = None,
    ) -> list[str]:
        """List a category's datatype columns in table order.

        ``include`` keeps only the named columns, ``exclude`` drops the named
        columns, and ``fill_behavior`` keeps only columns filled at that
        lifecycle step. Filters combine with AND.
        """
        name = self.resolve_category(category)
        columns = self._table_columns(name)
        if include is not None:
            wanted = {c.lower() for c in include}
            columns = [c for c in columns if c.lower() in wanted]
        if exclude is not None:
            unwanted = {c.lower() for c in exclude}
            columns = [c for c in columns if c.lower() not in unwanted]
        if fill_behavior is not None:
            columns = [c for c in columns if self.get_datatype_by_name(c).fill_behavior == fill_behavior]
        return columns

    def get_column_datatype(self, category: str, column: str) -> Datatype:
        """Return the Datatype backing *column* of *category*."""
        name = self.resolve_category(category)
        for existing in self._table_columns(name):
            if existing.lower() == str(column).lower():
                return self.get_datatype_by_name(existing)
        msg = f"Column '{column}' does not exist in category {name}"
        raise ValidationError(str(column), msg)

    def _category_datatypes(self, category: str) -> dict[str, Datatype]:
        """Map each column of an already-resolved category to its Datatype."""
        return {c: self.get_datatype_by_name(c) for c in self._table_columns(category)}
