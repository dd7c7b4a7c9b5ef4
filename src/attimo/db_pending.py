"""PendingMixin -- the index of still-open items.

A pointer is the string ``"<category>:<id>"``. It is live (``deleted_at IS
NULL``) exactly while the row it names exists, is not soft-deleted, and has
not been closed. Register and deregister take the caller's connection and
never commit: they always run inside the transaction of the row write that
triggered them.
"""

from __future__ import annotations

import re
import sqlite3
from typing import TYPE_CHECKING, cast

from attimo.db_base import DBMixinProtocol, _now_iso
from attimo.types.core import ISOTimestamp, PendingItem, RowDict

_POINTER_PATTERN = re.compile(r"(?P<category>[A-Za-z0-9_]+):(?P<id>[0-9]+)")


def format_pointer(category: str, item_id: int) -> str:
    return f"{category}:{item_id}"


def parse_pointer(pointer: str) -> tuple[str, int]:
    """Split ``"category:id"`` into its parts.

    Raises ValueError for anything that is not exactly one identifier, a
    colon, and a non-negative integer.
    """
    match = _POINTER_PATTERN.fullmatch(pointer) if isinstance(pointer, str) else None
    if match is None:
        msg = f"Invalid pending pointer {pointer!r}: expected 'category:id'"
        raise ValueError(msg)
    return match.group("category"), int(match.group("id"))


class PendingMixin(DBMixinProtocol):
    """Pending pointer bookkeeping.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``AttimoDB`` at composition time via MRO.
    """

    if TYPE_CHECKING:

        def read_row(self, category: str, item_id: int) -> RowDict: ...

    # -- Writes (inside the caller's transaction) ----------------------------

    def _register_pending(self, conn: sqlite3.Connection, category: str, item_id: int) -> None:
        """Mark ``category:item_id`` as open. Idempotent."""
        pointer = format_pointer(category, item_id)
        now = _now_iso()
        existing = conn.execute(
            "SELECT id, deleted_at FROM pending WHERE pointer = ? ORDER BY deleted_at IS NOT NULL, id DESC LIMIT 1",
            (pointer,),
        ).fetchone()
        if existing is not None and existing["deleted_at"] is None:
            conn.execute("UPDATE pending SET updated_at = ? WHERE id = ?", (now, existing["id"]))
            self.logger.debug("Refreshed pending pointer %s", pointer, extra={"pointer": pointer})
            return
        if existing is not None:
            # A revived pointer starts a new pending period.
            conn.execute(
                "UPDATE pending SET created_at = ?, updated_at = ?, deleted_at = NULL WHERE id = ?",
                (now, now, existing["id"]),
            )
            self.logger.debug("Revived pending pointer %s", pointer, extra={"pointer": pointer})
            return
        conn.execute(
            "INSERT INTO pending (created_at, updated_at, pointer) VALUES (?, ?, ?)",
            (now, now, pointer),
        )
        self.logger.debug("Registered pending pointer %s", pointer, extra={"pointer": pointer})

    def _deregister_pending(self, conn: sqlite3.Connection, category: str, item_id: int) -> bool:
        """Tombstone the live pointer for ``category:item_id``.

        Returns False (not an error) when no live pointer existed.
        """
        pointer = format_pointer(category, item_id)
        now = _now_iso()
        cursor = conn.execute(
            "UPDATE pending SET deleted_at = ?, updated_at = ? WHERE pointer = ? AND deleted_at IS NULL",
            (now, now, pointer),
        )
        removed = cursor.rowcount > 0
        if removed:
            self.logger.debug("Deregistered pending pointer %s", pointer, extra={"pointer": pointer})
        return removed

    # -- Reads ---------------------------------------------------------------

    def list_pending_pointers(self) -> list[str]:
        """Return live pointers, most recent first."""
        rows = self.conn.execute(
            "SELECT pointer FROM pending WHERE deleted_at IS NULL ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [r["pointer"] for r in rows]

    def get_pending_items(self) -> list[PendingItem]:
        """Resolve each live pointer to its row. Unresolvable pointers are skipped."""
        rows = self.conn.execute(
            "SELECT pointer, created_at FROM pending WHERE deleted_at IS NULL ORDER BY created_at DESC, id DESC"
        ).fetchall()
        items: list[PendingItem] = []
        for r in rows:
            pointer = r["pointer"]
            try:
                category, item_id = parse_pointer(pointer)
                row = self.read_row(category, item_id)
            except (ValueError, LookupError) as exc:
                self.logger.warning(
                    "Skipping unresolvable pending pointer %s: %s",
                    pointer,
                    exc,
                    extra={"pointer": pointer, "error": str(exc)},
                )
                continue
            items.append(
                PendingItem(
                    pointer=pointer,
                    category=category,
                    pending_since=cast(ISOTimestamp, r["created_at"]),
                    row=row,
                )
            )
        return items
