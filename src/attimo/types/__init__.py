# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_base.py, or any mixin (circular imports).
"""Typed return-value contracts for attimo core and API layers."""

from __future__ import annotations

from attimo.types.core import (
    DatatypeDict,
    ISOTimestamp,
    ListRowsResult,
    PendingItem,
    ProjectConfig,
    RowData,
    RowDict,
)

__all__ = [
    "DatatypeDict",
    "ISOTimestamp",
    "ListRowsResult",
    "PendingItem",
    "ProjectConfig",
    "RowData",
    "RowDict",
]
