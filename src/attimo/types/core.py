"""Foundational TypedDicts for dataclass to_dict() returns and query envelopes."""

from __future__ import annotations

from typing import Any, NewType, TypedDict

ISOTimestamp = NewType("ISOTimestamp", str)

# A category row as returned by reads: audit columns plus one key per column.
RowDict = dict[str, Any]

# Caller-supplied column -> value map for create, update, and filters.
RowData = dict[str, Any]


class ProjectConfig(TypedDict, total=False):
    """Shape of .attimo/config.json."""

    version: int
    page_size: int
    seed_defaults: bool
    datatypes: list[dict[str, Any]]
    categories: list[dict[str, Any]]


class DatatypeDict(TypedDict):
    id: int
    name: str
    variable_type: str
    completion_value: str
    completion_sort: str
    value_check: str
    fill_behavior: str


class ListRowsResult(TypedDict):
    """Envelope returned by ``list_rows_paginated()``."""

    rows: list[RowDict]
    total_rows: int
    current_page: int
    total_pages: int
    page_size: int


class PendingItem(TypedDict):
    """A live pending pointer resolved back to its category row."""

    pointer: str
    category: str
    pending_since: ISOTimestamp
    row: RowDict
