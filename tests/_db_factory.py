"""Shared AttimoDB factory for test fixtures.

Importable by any conftest.py or test file in the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from attimo.core import AttimoDB

# A small category whose columns exercise every check kind that needs no
# filesystem state: date, nonempty, range, in, url, mail, phone, no.
TASK_DATATYPES: list[dict[str, Any]] = [
    {"name": "Started", "variable_type": "time", "value_check": "date", "fill_behavior": "open"},
    {"name": "Finished", "variable_type": "time", "value_check": "date", "fill_behavior": "close"},
    {"name": "Title", "variable_type": "string", "value_check": "nonempty"},
    {"name": "Effort", "variable_type": "int", "value_check": "range(1,10)"},
    {"name": "Size", "variable_type": "string", "value_check": "in(S,M,L)"},
    {"name": "Ratio", "variable_type": "float", "value_check": "no"},
    {"name": "Done", "variable_type": "bool", "value_check": "no"},
    {"name": "Labels", "variable_type": "csv", "value_check": "nonempty"},
]

TASK_CATEGORY: dict[str, Any] = {
    "name": "Tasks",
    "columns": ["Started", "Finished", "Title", "Effort", "Size", "Ratio", "Done", "Labels"],
}

# A category with no close column: items are never pending-closable.
NOTES_CATEGORY: dict[str, Any] = {"name": "Notes", "columns": ["Note", "Project"]}


def make_db(
    tmp_path: Path,
    *,
    seed_defaults: bool = True,
    with_tasks: bool = True,
    check_same_thread: bool = True,
) -> AttimoDB:
    """Factory for AttimoDB instances in tests.

    Centralizes construction so fixtures reduce to one-liners. With
    *with_tasks* the ``Tasks`` category (and its datatypes) is added on top
    of the built-ins, plus ``Notes`` when the built-ins are seeded.
    """
    datatypes = TASK_DATATYPES if with_tasks else []
    categories = [TASK_CATEGORY] if with_tasks else []
    if with_tasks and seed_defaults:
        categories = [*categories, NOTES_CATEGORY]
    d = AttimoDB(
        tmp_path / "attimo.db",
        seed_defaults=seed_defaults,
        datatypes=datatypes,
        categories=categories,
        check_same_thread=check_same_thread,
    )
    d.initialize()
    return d


def task_row(**overrides: Any) -> dict[str, Any]:
    """A valid ``Tasks`` row; keyword arguments replace or add columns."""
    row: dict[str, Any] = {
        "Started": "01-01-2024",
        "Title": "Write tests",
        "Effort": 3,
        "Size": "M",
        "Ratio": 0.5,
        "Done": False,
        "Labels": ["core", "db"],
    }
    row.update(overrides)
    return row
