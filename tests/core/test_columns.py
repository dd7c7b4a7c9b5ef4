"""Tests for category column introspection."""

from __future__ import annotations

import pytest

from attimo.core import AttimoDB
from attimo.errors import UnknownCategoryError, ValidationError


class TestListCategoryColumns:
    def test_table_order(self, tasks_db: AttimoDB) -> None:
        assert tasks_db.list_category_columns("Contact") == ["Opened", "Closed", "Note", "Email", "Phone", "File"]

    def test_include_and_exclude(self, tasks_db: AttimoDB) -> None:
        assert tasks_db.list_category_columns("General", include=["note", "Project"]) == ["Note", "Project"]
        assert tasks_db.list_category_columns("General", exclude=["Opened", "Closed", "file"]) == [
            "Note",
            "Project",
            "Location",
        ]

    def test_fill_behavior_filter(self, tasks_db: AttimoDB) -> None:
        assert tasks_db.list_category_columns("Tasks", fill_behavior="close") == ["Finished"]
        assert "Finished" not in tasks_db.list_category_columns("Tasks", fill_behavior="open")

    def test_filters_combine(self, tasks_db: AttimoDB) -> None:
        columns = tasks_db.list_category_columns("General", include=["Opened", "Closed", "Note"], fill_behavior="open")
        assert columns == ["Opened", "Note"]

    def test_unknown_category(self, tasks_db: AttimoDB) -> None:
        with pytest.raises(UnknownCategoryError):
            tasks_db.list_category_columns("Nope")
        with pytest.raises(UnknownCategoryError):
            tasks_db.list_category_columns("bad name")


class TestColumnDatatype:
    def test_lookup(self, tasks_db: AttimoDB) -> None:
        datatype = tasks_db.get_column_datatype("financial", "cost_eur")
        assert datatype.name == "Cost_EUR"
        assert datatype.variable_type == "int"

    def test_column_not_in_category(self, tasks_db: AttimoDB) -> None:
        with pytest.raises(ValidationError):
            tasks_db.get_column_datatype("Financial", "Email")

    def test_resolve_category_returns_stored_spelling(self, tasks_db: AttimoDB) -> None:
        assert tasks_db.resolve_category("gEnErAl") == "General"

    def test_resolve_category_rejects_trailing_newline(self, tasks_db: AttimoDB) -> None:
        with pytest.raises(UnknownCategoryError):
            tasks_db.resolve_category("General\n")
