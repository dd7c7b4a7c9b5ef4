"""Tests for identifier safety checks on category and column names."""

from __future__ import annotations

import pytest

from attimo.errors import ConfigurationError, IdentifierError
from attimo.validation import (
    check_category_name,
    check_column_name,
    check_identifiers,
    is_identifier_safe,
    sanitize_identifier,
)


class TestSanitizeIdentifier:
    @pytest.mark.parametrize("name", ["General", "Cost_EUR", "_private", "a1", "X" * 64])
    def test_accepts_safe_names(self, name: str) -> None:
        assert sanitize_identifier(name) == (name, None)

    @pytest.mark.parametrize(
        ("name", "fragment"),
        [
            ("", "empty"),
            ("X" * 65, "at most"),
            ("my table", "letters, digits"),
            ("Tasks\n", "letters, digits"),
            (" General", "letters, digits"),
            ('x"; DROP TABLE datatypes; --', "letters, digits"),
            ("naïve", "letters, digits"),
            ("a-b", "letters, digits"),
            (42, "string"),
            (None, "string"),
        ],
    )
    def test_rejects_unsafe_names(self, name: object, fragment: str) -> None:
        value, err = sanitize_identifier(name)
        assert value == ""
        assert err is not None
        assert fragment in err

    def test_is_identifier_safe(self) -> None:
        assert is_identifier_safe("Notes")
        assert not is_identifier_safe("Notes;")
        assert not is_identifier_safe("Notes\n")


class TestCheckIdentifiers:
    def test_all_safe_passes(self) -> None:
        check_identifiers("General", "Opened", "Note")

    def test_first_bad_name_is_reported(self) -> None:
        with pytest.raises(IdentifierError) as exc_info:
            check_identifiers("General", "bad name", "also bad")
        assert exc_info.value.identifier == "bad name"

    def test_identifier_error_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            check_identifiers("x y")


class TestReservedNames:
    @pytest.mark.parametrize("name", ["metadata", "Datatypes", "PENDING", "sqlite_sequence", "sqlite_foo"])
    def test_category_cannot_shadow_internal_tables(self, name: str) -> None:
        with pytest.raises(IdentifierError, match="reserved"):
            check_category_name(name)

    @pytest.mark.parametrize("name", ["id", "created_at", "Updated_At", "DELETED_AT"])
    def test_column_cannot_shadow_audit_columns(self, name: str) -> None:
        with pytest.raises(IdentifierError, match="reserved"):
            check_column_name(name)

    def test_ordinary_names_pass_through(self) -> None:
        assert check_category_name("Projects") == "Projects"
        assert check_column_name("Identifier") == "Identifier"

    def test_trailing_newline_is_not_an_ordinary_name(self) -> None:
        with pytest.raises(IdentifierError):
            check_category_name("Projects\n")
        with pytest.raises(IdentifierError):
            check_column_name("Identifier\n")
