"""CLI tests for init, schema introspection, rows, close and pending."""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from attimo.cli import cli
from attimo.core import ATTIMO_DIR_NAME, CONFIG_FILENAME, DB_FILENAME
from attimo.dates import format_date
from tests.cli.conftest import _extract_pointer


class TestInit:
    def test_init_creates_project(self, tmp_path: Path, cli_runner: CliRunner) -> None:
        original = os.getcwd()
        try:
            os.chdir(str(tmp_path))
            result = cli_runner.invoke(cli, ["init"])
        finally:
            os.chdir(original)
        assert result.exit_code == 0
        assert "Initialized" in result.output
        assert "Contact, Financial, General" in result.output
        attimo_dir = tmp_path / ATTIMO_DIR_NAME
        assert (attimo_dir / DB_FILENAME).exists()
        config = json.loads((attimo_dir / CONFIG_FILENAME).read_text())
        assert config["seed_defaults"] is True

    def test_init_no_defaults(self, tmp_path: Path, cli_runner: CliRunner) -> None:
        original = os.getcwd()
        try:
            os.chdir(str(tmp_path))
            result = cli_runner.invoke(cli, ["init", "--no-defaults"])
            listed = cli_runner.invoke(cli, ["categories"])
        finally:
            os.chdir(original)
        assert result.exit_code == 0
        assert "(none)" in result.output
        assert "No categories." in listed.output

    def test_init_twice(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_commands_outside_project_fail(self, tmp_path: Path, cli_runner: CliRunner) -> None:
        original = os.getcwd()
        try:
            os.chdir(str(tmp_path))
            result = cli_runner.invoke(cli, ["categories"])
        finally:
            os.chdir(original)
        assert result.exit_code == 1
        assert "attimo init" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestSchemaCommands:
    def test_categories_json(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["categories", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["Contact", "Financial", "General"]

    def test_columns_with_filters(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["columns", "General", "--fill", "close"])
        assert result.output.split() == ["Closed"]
        result = runner.invoke(cli, ["columns", "General", "--exclude", "File", "--exclude", "Location", "--json"])
        assert json.loads(result.output) == ["Opened", "Closed", "Note", "Project"]

    def test_columns_unknown_category(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["columns", "Nope"])
        assert result.exit_code == 1
        assert "Unknown category" in result.output

    def test_datatypes(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["datatypes", "--json"])
        data = json.loads(result.output)
        assert len(data) == 17
        assert data[0]["name"] == "Opened"

    def test_datatype_for_column(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["datatype", "Contact", "email"])
        assert result.exit_code == 0
        assert "Check:      mail" in result.output
        result = runner.invoke(cli, ["datatype", "Contact", "Cost_EUR"])
        assert result.exit_code == 1

    def test_category_create(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["category-create", "Reading", "1", "2", "Rating", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"category": "Reading", "columns": ["Opened", "Closed", "Rating"]}
        again = runner.invoke(cli, ["category-create", "reading", "1"])
        assert again.exit_code == 1
        assert "already exists" in again.output


class TestRowCommands:
    def test_add_defaults_open_date_to_today(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["add", "General", "-f", "Note=Call Bob"])
        assert result.exit_code == 0
        pointer = _extract_pointer(result.output)
        assert pointer == "General:1"
        shown = runner.invoke(cli, ["show", "General", "1", "--json"])
        row = json.loads(shown.output)
        assert row["Note"] == "Call Bob"
        assert row["Opened"] == format_date(date.today())

    def test_add_coerces_types(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["add", "Financial", "-f", "Cost_EUR=12", "-f", "Opened=01-02-2024", "--json"])
        assert result.exit_code == 0
        row = json.loads(result.output)
        assert row["Cost_EUR"] == 12
        assert row["Opened"] == "01-02-2024"

    def test_add_rejects_invalid_value(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["add", "Contact", "-f", "Email=not-an-email"])
        assert result.exit_code == 1
        assert "Email" in result.output
        listed = runner.invoke(cli, ["list", "Contact"])
        assert "No rows." in listed.output

    def test_add_rejects_malformed_field(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["add", "General", "-f", "Note"])
        assert result.exit_code == 1
        assert "key=value" in result.output

    def test_add_json_error(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["add", "Financial", "-f", "Cost_EUR=abc", "--json"])
        assert result.exit_code == 1
        assert "error" in json.loads(result.output)

    def test_list_pages(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        for i in range(5):
            runner.invoke(cli, ["add", "General", "-f", f"Note=item {i}"])
        result = runner.invoke(cli, ["list", "General", "--page-size", "2", "--page", "2"])
        assert result.exit_code == 0
        assert "Page 2/3 (5 rows)" in result.output
        assert "item 2" in result.output
        data = json.loads(runner.invoke(cli, ["list", "General", "-f", "Note=item 4", "--json"]).output)
        assert data["total_rows"] == 1
        assert data["rows"][0]["id"] == 5

    def test_show_missing(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["show", "General", "42"])
        assert result.exit_code == 1
        assert "Not found: General:42" in result.output

    def test_update_and_delete(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        runner.invoke(cli, ["add", "General", "-f", "Note=first"])
        result = runner.invoke(cli, ["update", "General", "1", "-f", "Note=second"])
        assert result.exit_code == 0
        assert "Updated General:1" in result.output
        shown = runner.invoke(cli, ["show", "General", "1"])
        assert "second" in shown.output
        deleted = runner.invoke(cli, ["delete", "General", "1"])
        assert "Deleted General:1" in deleted.output
        assert runner.invoke(cli, ["delete", "General", "1"]).exit_code == 1


class TestCloseAndPending:
    def test_pending_lifecycle(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        runner.invoke(cli, ["add", "General", "-f", "Note=first"])
        runner.invoke(cli, ["add", "Contact", "-f", "Note=second"])
        result = runner.invoke(cli, ["pending", "--pointers"])
        assert result.output.split() == ["Contact:1", "General:1"]

        listing = runner.invoke(cli, ["pending"])
        assert "General:1" in listing.output
        assert "first" in listing.output

        closed = runner.invoke(cli, ["close", "General:1", "02-03-2024"])
        assert closed.exit_code == 0
        assert "Closed General:1" in closed.output
        assert runner.invoke(cli, ["pending", "--pointers", "--json"]).output.strip() == '["Contact:1"]'
        row = json.loads(runner.invoke(cli, ["show", "General", "1", "--json"]).output)
        assert row["Closed"] == "02-03-2024"

    def test_close_defaults_to_today(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        runner.invoke(cli, ["add", "General", "-f", "Note=x"])
        result = runner.invoke(cli, ["close", "General:1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"closed": "General:1", "value": format_date(date.today())}

    def test_close_twice_fails(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        runner.invoke(cli, ["add", "General", "-f", "Note=x"])
        runner.invoke(cli, ["close", "General:1"])
        result = runner.invoke(cli, ["close", "General:1"])
        assert result.exit_code == 1

    def test_close_rejects_bad_input(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        runner.invoke(cli, ["add", "General", "-f", "Note=x"])
        assert runner.invoke(cli, ["close", "General-1"]).exit_code == 1
        assert runner.invoke(cli, ["close", "General:1", "2024-03-02"]).exit_code == 1
        assert runner.invoke(cli, ["pending", "--pointers"]).output.split() == ["General:1"]

    def test_nothing_pending(self, cli_in_project: tuple[CliRunner, Path]) -> None:
        runner, _ = cli_in_project
        result = runner.invoke(cli, ["pending"])
        assert "Nothing pending." in result.output


class TestDashboardCommand:
    def test_serves_on_requested_port(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[int] = []
        monkeypatch.setattr("attimo.dashboard.main", lambda port: calls.append(port))
        result = cli_runner.invoke(cli, ["dashboard", "--port", "9000"])
        assert result.exit_code == 0, result.output
        assert calls == [9000]

    def test_no_browser_option(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("attimo.dashboard.main", lambda port: None)
        result = cli_runner.invoke(cli, ["dashboard", "--no-browser"])
        assert result.exit_code == 2
        assert "No such option" in result.output
