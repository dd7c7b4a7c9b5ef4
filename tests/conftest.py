"""Shared pytest fixtures for attimo tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from attimo.core import ATTIMO_DIR_NAME, DB_FILENAME, AttimoDB, write_config


@pytest.fixture
def db(tmp_path: Path) -> Generator[AttimoDB, None, None]:
    """Fresh AttimoDB with the built-in datatypes and categories."""
    d = AttimoDB(tmp_path / "attimo.db")
    d.initialize()
    yield d
    d.close()


@pytest.fixture
def attimo_project(tmp_path: Path) -> Path:
    """A tmp directory set up as an attimo project (.attimo/ with config + db).

    Returns the project root (parent of .attimo/).
    """
    attimo_dir = tmp_path / ATTIMO_DIR_NAME
    attimo_dir.mkdir()
    write_config(attimo_dir, {"version": 1, "page_size": 10, "seed_defaults": True})

    d = AttimoDB(attimo_dir / DB_FILENAME)
    d.initialize()
    d.close()
    return tmp_path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
