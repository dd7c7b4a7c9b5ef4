"""Fixtures for core DB tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from attimo.core import AttimoDB
from tests._db_factory import make_db


@pytest.fixture
def tasks_db(tmp_path: Path) -> Generator[AttimoDB, None, None]:
    """Built-in categories plus ``Tasks`` and ``Notes``."""
    d = make_db(tmp_path)
    yield d
    d.close()
