"""Fixtures for HTTP API tests (FastAPI)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

import attimo.dashboard as dash_module
from attimo.core import AttimoDB
from attimo.dashboard import create_app
from tests._db_factory import make_db


@pytest.fixture
def dashboard_db(tmp_path: Path) -> AttimoDB:
    """AttimoDB with Tasks and Notes, usable from the ASGI test transport."""
    return make_db(tmp_path, check_same_thread=False)


@pytest.fixture
async def client(dashboard_db: AttimoDB) -> AsyncIterator[AsyncClient]:
    dash_module._db = dashboard_db
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    dash_module._db = None
    dashboard_db.close()
