"""Core database object for attimo.

Single source of truth for all SQLite operations. Both the CLI and the
dashboard import from this module. No daemon: direct SQLite with WAL mode.

Convention-based discovery: each project has an `.attimo/` directory
containing `attimo.db` (SQLite), `config.json` (page size, seeding and extra
datatype/category definitions) and `attimo.log`.
"""

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path
from typing import Any, cast

from attimo.checks import CheckEngine
from attimo.datatypes import CategoryTemplate
from attimo.db_base import DEFAULT_PAGE_SIZE, _now_iso
from attimo.db_categories import CategoriesMixin
from attimo.db_datatypes import DatatypesMixin
from attimo.db_pending import PendingMixin
from attimo.db_rows import RowsMixin
from attimo.db_schema import SCHEMA_STATEMENTS, SCHEMA_VERSION
from attimo.errors import ConfigurationError
from attimo.types.core import ProjectConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Convention-based discovery
# ---------------------------------------------------------------------------

ATTIMO_DIR_NAME = ".attimo"
DB_FILENAME = "attimo.db"
CONFIG_FILENAME = "config.json"


def find_attimo_root(start: Path | None = None) -> Path:
    """Walk up from start (default cwd) looking for .attimo/ directory.

    Returns the .attimo/ directory path (not the project root).
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / ATTIMO_DIR_NAME
        if candidate.is_dir():
            return candidate
    msg = f"No {ATTIMO_DIR_NAME}/ directory found in {current} or any parent"
    raise FileNotFoundError(msg)


def read_config(attimo_dir: Path) -> ProjectConfig:
    """Read .attimo/config.json. Returns defaults if missing or corrupt."""
    defaults = ProjectConfig(version=1, page_size=DEFAULT_PAGE_SIZE, seed_defaults=True, datatypes=[], categories=[])
    config_path = attimo_dir / CONFIG_FILENAME
    if not config_path.exists():
        return defaults
    try:
        loaded = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return defaults
    if not isinstance(loaded, dict):
        logger.warning("Ignoring %s: expected a JSON object, got %s", config_path, type(loaded).__name__)
        return defaults
    return cast(ProjectConfig, {**defaults, **loaded})


def write_config(attimo_dir: Path, config: dict[str, Any] | ProjectConfig) -> None:
    """Write .attimo/config.json."""
    config_path = attimo_dir / CONFIG_FILENAME
    config_path.write_text(json.dumps(config, indent=2) + "\n")


# ---------------------------------------------------------------------------
# AttimoDB -- the core
# ---------------------------------------------------------------------------


class AttimoDB(DatatypesMixin, CategoriesMixin, RowsMixin, PendingMixin):
    """Direct SQLite operations. No daemon. Importable by the CLI and the dashboard."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        seed_defaults: bool = True,
        datatypes: list[dict[str, Any]] | None = None,
        categories: list[dict[str, Any]] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        logger: logging.Logger | None = None,
        check_same_thread: bool = True,
    ) -> None:
        self.db_path = Path(db_path)
        self.page_size = page_size if page_size > 0 else DEFAULT_PAGE_SIZE
        self.seed_defaults = seed_defaults
        self.extra_datatypes = list(datatypes or [])
        self.extra_categories = list(categories or [])
        self.logger = logger or logging.getLogger(__name__)
        self.checks = CheckEngine(self.logger)
        self._conn: sqlite3.Connection | None = None
        self._check_same_thread = check_same_thread

    @classmethod
    def from_project(cls, project_path: Path | None = None, *, logger: logging.Logger | None = None) -> AttimoDB:
        """Create an AttimoDB by discovering .attimo/ from project_path (or cwd)."""
        attimo_dir = find_attimo_root(project_path)
        config = read_config(attimo_dir)
        db = cls(
            attimo_dir / DB_FILENAME,
            seed_defaults=config.get("seed_defaults", True),
            datatypes=config.get("datatypes"),
            categories=config.get("categories"),
            page_size=config.get("page_size", DEFAULT_PAGE_SIZE),
            logger=logger,
        )
        db.initialize()
        return db

    def __enter__(self) -> AttimoDB:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode: transaction() issues BEGIN itself so that DDL
            # and DML of one bootstrap pass share a single transaction.
            self._conn = sqlite3.connect(
                str(self.db_path),
                isolation_level=None,
                check_same_thread=self._check_same_thread,
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.execute("PRAGMA busy_timeout=5000")
        return self._conn

    @contextlib.contextmanager
    def transaction(self, *, write: bool = True) -> Iterator[sqlite3.Connection]:
        """Run the enclosed block in one transaction.

        Commits on success. On any exception the transaction is rolled back,
        the failure is logged according to its kind, and the exception is
        re-raised unchanged. Transactions do not nest.
        """
        conn = self.conn
        if conn.in_transaction:
            msg = "A transaction is already open on this connection"
            raise RuntimeError(msg)
        conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
        try:
            yield conn
            conn.commit()
        except Exception as exc:
            conn.rollback()
            self.checks.clear()
            if isinstance(exc, ConfigurationError):
                self.logger.error("Configuration error, transaction rolled back: %s", exc, extra={"error": str(exc)})
            elif isinstance(exc, sqlite3.Error):
                self.logger.error(
                    "Database error in %s, transaction rolled back: %s",
                    self.db_path,
                    exc,
                    extra={"error": str(exc)},
                )
            else:
                self.logger.debug("Transaction rolled back: %s", exc)
            raise

    # -- Bootstrap -----------------------------------------------------------

    def initialize(self) -> None:
        """Create the schema and seed it, or check the version of an existing one.

        A fresh database is built in ONE transaction: system tables, the
        version row, datatypes, then every category table. Any failure
        leaves the file without a schema.
        """
        if self._has_schema():
            version = self.get_schema_version()
            if version != SCHEMA_VERSION:
                self.logger.warning("Database %s has schema version %s, expected %s", self.db_path, version, SCHEMA_VERSION)
            return

        from attimo.datatypes_data import BUILT_IN_CATEGORIES, BUILT_IN_DATATYPES

        datatype_defs = [*(BUILT_IN_DATATYPES if self.seed_defaults else []), *self.extra_datatypes]
        category_defs = [*(BUILT_IN_CATEGORIES if self.seed_defaults else []), *self.extra_categories]
        # Parse templates up front so a bad name fails before any DDL runs.
        templates = [CategoryTemplate.from_dict(raw) for raw in category_defs]

        with self.transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
            conn.execute("INSERT INTO metadata (created_at, version) VALUES (?, ?)", (_now_iso(), SCHEMA_VERSION))
            seeded = self._seed_datatypes(conn, datatype_defs)
            for template in templates:
                self._create_category_table(conn, template)

        self.logger.info(
            "Initialized %s: schema %s, %d datatypes, %d categories",
            self.db_path,
            SCHEMA_VERSION,
            seeded,
            len(templates),
        )

    def _has_schema(self) -> bool:
        row = self.conn.execute("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'metadata'").fetchone()
        return row is not None

    def get_schema_version(self) -> str | None:
        """Return the version stored in ``metadata``, or None for an empty database."""
        if not self._has_schema():
            return None
        row = self.conn.execute("SELECT version FROM metadata ORDER BY id DESC LIMIT 1").fetchone()
        return row["version"] if row is not None else None

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
