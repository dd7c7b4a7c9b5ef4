"""Row-level audit log for an attimo project.

Each project keeps ``.attimo/attimo.log``: one JSON object per line, rotated
at 5MB with three old files kept. The core logs every row write and pending
pointer change under the ``attimo`` logger, passing the affected row through
``extra=``. Only the keys in ``ROW_CONTEXT_KEYS`` reach the file; anything
else a caller puts in ``extra`` is dropped.

A process serves one project at a time. Pointing ``setup_logging`` at a new
``.attimo`` directory moves the file handler there.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_FILENAME = "attimo.log"
ROTATE_AT_BYTES = 5 * 1024 * 1024
ROTATED_FILES_KEPT = 3

# Row context the core attaches via ``extra=``, written in this order.
ROW_CONTEXT_KEYS: tuple[str, ...] = ("category", "item_id", "pointer", "column", "error")

_handler_lock = threading.Lock()


class _RowContextFormatter(logging.Formatter):
    """One JSON line per record, carrying whichever row keys are set."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        line.update({key: getattr(record, key) for key in ROW_CONTEXT_KEYS if hasattr(record, key)})
        if record.exc_info and record.exc_info[1]:
            line["exception"] = str(record.exc_info[1])
        return json.dumps(line, default=str)


def _project_file_handlers(logger: logging.Logger) -> list[RotatingFileHandler]:
    return [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]


def setup_logging(attimo_dir: Path) -> logging.Logger:
    """Attach the audit log of the project at *attimo_dir*.

    Returns the ``attimo`` logger; module loggers and the default
    ``AttimoDB`` logger are its children. Calling this again for the same
    directory is a no-op, calling it for another directory detaches the
    previous project's file.
    """
    logger = logging.getLogger("attimo")
    log_path = attimo_dir / LOG_FILENAME
    wanted = os.path.abspath(str(log_path))

    with _handler_lock:
        for handler in _project_file_handlers(logger):
            if handler.baseFilename == wanted:
                return logger
            logger.removeHandler(handler)
            handler.close()

        handler = RotatingFileHandler(str(log_path), maxBytes=ROTATE_AT_BYTES, backupCount=ROTATED_FILES_KEPT)
        handler.setFormatter(_RowContextFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger
