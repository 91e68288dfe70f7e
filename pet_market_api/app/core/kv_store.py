"""
Key-value namespace on top of SQLite.

Every entity of the marketplace (users, pets, messages and
conversation indices) is stored as a JSON document under a
``"<kind>:<id>"`` key in the ``kv_store`` table.  The functions here
are the only storage operations the services use: point ``get``,
``set`` and ``delete`` plus a prefix scan.  Each call runs in its own
short transaction, so single-key operations are atomic but there are
no multi-key transactions.

Driver errors are logged and re-raised as ``InternalError`` so that
storage details never reach API clients.
"""

import json
import logging
import sqlite3
from typing import Any, List, Optional, Tuple

from .db import get_cursor
from .errors import InternalError

logger = logging.getLogger(__name__)


def _storage_failure(operation: str, key: str, exc: Exception) -> InternalError:
    logger.exception("KV %s failed for %s: %s", operation, key, exc)
    return InternalError("Storage unavailable")


def get(key: str) -> Optional[Any]:
    """Return the value stored under ``key`` or ``None``."""
    try:
        with get_cursor() as cursor:
            row = cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    except sqlite3.Error as exc:
        raise _storage_failure("get", key, exc) from exc
    if not row:
        return None
    return json.loads(row["value"])


def set(key: str, value: Any) -> None:  # noqa: A001
    """Store ``value`` (JSON-serialisable) under ``key``.

    Existing keys are updated in place so that their position in
    prefix scans does not change.
    """
    payload = json.dumps(value)
    try:
        with get_cursor() as cursor:
            cursor.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, payload),
            )
    except sqlite3.Error as exc:
        raise _storage_failure("set", key, exc) from exc


def delete(key: str) -> None:
    """Remove ``key``; deleting a missing key is not an error."""
    try:
        with get_cursor() as cursor:
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    except sqlite3.Error as exc:
        raise _storage_failure("delete", key, exc) from exc


def scan_prefix(prefix: str) -> List[Tuple[str, Any]]:
    """Return ``(key, value)`` pairs whose key starts with ``prefix``.

    Results are in insertion order.  ``substr`` is used rather than
    ``LIKE`` so that ``%`` and ``_`` in keys are matched literally.
    """
    try:
        with get_cursor() as cursor:
            rows = cursor.execute(
                "SELECT key, value FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY rowid",
                (len(prefix), prefix),
            ).fetchall()
    except sqlite3.Error as exc:
        raise _storage_failure("scan", prefix + "*", exc) from exc
    return [(row["key"], json.loads(row["value"])) for row in rows]


def get_by_prefix(prefix: str) -> List[Any]:
    """Return only the values of ``scan_prefix``."""
    return [value for _, value in scan_prefix(prefix)]
