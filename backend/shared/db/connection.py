"""SQLite database connection and schema management."""

import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY,
    email TEXT NOT NULL,
    sha_pass_hash TEXT NOT NULL,
    failed_logins INTEGER NOT NULL DEFAULT 0,
    login_ticket TEXT,
    login_ticket_expiry REAL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_accounts_email
    ON accounts (email COLLATE NOCASE);

CREATE INDEX IF NOT EXISTS idx_accounts_login_ticket
    ON accounts (login_ticket) WHERE login_ticket IS NOT NULL;

CREATE TABLE IF NOT EXISTS account_bans (
    account_id INTEGER PRIMARY KEY REFERENCES accounts (id) ON DELETE CASCADE,
    bandate REAL NOT NULL,
    unbandate REAL NOT NULL,
    banned_by TEXT NOT NULL,
    ban_reason TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS ip_bans (
    ip TEXT PRIMARY KEY,
    bandate REAL NOT NULL,
    unbandate REAL NOT NULL,
    banned_by TEXT NOT NULL,
    ban_reason TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS game_accounts (
    id INTEGER PRIMARY KEY,
    account_id INTEGER NOT NULL REFERENCES accounts (id) ON DELETE CASCADE,
    username TEXT NOT NULL,
    expansion INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS game_account_bans (
    game_account_id INTEGER PRIMARY KEY REFERENCES game_accounts (id) ON DELETE CASCADE,
    bandate REAL NOT NULL,
    unbandate REAL NOT NULL,
    ban_reason TEXT NOT NULL DEFAULT '',
    active INTEGER NOT NULL DEFAULT 1
);
"""


class Database:
    """SQLite database wrapper with schema management."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions.

        The connection runs in autocommit mode; multi-statement units go through
        explicit BEGIN/COMMIT in the executor.
        """
        parent = Path(self._path).parent
        parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript(_SCHEMA_SQL)

        self._harden_permissions()
        logger.info("database connected", path=self._path)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _harden_permissions(self) -> None:
        """Set restrictive file permissions on POSIX systems (best effort).

        Hardens the main DB file and WAL/SHM sibling files created by WAL mode,
        since they also contain database content (password hashes and tickets).
        """
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
