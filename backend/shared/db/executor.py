"""Asynchronous execution of SQLite operations.

sqlite3 calls block, so every operation runs on a worker thread through
anyio.to_thread.run_sync(). A single-slot CapacityLimiter keeps the shared
connection on one thread at a time, which also keeps BEGIN/COMMIT blocks from
interleaving with statements issued by other requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from anyio import CapacityLimiter, to_thread

if TYPE_CHECKING:
    import sqlite3

    from shared.db.connection import Database

logger = structlog.get_logger()


@dataclass(frozen=True)
class Query:
    """Read statement; yields the fetched rows."""

    sql: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Execute:
    """Write statement; yields the affected row count."""

    sql: str
    params: tuple[Any, ...] = ()


@dataclass
class Transaction:
    """Ordered write statements committed as one unit; yields one row count per statement."""

    statements: list[Execute] = field(default_factory=list)

    def append(self, sql: str, *params: Any) -> Transaction:  # noqa: ANN401
        self.statements.append(Execute(sql, params))
        return self


Operation = Query | Execute | Transaction


class AsyncQueryExecutor:
    """Run operations against the database without blocking the event loop."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._limiter: CapacityLimiter | None = None

    async def run(self, operation: Operation) -> Any:  # noqa: ANN401
        if self._limiter is None:
            # Created on first use so it belongs to the running event loop.
            self._limiter = CapacityLimiter(1)
        return await to_thread.run_sync(self._run_sync, operation, limiter=self._limiter)

    def _run_sync(self, operation: Operation) -> Any:  # noqa: ANN401
        conn = self._db.connection
        match operation:
            case Query(sql, params):
                return conn.execute(sql, params).fetchall()
            case Execute(sql, params):
                return conn.execute(sql, params).rowcount
            case Transaction(statements):
                return self._commit(conn, statements)
        raise TypeError(f"Unsupported database operation: {operation!r}")

    @staticmethod
    def _commit(conn: sqlite3.Connection, statements: list[Execute]) -> list[int]:
        """Apply all statements or none of them."""
        try:
            conn.execute("BEGIN IMMEDIATE")
            rowcounts = [conn.execute(stmt.sql, stmt.params).rowcount for stmt in statements]
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.exception("transaction rolled back", statements=len(statements))
            raise
        return rowcounts
