"""SQLite data store: connection, statements, and asynchronous query chains."""

from shared.db.chain import ChainStateError, Done, Next, QueryChain
from shared.db.connection import Database
from shared.db.executor import AsyncQueryExecutor, Execute, Query, Transaction

__all__ = [
    "AsyncQueryExecutor",
    "ChainStateError",
    "Database",
    "Done",
    "Execute",
    "Next",
    "Query",
    "QueryChain",
    "Transaction",
]
