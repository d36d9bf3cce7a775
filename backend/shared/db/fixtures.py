"""Row builders for seeding a login database in tests and local setups.

Account creation is not part of the service; these helpers write rows the way
the account management tooling would.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.auth.password import hash_credentials

if TYPE_CHECKING:
    from shared.db.connection import Database


def insert_account(
    db: Database,
    email: str,
    password: str,
    *,
    failed_logins: int = 0,
    login_ticket: str | None = None,
    login_ticket_expiry: float | None = None,
) -> int:
    """Insert an account with the hashed password and return its id."""
    cursor = db.connection.execute(
        "INSERT INTO accounts (email, sha_pass_hash, failed_logins, login_ticket, login_ticket_expiry) "
        "VALUES (?, ?, ?, ?, ?)",
        (email, hash_credentials(email, password), failed_logins, login_ticket, login_ticket_expiry),
    )
    return cursor.lastrowid


def insert_game_account(db: Database, account_id: int, username: str, expansion: int = 0) -> int:
    cursor = db.connection.execute(
        "INSERT INTO game_accounts (account_id, username, expansion) VALUES (?, ?, ?)",
        (account_id, username, expansion),
    )
    return cursor.lastrowid


def ban_game_account(db: Database, game_account_id: int, bandate: float, unbandate: float, reason: str = "") -> None:
    db.connection.execute(
        "INSERT INTO game_account_bans (game_account_id, bandate, unbandate, ban_reason) VALUES (?, ?, ?, ?)",
        (game_account_id, bandate, unbandate, reason),
    )


def ban_account(db: Database, account_id: int, bandate: float, unbandate: float) -> None:
    db.connection.execute(
        "INSERT INTO account_bans (account_id, bandate, unbandate, banned_by, ban_reason) VALUES (?, ?, ?, ?, ?)",
        (account_id, bandate, unbandate, "test", "manual ban"),
    )


def account_row(db: Database, account_id: int) -> dict:
    """Current state of an account row as a plain dict."""
    row = db.connection.execute("SELECT * FROM accounts WHERE id = ?", (account_id,)).fetchone()
    return dict(row)
