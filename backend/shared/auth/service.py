"""Login service: credential checks, ticket issuance, and game account listing.

Every public method builds a QueryChain for one request and runs it on the
shared executor. Stage callbacks are plain functions of the previous result,
so the branching below reads top to bottom in the order the database sees it.
"""

from __future__ import annotations

import hmac
import time
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import Account, GameAccountView
from shared.auth.password import hash_credentials, normalize_credential
from shared.db import statements
from shared.db.chain import Done, Next, QueryChain
from shared.db.executor import Execute, Query

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Callable

    from shared.auth.bruteforce import BruteforceGuard
    from shared.auth.tickets import TicketManager
    from shared.db.executor import AsyncQueryExecutor

logger = structlog.get_logger()

# Game account usernames look like "<account id>#<index>"; clients show "WoW<index>".
DISPLAY_NAME_SEPARATOR = "#"
DISPLAY_NAME_PREFIX = "WoW"


def format_display_name(username: str) -> str:
    _, sep, suffix = username.partition(DISPLAY_NAME_SEPARATOR)
    if sep:
        return DISPLAY_NAME_PREFIX + suffix
    return username


def _account_from_row(row: sqlite3.Row) -> Account:
    return Account(
        account_id=row["id"],
        email=row["email"],
        password_hash=row["sha_pass_hash"],
        failed_logins=row["failed_logins"],
        login_ticket=row["login_ticket"],
        login_ticket_expiry=row["login_ticket_expiry"],
        is_banned=bool(row["is_banned"]),
    )


def _game_account_from_row(row: sqlite3.Row, now: float) -> GameAccountView:
    view = GameAccountView(display_name=format_display_name(row["username"]), expansion=row["expansion"])
    if row["bandate"] is None:
        return view
    return view.model_copy(
        update={
            "is_suspended": row["unbandate"] > now,
            "is_banned": row["bandate"] == row["unbandate"],
            "suspension_reason": row["ban_reason"],
            "suspension_expires": int(row["unbandate"]),
        },
    )


class LoginService:
    """Compose the hasher, ticket manager, and bruteforce guard into request chains."""

    def __init__(
        self,
        executor: AsyncQueryExecutor,
        tickets: TicketManager,
        guard: BruteforceGuard,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._executor = executor
        self._tickets = tickets
        self._guard = guard
        self._clock = clock

    async def login(self, login: str, password: str, client_address: str) -> str | None:
        """Return a login ticket for valid credentials, None otherwise.

        Unknown accounts and wrong passwords are indistinguishable to the caller.
        """
        login = normalize_credential(login)
        sent_hash = hash_credentials(login, password)

        def on_account(rows: list[sqlite3.Row]) -> Next | Done:
            if not rows:
                return Done(None)

            account = _account_from_row(rows[0])
            if not hmac.compare_digest(sent_hash, account.password_hash):
                return self._on_wrong_password(account, login, client_address)

            ticket = self._tickets.issue_or_reuse(account.login_ticket, account.login_ticket_expiry)

            def on_stored(stored: list[sqlite3.Row]) -> Done:
                stored_ticket = stored[0]["login_ticket"] if stored else None
                if stored_ticket == ticket.ticket and ticket.ticket != account.login_ticket:
                    logger.info("login ticket issued", account_id=account.account_id)
                return Done(stored_ticket)

            # Runs as a Query because RETURNING hands back the ticket actually stored.
            return Next(
                Query(
                    statements.UPD_AUTHENTICATION,
                    (self._clock(), ticket.ticket, ticket.expires_at, account.account_id),
                ),
                on_stored,
            )

        chain = QueryChain(Next(Query(statements.SEL_AUTHENTICATION, (self._clock(), login)), on_account), name="login")
        return await chain.run(self._executor)

    def _on_wrong_password(self, account: Account, login: str, client_address: str) -> Next | Done:
        if account.is_banned:
            return Done(None)

        update = self._guard.on_failed_login(account.account_id, login, client_address)
        if update is None:
            return Done(None)

        def on_committed(rowcounts: list[int]) -> Done:
            if update.ban_issued(rowcounts):
                logger.info(
                    "automatic ban issued",
                    account_id=account.account_id,
                    mode=update.ban.mode,
                    target=update.ban.target,
                    expires_at=update.ban.expires_at,
                )
            return Done(None)

        return Next(update.transaction, on_committed)

    async def list_game_accounts(self, ticket: str) -> list[GameAccountView]:
        """Return the game accounts of the account holding an unexpired ticket."""
        now = self._clock()

        def on_rows(rows: list[sqlite3.Row]) -> Done:
            return Done([_game_account_from_row(row, now) for row in rows])

        chain = QueryChain(Next(Query(statements.SEL_GAME_ACCOUNT_LIST, (ticket, now)), on_rows), name="game_accounts")
        return await chain.run(self._executor)

    async def refresh_ticket(self, ticket: str) -> float | None:
        """Extend a valid ticket and return its new expiry; None when expired or unknown."""

        def on_expiry(rows: list[sqlite3.Row]) -> Next | Done:
            new_expiry = self._tickets.refresh(rows[0]["login_ticket_expiry"] if rows else None)
            if new_expiry is None:
                logger.debug("login ticket expired")
                return Done(None)
            return Next(
                Execute(statements.UPD_EXISTING_AUTHENTICATION, (new_expiry, ticket)),
                lambda _: Done(new_expiry),
            )

        chain = QueryChain(Next(Query(statements.SEL_EXISTING_AUTHENTICATION, (ticket,)), on_expiry), name="refresh")
        return await chain.run(self._executor)
