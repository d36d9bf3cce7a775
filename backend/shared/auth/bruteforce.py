"""Failed-login counting and automatic bans.

Every counted failure is one transaction: increment the counter, then, if the
counter reached the configured maximum, upsert a ban and reset the counter.
The threshold test is part of the ban/reset statements themselves, so the
whole outcome is decided atomically by the database.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import BanMode, BanRecord
from shared.db import statements
from shared.db.executor import Transaction

if TYPE_CHECKING:
    from collections.abc import Callable

    from shared.auth.settings import AuthSettings

logger = structlog.get_logger()

# Position of the ban upsert inside FailedLoginUpdate.transaction
_BAN_STATEMENT_INDEX = 1


@dataclass
class FailedLoginUpdate:
    """Counter/ban transaction for one wrong password attempt."""

    transaction: Transaction
    ban: BanRecord  # written only if the counter reaches the maximum on commit

    def ban_issued(self, rowcounts: list[int]) -> bool:
        """Tell from the committed transaction's row counts whether the ban was written."""
        return len(rowcounts) > _BAN_STATEMENT_INDEX and rowcounts[_BAN_STATEMENT_INDEX] > 0


class BruteforceGuard:
    """Build the counter/ban transaction for a wrong password attempt."""

    def __init__(self, settings: AuthSettings, clock: Callable[[], float] = time.time) -> None:
        self._max_count = settings.wrong_pass_max_count
        self._ban_mode = settings.wrong_pass_ban_mode
        self._ban_time = settings.wrong_pass_ban_time
        self._log_attempts = settings.wrong_pass_logging
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._max_count > 0

    def on_failed_login(self, account_id: int, login: str, client_address: str) -> FailedLoginUpdate | None:
        """Return the update to commit for this failure, or None when the guard is disabled."""
        if self._log_attempts:
            logger.debug(
                "attempted to connect with wrong password",
                client=client_address,
                login=login,
                account_id=account_id,
            )

        if not self.enabled:
            return None

        now = self._clock()
        unbandate = now + self._ban_time
        trans = Transaction().append(statements.UPD_FAILED_LOGINS, account_id)

        # Without a client address an address-scoped ban has no target; ban the account instead.
        if self._ban_mode == BanMode.ACCOUNT or not client_address:
            ban = BanRecord(mode=BanMode.ACCOUNT, target=str(account_id), expires_at=unbandate)
            trans.append(statements.INS_ACCOUNT_AUTO_BANNED, now, unbandate, account_id, self._max_count)
        else:
            ban = BanRecord(mode=BanMode.IP, target=client_address, expires_at=unbandate)
            trans.append(statements.INS_IP_AUTO_BANNED, client_address, now, unbandate, account_id, self._max_count)

        trans.append(statements.UPD_RESET_FAILED_LOGINS, account_id, self._max_count)
        logger.debug("counting failed login", account_id=account_id, max_count=self._max_count)
        return FailedLoginUpdate(transaction=trans, ban=ban)
