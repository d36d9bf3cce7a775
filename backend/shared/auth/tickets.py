"""Login ticket issuance and lazy expiry.

Tickets are opaque bearer tokens: a fixed prefix followed by the uppercase hex
encoding of 20 random bytes. Uniqueness comes from the entropy alone. Expiry is
checked whenever a ticket is used; nothing sweeps expired tickets.
"""

from __future__ import annotations

import secrets
import time
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import LoginTicket

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

TICKET_PREFIX = "TC-"
TICKET_RANDOM_BYTES = 20


def generate_ticket() -> str:
    return TICKET_PREFIX + secrets.token_hex(TICKET_RANDOM_BYTES).upper()


class TicketManager:
    """Issue, reuse, and refresh login tickets against a validity duration."""

    def __init__(self, duration: int, clock: Callable[[], float] = time.time) -> None:
        self._duration = duration
        self._clock = clock

    @property
    def duration(self) -> int:
        return self._duration

    def issue_or_reuse(self, existing_ticket: str | None, existing_expiry: float | None) -> LoginTicket:
        """Return the current ticket if still valid, otherwise a fresh one.

        The expiry is pushed to now + duration in both cases.
        """
        now = self._clock()
        if not existing_ticket or existing_expiry is None or existing_expiry <= now:
            logger.debug("issuing new login ticket")
            return LoginTicket(ticket=generate_ticket(), expires_at=now + self._duration)
        return LoginTicket(ticket=existing_ticket, expires_at=now + self._duration)

    def refresh(self, stored_expiry: float | None) -> float | None:
        """Return the extended expiry, or None when the ticket is expired or unknown."""
        now = self._clock()
        if stored_expiry is None or stored_expiry <= now:
            return None
        return now + self._duration
