"""Account, ticket, and ban models for the login service."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel


class BanMode(StrEnum):
    ACCOUNT = "account"
    IP = "ip"


class Account(BaseModel, frozen=True):
    """Transient copy of an account row, loaded once per login attempt."""

    account_id: int
    email: str
    password_hash: str
    failed_logins: int = 0
    login_ticket: str | None = None
    login_ticket_expiry: float | None = None  # time.time() seconds
    is_banned: bool = False  # active account ban (expiring in the future or permanent)


@dataclass
class LoginTicket:
    """Bearer ticket handed to the client after a successful login."""

    ticket: str
    expires_at: float


@dataclass
class BanRecord:
    """Automatic ban produced when the failed-login threshold is crossed."""

    mode: BanMode
    target: str  # account id or client address
    expires_at: float


class GameAccountView(BaseModel, frozen=True):
    """Game account listed for a login ticket. Ban fields are set only when a ban exists."""

    display_name: str
    expansion: int
    is_suspended: bool | None = None
    is_banned: bool | None = None
    suspension_reason: str | None = None
    suspension_expires: int | None = None  # whole seconds on the wire
