"""Login authentication: credential hashing, tickets, bruteforce guard, and the login service."""

from shared.auth.authorization import extract_ticket
from shared.auth.bruteforce import BruteforceGuard, FailedLoginUpdate
from shared.auth.models import Account, BanMode, BanRecord, GameAccountView, LoginTicket
from shared.auth.password import hash_credentials, normalize_credential
from shared.auth.service import LoginService
from shared.auth.settings import AuthSettings
from shared.auth.tickets import TICKET_PREFIX, TicketManager, generate_ticket

__all__ = [
    "TICKET_PREFIX",
    "Account",
    "AuthSettings",
    "BanMode",
    "BanRecord",
    "BruteforceGuard",
    "FailedLoginUpdate",
    "GameAccountView",
    "LoginService",
    "LoginTicket",
    "TicketManager",
    "extract_ticket",
    "generate_ticket",
    "hash_credentials",
    "normalize_credential",
]
