"""Credential hashing for the login service.

The stored digest binds the login name to the password:

    inner = SHA-256(LOGIN)
    outer = SHA-256(HEX(inner) + ":" + PASSWORD)

Both inputs are upper-cased before hashing (ASCII letters only) and both hex
encodings use uppercase digits. The database stores HEX(outer) and compares it
case-sensitively, so the casing here must not change.

The outer digest is hex-encoded in natural byte order. Stock TrinityCore
writes ``battlenet_accounts.sha_pass_hash`` with the outer digest bytes
reversed, so hashes imported from such a database will not verify here.
"""

from __future__ import annotations

import hashlib
import string

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def normalize_credential(value: str) -> str:
    """Upper-case ASCII letters only; every other character is kept as-is."""
    return value.translate(_ASCII_UPPER)


def hash_credentials(login: str, password: str) -> str:
    """Return the uppercase hex digest stored for (login, password)."""
    inner = hashlib.sha256(normalize_credential(login).encode("utf-8")).hexdigest().upper()
    outer = hashlib.sha256(f"{inner}:{normalize_credential(password)}".encode()).hexdigest()
    return outer.upper()

