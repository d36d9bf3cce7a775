"""Login ticket extraction from the Authorization header.

Clients send ``Basic base64("<ticket>:<anything>")``. The part after the colon
is a password placeholder and is ignored.
"""

import base64
import binascii

BASIC_PREFIX = "Basic "


def extract_ticket(authorization: str | None) -> str:
    """Return the ticket carried by the header, or "" when absent or malformed."""
    if not authorization:
        return ""

    encoded = authorization.removeprefix(BASIC_PREFIX)
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return ""

    ticket, _, _ = decoded.partition(":")
    return ticket
