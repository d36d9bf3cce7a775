"""Shared builders for gateway tests."""

from __future__ import annotations

import base64
import ipaddress
from typing import TYPE_CHECKING

from gateway.server.app import create_app
from gateway.server.resolver import AddressResolutionError
from gateway.server.settings import GatewayServerSettings
from shared.auth.settings import AuthSettings

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.applications import Starlette

NOW = 1_700_000_000.0
EXTERNAL_HOSTNAME = "portal.example.com"
LOCAL_HOSTNAME = "portal.lan"

_ADDRESSES = {
    EXTERNAL_HOSTNAME: ipaddress.ip_address("203.0.113.10"),
    LOCAL_HOSTNAME: ipaddress.ip_address("192.168.1.10"),
}


class FakeClock:
    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


async def fake_resolve(hostname: str, _port: int) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    try:
        return _ADDRESSES[hostname]
    except KeyError:
        raise AddressResolutionError(f"Could not resolve {hostname!r}") from None


def make_test_app(tmp_path: Path, clock: FakeClock, **auth_overrides) -> Starlette:
    """Gateway app on a fresh database in tmp_path with fake name resolution."""
    return create_app(
        GatewayServerSettings(external_address=EXTERNAL_HOSTNAME, local_address=LOCAL_HOSTNAME),
        AuthSettings(database_path=str(tmp_path / "login.db"), **auth_overrides),
        resolve=fake_resolve,
        clock=clock,
    )


def login_body(account_name: str, password: str) -> dict:
    return {
        "platform_id": "Win",
        "program_id": "WoW",
        "version": "3.3.5",
        "inputs": [
            {"input_id": "account_name", "value": account_name},
            {"input_id": "password", "value": password},
        ],
    }


def basic_auth(ticket: str) -> dict[str, str]:
    token = base64.b64encode(f"{ticket}:".encode()).decode()
    return {"Authorization": f"Basic {token}"}
