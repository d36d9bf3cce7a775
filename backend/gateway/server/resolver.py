"""Pick the portal hostname advertised to a client.

Two hostnames are configured: an external one for remote clients and a local
one for clients on the same network as the gateway. Both are resolved once at
startup; the service refuses to start if either does not resolve.
"""

from __future__ import annotations

import ipaddress
import socket
from typing import TYPE_CHECKING

import anyio
import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

type IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
type NameResolver = Callable[[str, int], Awaitable[IPAddress]]


class AddressResolutionError(RuntimeError):
    """A configured hostname could not be resolved."""


async def resolve_ipv4(hostname: str, port: int) -> IPAddress:
    """Resolve a hostname to its first IPv4 address."""
    try:
        infos = await anyio.getaddrinfo(hostname, port, family=socket.AF_INET, type=socket.SOCK_STREAM)
    except OSError as exc:
        raise AddressResolutionError(f"Could not resolve {hostname!r}") from exc
    if not infos:
        raise AddressResolutionError(f"Could not resolve {hostname!r}")
    return ipaddress.ip_address(infos[0][4][0])


def _in_network(address: IPAddress, network: ipaddress.IPv4Network | ipaddress.IPv6Network) -> bool:
    return address.version == network.version and address in network


class AddressResolver:
    """Map client addresses to the external or the local hostname."""

    def __init__(
        self,
        external: tuple[str, IPAddress],
        local: tuple[str, IPAddress],
        *,
        local_prefix_length: int = 24,
    ) -> None:
        self._external_hostname = external[0]
        self._local_hostname, local_address = local
        self._local_network = ipaddress.ip_network(f"{local_address}/{local_prefix_length}", strict=False)

    @classmethod
    async def create(
        cls,
        external_hostname: str,
        local_hostname: str,
        port: int,
        *,
        local_prefix_length: int = 24,
        resolve: NameResolver = resolve_ipv4,
    ) -> AddressResolver:
        """Resolve both hostnames; raise AddressResolutionError if either fails."""
        resolved: list[tuple[str, IPAddress]] = []
        for hostname in (external_hostname, local_hostname):
            try:
                address = await resolve(hostname, port)
            except AddressResolutionError:
                logger.error("could not resolve portal address", hostname=hostname)
                raise
            logger.info("resolved portal address", hostname=hostname, address=str(address))
            resolved.append((hostname, address))
        return cls(resolved[0], resolved[1], local_prefix_length=local_prefix_length)

    @property
    def external_hostname(self) -> str:
        return self._external_hostname

    @property
    def local_hostname(self) -> str:
        return self._local_hostname

    def hostname_for(self, client_address: str | None) -> str:
        """Local hostname for same-network or loopback clients, external hostname otherwise."""
        if not client_address:
            return self._external_hostname
        try:
            address = ipaddress.ip_address(client_address)
        except ValueError:
            return self._external_hostname

        if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
            address = address.ipv4_mapped

        if _in_network(address, self._local_network) or address.is_loopback:
            return self._local_hostname
        return self._external_hostname
