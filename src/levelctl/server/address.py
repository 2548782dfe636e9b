"""Bind-address discovery for the control endpoint."""

from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Callable

logger = logging.getLogger(__name__)


class AddressResolutionError(Exception):
    """Raised when the host has no IPv4 address to serve on."""


def resolve_primary_ipv4(hostname: str | None = None) -> str:
    """Return the host's primary IPv4 address.

    Resolves the machine's own hostname and prefers the first non-loopback
    address, falling back to a loopback one when that is all there is.

    Raises:
        AddressResolutionError: If the hostname has no IPv4 address at all.
    """
    name = hostname or socket.gethostname()
    try:
        infos = socket.getaddrinfo(name, None, socket.AF_INET, socket.SOCK_STREAM)
    except OSError as e:
        raise AddressResolutionError(
            f"Cannot resolve host {name!r}: {e}"
        ) from e

    addresses: list[str] = []
    for info in infos:
        addr = info[4][0]
        if addr not in addresses:
            addresses.append(addr)

    if not addresses:
        raise AddressResolutionError("No network adapters with an IPv4 address in the system!")

    for addr in addresses:
        if not ipaddress.IPv4Address(addr).is_loopback:
            return addr
    logger.warning("Only loopback IPv4 addresses found for %s, binding %s", name, addresses[0])
    return addresses[0]


def fixed_address(host: str) -> Callable[[], str]:
    """Resolver that always returns ``host`` (for configured bind hosts)."""

    def resolve() -> str:
        return host

    return resolve
