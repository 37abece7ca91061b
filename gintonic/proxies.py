"""Trusted proxy networks and client-IP extraction from forwarding headers."""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable, Iterator, Sequence
from typing import Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

DEFAULT_TRUSTED_PROXIES = ("0.0.0.0/0", "::/0")


def _parse_address(text: str) -> IPAddress | None:
    if not isinstance(text, str) or "%" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def parse_ip(ip: str) -> IPAddress | None:
    """Parse ``ip``; IPv4-mapped IPv6 addresses come back as IPv4. None if invalid."""
    parsed = _parse_address(ip)
    if isinstance(parsed, ipaddress.IPv6Address) and parsed.ipv4_mapped is not None:
        return parsed.ipv4_mapped
    return parsed


def _parse_cidr(proxy: str) -> IPNetwork:
    text = proxy
    if "/" not in text:
        ip = parse_ip(text)
        if ip is None:
            raise ValueError(f"invalid IP address: {proxy}")
        text += "/32" if ip.version == 4 else "/128"
    address, _, prefix = text.partition("/")
    if "%" in address or not (prefix.isascii() and prefix.isdigit()):
        raise ValueError(f"invalid CIDR address: {text}")
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {text}") from None


def _iter_cidrs(trusted_proxies: Iterable[str]) -> Iterator[IPNetwork]:
    for proxy in trusted_proxies:
        yield _parse_cidr(proxy)


def prepare_trusted_cidrs(trusted_proxies: Iterable[str] | None) -> list[IPNetwork] | None:
    """Turn addresses and CIDRs into networks; a bare address becomes a host network.

    Returns None for None and raises ValueError on the first invalid entry.
    """
    if trusted_proxies is None:
        return None
    return list(_iter_cidrs(trusted_proxies))


def _as_ipv4_network(network: IPNetwork) -> IPNetwork:
    if isinstance(network, ipaddress.IPv6Network):
        mapped = network.network_address.ipv4_mapped
        if mapped is not None and network.prefixlen >= 96:
            return ipaddress.IPv4Network((mapped, network.prefixlen - 96))
    return network


def _contains(network: IPNetwork, ip: IPAddress) -> bool:
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    network = _as_ipv4_network(network)
    if network.version != ip.version:
        return False
    return ip in network


class TrustedProxies:
    """The set of proxy networks whose forwarding headers are believed."""

    def __init__(self, trusted_proxies: Sequence[str] | None = DEFAULT_TRUSTED_PROXIES) -> None:
        self.proxies: list[str] | None = None
        self.cidrs: list[IPNetwork] | None = None
        self.set(trusted_proxies)

    def set(self, trusted_proxies: Iterable[str] | None) -> None:
        """Replace the trusted proxies; None disables trust entirely.

        On an invalid entry the entries before it stay in effect and
        ValueError is raised.
        """
        self.proxies = None if trusted_proxies is None else list(trusted_proxies)
        if self.proxies is None:
            self.cidrs = None
            return
        self.cidrs = []
        for network in _iter_cidrs(self.proxies):
            self.cidrs.append(network)

    def is_trusted(self, ip: str | IPAddress | None) -> bool:
        """Whether ``ip`` lies in one of the trusted networks."""
        if self.cidrs is None or ip is None:
            return False
        address = _parse_address(ip) if isinstance(ip, str) else ip
        if address is None:
            return False
        return any(_contains(network, address) for network in self.cidrs)

    def is_unsafe(self) -> bool:
        """Whether every address is trusted."""
        return self.is_trusted("0.0.0.0") or self.is_trusted("::")

    def validate_header(self, header: str) -> str | None:
        """Return the client IP from an X-Forwarded-For style header, or None.

        Entries are read from the right; the first one not from a trusted
        proxy, or else the leftmost, is the client. An unparsable entry
        ends the search with no result.
        """
        if not header:
            return None
        items = header.split(",")
        for position, item in reversed(list(enumerate(items))):
            ip_text = item.strip()
            address = _parse_address(ip_text)
            if address is None:
                break
            if position == 0 or not self.is_trusted(address):
                return ip_text
        return None