#!/usr/bin/env python3
"""
Address range enumeration for IPv4 and IPv6

Ranges are walked by incrementing the full-width integer value of the
address, so carries cross octet (and hextet) boundaries naturally. Network
and broadcast addresses are part of the range and are yielded too.
"""

import ipaddress
from typing import Iterator, Union

from .errors import RangeError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class AddressRange:
    """
    Lazy, restartable view over every address in ``base/prefixlen``

    Each call to ``iter()`` starts again from the first address.
    """

    def __init__(self, base: IPAddress, prefixlen: int):
        self.base = base
        self.prefixlen = prefixlen
        self._network = ipaddress.ip_network(f"{base}/{prefixlen}")

    @property
    def version(self) -> int:
        return self.base.version

    @property
    def size(self) -> int:
        return self._network.num_addresses

    @property
    def first(self) -> IPAddress:
        return self._network.network_address

    @property
    def last(self) -> IPAddress:
        return self._network.broadcast_address

    def __iter__(self) -> Iterator[IPAddress]:
        current = int(self.first)
        end = int(self.last)
        factory = ipaddress.IPv4Address if self.version == 4 else ipaddress.IPv6Address
        while current <= end:
            yield factory(current)
            current += 1

    def __len__(self) -> int:
        return self.size

    def __contains__(self, address) -> bool:
        try:
            return ipaddress.ip_address(address) in self._network
        except ValueError:
            return False

    def __str__(self) -> str:
        return str(self._network)

    def __repr__(self) -> str:
        return f"AddressRange('{self._network}')"


def parse_range(spec: str) -> AddressRange:
    """
    Parse a CIDR or bare address into an AddressRange

    Args:
        spec: e.g. '192.168.1.0/24', '2001:db8::/120' or '10.0.0.5'

    Returns:
        AddressRange with host bits masked off

    Raises:
        RangeError: if the specification cannot be parsed
    """
    if not spec or not spec.strip():
        raise RangeError("empty address range")

    try:
        network = ipaddress.ip_network(spec.strip(), strict=False)
    except ValueError as e:
        raise RangeError(f"invalid address range '{spec}': {e}") from e

    return AddressRange(network.network_address, network.prefixlen)


def ip_version(ip: str) -> str:
    """Return 'IPv6' or 'IPv4' for a textual address"""
    return 'IPv6' if ':' in ip else 'IPv4'

