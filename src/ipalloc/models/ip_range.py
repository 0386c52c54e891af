"""
Address range parsing and lookup.

Parses a textual range specification into an ordered, finite sequence of
addresses. The allocator consumes the result as an indexable sequence.

Format: START[-END][/PREFIX]
- START: First address of the range
- END: Exclusive bound; either a full address, or (IPv4 only) just the
  last octet, 0-256
- PREFIX: Optional netmask length; every address in the range must lie
  inside that network

Examples:
- 192.168.1.10:
  - Single address, size 1

- 192.168.1.10-20:
  - 192.168.1.10 through 192.168.1.19, size 10

- 10.0.0.1-256/24:
  - 10.0.0.1 through 10.0.0.255, size 255, netmask 255.255.255.0

- 192.168.1.10-192.168.2.6/16:
  - 192.168.1.10 through 192.168.2.5, size 252, netmask 255.255.0.0

- fd00::10-fd00::20:
  - IPv6 works with the full form only, size 16
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Iterator, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AddressLike = Union[str, int, IPAddress]


def coerce_address(address: AddressLike) -> IPAddress | None:
    """Convert user input to an address object, None if it isn't one."""
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address
    try:
        return ipaddress.ip_address(
            address.strip() if isinstance(address, str) else address
        )
    except ValueError:
        return None


def _offset(text: str, address: IPAddress, offset: int) -> IPAddress:
    """Add an offset to an address, rejecting overflow of the address space."""
    try:
        return address + offset
    except ipaddress.AddressValueError:
        raise ValueError(
            f"Invalid IP range: '{text}'. "
            f"End runs past the last IPv{address.version} address."
        )


@dataclass(frozen=True)
class IPRange:
    """
    Immutable half-open range of IP addresses.

    Attributes:
        start: First address in the range
        end: First address after the range (exclusive)
        prefixlen: Optional netmask length recorded from the range text
    """

    start: IPAddress
    end: IPAddress
    prefixlen: int | None = None

    def __post_init__(self):
        if self.start.version != self.end.version:
            raise ValueError(
                f"Invalid IP range: {self.start} and {self.end} "
                f"are different IP versions."
            )

        if int(self.end) < int(self.start):
            raise ValueError(
                f"Invalid IP range: end {self.end} is before start {self.start}."
            )

        if self.prefixlen is not None:
            network = self.network
            last = self.last
            if self.start not in network or (last is not None and last not in network):
                raise ValueError(
                    f"Invalid IP range: {self} does not fit in /{self.prefixlen}."
                )

    @classmethod
    def parse(cls, text: str) -> IPRange:
        """
        Parse a range specification string.

        Args:
            text: Format "START[-END][/PREFIX]", END exclusive
                  e.g., "192.168.1.10-20" or "10.0.0.2-10.0.0.254/24"

        Returns:
            IPRange instance

        Raises:
            ValueError: If the format is invalid or the bounds are inconsistent
        """
        body = text.strip()
        if not body:
            raise ValueError("Invalid IP range: empty string.")

        prefixlen = None
        if "/" in body:
            body, prefix_str = body.rsplit("/", 1)
            try:
                prefixlen = int(prefix_str.strip())
            except ValueError:
                raise ValueError(
                    f"Invalid IP range: '{text}'. "
                    f"Prefix must be an integer, got '{prefix_str}'."
                )

        start_str, sep, end_str = body.partition("-")
        start_str = start_str.strip()
        end_str = end_str.strip()

        try:
            start = ipaddress.ip_address(start_str)
        except ValueError as e:
            raise ValueError(f"Invalid IP range: '{text}'. {e}")

        if not sep:
            end = _offset(text, start, 1)
        elif end_str.isdigit() and start.version == 4:
            # Short form: END replaces the last octet of START
            octet = int(end_str)
            if octet > 256:
                raise ValueError(
                    f"Invalid IP range: '{text}'. "
                    f"End octet {octet} is out of range 0-256."
                )
            base = ipaddress.IPv4Address(int(start) & 0xFFFFFF00)
            end = _offset(text, base, octet)
        else:
            try:
                end = ipaddress.ip_address(end_str)
            except ValueError as e:
                raise ValueError(f"Invalid IP range: '{text}'. {e}")

        if prefixlen is not None and not 0 <= prefixlen <= start.max_prefixlen:
            raise ValueError(
                f"Invalid IP range: '{text}'. "
                f"Prefix must be between 0 and {start.max_prefixlen}."
            )

        return cls(start=start, end=end, prefixlen=prefixlen)

    @property
    def size(self) -> int:
        """Number of addresses in the range."""
        return int(self.end) - int(self.start)

    @property
    def last(self) -> IPAddress | None:
        """Last address in the range, None for an empty range."""
        if self.size == 0:
            return None
        return self.end - 1

    @property
    def version(self) -> int:
        return self.start.version

    @property
    def network(self) -> ipaddress.IPv4Network | ipaddress.IPv6Network | None:
        """The network implied by the prefix, or None without one."""
        if self.prefixlen is None:
            return None
        return ipaddress.ip_network(f"{self.start}/{self.prefixlen}", strict=False)

    def index_of(self, address: AddressLike) -> int | None:
        """
        Get the ordinal position of an address within the range.

        Returns:
            Zero-based index, or None if the address is not a member.
        """
        addr = coerce_address(address)
        if addr is None or addr.version != self.version:
            return None
        offset = int(addr) - int(self.start)
        if offset < 0 or offset >= self.size:
            return None
        return offset

    def contains(self, address: AddressLike) -> bool:
        """Check whether an address is a member of the range."""
        return self.index_of(address) is not None

    def __contains__(self, address: object) -> bool:
        if not isinstance(
            address, (str, int, ipaddress.IPv4Address, ipaddress.IPv6Address)
        ):
            return False
        return self.contains(address)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[IPAddress]:
        for offset in range(self.size):
            yield self.start + offset

    def __getitem__(self, index: int) -> IPAddress:
        if index < 0:
            index += self.size
        if index < 0 or index >= self.size:
            raise IndexError(f"IP range index out of range: {index}")
        return self.start + index

    def __str__(self) -> str:
        """Return the range in canonical full form."""
        text = f"{self.start}-{self.end}"
        if self.prefixlen is not None:
            text += f"/{self.prefixlen}"
        return text

    def __repr__(self) -> str:
        return f"IPRange({self}, size={self.size})"
