"""
Address Allocator for a single IP range.

Hands out individual addresses from an IPRange to provisioned entities
(containers, VM interfaces) and tracks every address in one of three states:

- FREE: eligible for allocation
- ALLOCATED: currently held by a consumer, returned to FREE by release()
- RESERVED: permanently withheld, never allocated and never released

Allocation Order:
=================
allocate() always returns the lowest FREE address in the range's ascending
order, so two allocators in the same state pick the same address. A scan
cursor marks the lowest index that may still be FREE; allocate() moves it
forward and release() pulls it back, which keeps the common case from
rescanning the start of the range.

Misuse Handling:
================
Exhaustion is reported by returning None. Reserving a non-FREE address,
releasing a non-ALLOCATED address, or passing an address outside the range
are silent no-ops that leave the remaining count untouched.

Thread Safety:
==============
All state lives behind a single lock; every operation, including reads of
the remaining count, is a critical section.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from ipalloc.config import config
from ipalloc.models.enums import AddressState
from ipalloc.models.ip_range import AddressLike, IPAddress, IPRange, coerce_address
from ipalloc.utils.logger import get_logger

logger = get_logger(__name__)


class Allocator:
    """
    Allocates addresses from one IPRange.

    State is kept densely in a bytearray indexed by each address's ordinal
    position in the range, so lookups never depend on address hashing.
    """

    def __init__(self, ip_range: IPRange | Sequence[IPAddress]):
        """
        Initialize an allocator with every address FREE.

        Args:
            ip_range: Range to allocate from. Any sequence of ascending
                addresses works; an empty one is legal.

        Raises:
            TypeError: If ip_range is not an IPRange or a sequence.
            ValueError: If the range holds more than config.MAX_RANGE_SIZE
                addresses.
        """
        if isinstance(ip_range, (str, bytes)) or not isinstance(
            ip_range, (IPRange, Sequence)
        ):
            raise TypeError(
                "Allocator needs an IPRange or a sequence, "
                f"got {type(ip_range).__name__}"
            )

        # IPRange.size avoids len(), which overflows past sys.maxsize
        size = ip_range.size if isinstance(ip_range, IPRange) else len(ip_range)
        if size > config.MAX_RANGE_SIZE:
            raise ValueError(
                f"Invalid IP range: range too large, {size} addresses "
                f"(limit {config.MAX_RANGE_SIZE})"
            )

        self.ip_range = ip_range
        self.size = size

        self._states = bytearray(self.size)  # all AddressState.FREE
        self._remaining = self.size
        self._reserved: set[IPAddress] = set()
        # No FREE address exists below this index
        self._cursor = 0
        self._lock = threading.Lock()

        logger.debug(f"Allocator created for {ip_range} ({self.size} addresses)")

    # =========================================================================
    # Operations
    # =========================================================================

    def allocate(self) -> IPAddress | None:
        """
        Allocate the lowest FREE address.

        Returns:
            The allocated address, or None if the range is exhausted.
        """
        with self._lock:
            if self._remaining == 0:
                logger.debug(f"No addresses left in {self.ip_range}")
                return None

            index = self._states.find(AddressState.FREE, self._cursor)
            # remaining > 0 guarantees a FREE slot at or after the cursor
            self._states[index] = AddressState.ALLOCATED
            self._cursor = index + 1
            self._remaining -= 1

            address = self.ip_range[index]
            logger.debug(f"Allocated {address} ({self._remaining} remaining)")
            return address

    def reserve(self, address: AddressLike) -> None:
        """
        Permanently remove a FREE address from the pool.

        Addresses that are already ALLOCATED or RESERVED, or that fall
        outside the range, are left as they are.
        """
        with self._lock:
            index = self._index(address)
            if index is None:
                logger.debug(f"Ignoring reserve of {address}: not in {self.ip_range}")
                return

            state = AddressState(self._states[index])
            if state != AddressState.FREE:
                logger.debug(f"Ignoring reserve of {address}: already {state.name}")
                return

            self._states[index] = AddressState.RESERVED
            self._remaining -= 1
            self._reserved.add(self.ip_range[index])
            logger.debug(f"Reserved {address} ({self._remaining} remaining)")

    def release(self, address: AddressLike) -> None:
        """
        Return an ALLOCATED address to the pool.

        Releasing a FREE or RESERVED address, or one outside the range,
        does nothing.
        """
        with self._lock:
            index = self._index(address)
            if index is None:
                logger.debug(f"Ignoring release of {address}: not in {self.ip_range}")
                return

            if self._states[index] != AddressState.ALLOCATED:
                state = AddressState(self._states[index])
                logger.debug(f"Ignoring release of {address}: {state.name}")
                return

            self._states[index] = AddressState.FREE
            self._remaining += 1
            if index < self._cursor:
                self._cursor = index
            logger.debug(f"Released {address} ({self._remaining} remaining)")

    @property
    def remaining(self) -> int:
        """Number of addresses currently FREE."""
        with self._lock:
            return self._remaining

    # =========================================================================
    # Introspection
    # =========================================================================

    def state_of(self, address: AddressLike) -> AddressState | None:
        """Get the state of an address, or None if it is outside the range."""
        with self._lock:
            index = self._index(address)
            if index is None:
                return None
            return AddressState(self._states[index])

    @property
    def reserved(self) -> frozenset[IPAddress]:
        """Snapshot of the explicitly reserved addresses."""
        with self._lock:
            return frozenset(self._reserved)

    @property
    def allocated(self) -> list[IPAddress]:
        """Currently allocated addresses in ascending order."""
        with self._lock:
            return [
                self.ip_range[i]
                for i, state in enumerate(self._states)
                if state == AddressState.ALLOCATED
            ]

    def stats(self) -> dict:
        """
        Get a consistent summary of the allocator.

        Returns:
            Dict with range, size, remaining, allocated and reserved counts.
        """
        with self._lock:
            reserved = len(self._reserved)
            return {
                "range": str(self.ip_range),
                "size": self.size,
                "remaining": self._remaining,
                "allocated": self.size - self._remaining - reserved,
                "reserved": reserved,
            }

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _index(self, address: AddressLike) -> int | None:
        """Ordinal of an address in the range, None if not a member."""
        if isinstance(self.ip_range, IPRange):
            return self.ip_range.index_of(address)

        # Generic sequences: fall back to a linear search
        target = coerce_address(address)
        if target is None:
            return None
        for i in range(self.size):
            if coerce_address(self.ip_range[i]) == target:
                return i
        return None

    def __repr__(self) -> str:
        return f"Allocator({self.ip_range}, remaining={self.remaining}/{self.size})"
