"""Tests for the address Allocator."""

import ipaddress
from concurrent.futures import ThreadPoolExecutor

import pytest

from ipalloc.allocator import Allocator
from ipalloc.config import config
from ipalloc.models.enums import AddressState
from ipalloc.models.ip_range import IPRange


def ip(last_octet: int) -> ipaddress.IPv4Address:
    return ipaddress.ip_address(f"192.168.1.{last_octet}")


def drain(allocator: Allocator) -> list:
    """Allocate until the allocator is exhausted."""
    addresses = []
    while allocator.remaining > 0:
        address = allocator.allocate()
        assert address is not None
        addresses.append(address)
    return addresses


class TestConstruction:

    def test_new_allocator(self, allocator):
        assert allocator.size == 10
        assert allocator.remaining == 10
        assert allocator.reserved == frozenset()
        assert allocator.allocated == []

    def test_empty_range(self):
        allocator = Allocator([])
        assert allocator.size == 0
        assert allocator.remaining == 0
        assert allocator.allocate() is None

    def test_new_allocator_from_short_form(self):
        ip_range = IPRange.parse("192.168.1.10-20")
        allocator = Allocator(ip_range)
        assert allocator.size == 10
        assert allocator.remaining == 10

    @pytest.mark.parametrize(
        "value",
        [42, "10.0.0.1-5", {"10.0.0.1": 1}, {ipaddress.ip_address("10.0.0.1")}],
    )
    def test_rejects_non_sequence(self, value):
        with pytest.raises(TypeError, match="IPRange or a sequence"):
            Allocator(value)

    def test_rejects_oversized_ipv6_range(self):
        ip_range = IPRange.parse("fd00::-fd00::ffff:ffff:ffff:ffff")
        with pytest.raises(ValueError, match="range too large"):
            Allocator(ip_range)

    def test_size_limit_is_configurable(self, ten_range):
        config.MAX_RANGE_SIZE = 5
        with pytest.raises(ValueError, match="limit 5"):
            Allocator(ten_range)

        config.MAX_RANGE_SIZE = 10
        assert Allocator(ten_range).remaining == 10


class TestAllocate:

    def test_allocate_until_exhausted(self, allocator, ten_range):
        first = allocator.allocate()
        assert ten_range.contains(first)
        assert allocator.remaining == 9

        for _ in range(8):
            assert ten_range.contains(allocator.allocate())
        assert allocator.remaining == 1

        last = allocator.allocate()
        assert ten_range.contains(last)
        assert allocator.remaining == 0

        # no more left
        assert allocator.allocate() is None
        assert allocator.remaining == 0

    def test_ascending_and_distinct(self, allocator):
        addresses = [allocator.allocate() for _ in range(6)]
        assert addresses == [ip(n) for n in range(10, 16)]
        assert len(set(addresses)) == 6
        assert allocator.remaining == 4

    def test_deterministic_across_instances(self, ten_range):
        a, b = Allocator(ten_range), Allocator(ten_range)
        for alloc in (a, b):
            alloc.reserve("192.168.1.10")
            alloc.allocate()
            alloc.allocate()
            alloc.release("192.168.1.11")
        assert a.allocate() == b.allocate() == ip(11)

    def test_generic_sequence(self):
        addresses = [ipaddress.ip_address(f"10.0.0.{n}") for n in (1, 2, 3)]
        allocator = Allocator(addresses)
        allocator.reserve("10.0.0.2")
        assert allocator.allocate() == addresses[0]
        assert allocator.allocate() == addresses[2]
        assert allocator.allocate() is None
        allocator.release(addresses[0])
        assert allocator.remaining == 1

    def test_generic_sequence_accepts_int_and_str_addresses(self):
        allocator = Allocator(("10.0.0.1", "10.0.0.2", "10.0.0.3"))
        allocator.reserve(int(ipaddress.ip_address("10.0.0.2")))
        assert allocator.state_of("10.0.0.2") == AddressState.RESERVED
        assert allocator.state_of(ipaddress.ip_address("10.0.0.3")) == (
            AddressState.FREE
        )
        assert allocator.remaining == 2


class TestReserve:

    def test_reserved_address_never_allocated(self, allocator):
        allocator.reserve(ip(11))
        assert allocator.remaining == 9
        assert len(allocator.reserved) == 1

        # consume everything and ensure we don't get that IP
        addresses = drain(allocator)
        assert len(addresses) == 9
        assert ip(11) not in addresses
        assert allocator.allocate() is None

    def test_accepts_string_addresses(self, allocator):
        allocator.reserve("192.168.1.12")
        assert allocator.reserved == frozenset({ip(12)})
        assert allocator.state_of("192.168.1.12") == AddressState.RESERVED

    def test_reserve_twice_decrements_once(self, allocator):
        allocator.reserve(ip(11))
        allocator.reserve(ip(11))
        assert allocator.remaining == 9
        assert len(allocator.reserved) == 1

    def test_reserve_allocated_is_noop(self, allocator):
        address = allocator.allocate()
        allocator.reserve(address)
        assert allocator.remaining == 9
        assert allocator.reserved == frozenset()
        assert allocator.state_of(address) == AddressState.ALLOCATED

        # holder can still give it back
        allocator.release(address)
        assert allocator.remaining == 10

    def test_reserve_outside_range_is_noop(self, allocator):
        allocator.reserve("192.168.1.20")
        allocator.reserve("10.0.0.1")
        allocator.reserve("not an address")
        assert allocator.remaining == 10
        assert allocator.reserved == frozenset()

    def test_reserved_survives_release(self, allocator):
        allocator.reserve(ip(10))
        allocator.release(ip(10))
        assert allocator.remaining == 9
        assert allocator.state_of(ip(10)) == AddressState.RESERVED
        assert allocator.allocate() == ip(11)


class TestRelease:

    def test_release(self, allocator):
        # test releasing when empty
        allocator.release(ip(11))
        assert allocator.remaining == 10

        drain(allocator)
        assert allocator.remaining == 0

        allocator.release(ip(11))
        assert allocator.remaining == 1

        # allocate one more and should get that one
        assert str(allocator.allocate()) == "192.168.1.11"
        assert allocator.remaining == 0

    def test_release_twice_increments_once(self, allocator):
        address = allocator.allocate()
        allocator.release(address)
        allocator.release(address)
        assert allocator.remaining == 10

    def test_release_outside_range_is_noop(self, allocator):
        allocator.allocate()
        allocator.release("192.168.1.99")
        allocator.release("???")
        assert allocator.remaining == 9

    def test_lowest_free_wins_after_release(self, allocator):
        for _ in range(5):
            allocator.allocate()
        allocator.release(ip(13))
        allocator.release(ip(11))
        assert allocator.allocate() == ip(11)
        assert allocator.allocate() == ip(13)
        assert allocator.allocate() == ip(15)


class TestIntrospection:

    def test_state_of(self, allocator):
        allocator.allocate()
        allocator.reserve(ip(12))
        assert allocator.state_of(ip(10)) == AddressState.ALLOCATED
        assert allocator.state_of(ip(11)) == AddressState.FREE
        assert allocator.state_of(ip(12)) == AddressState.RESERVED
        assert allocator.state_of("192.168.1.30") is None

    def test_stats(self, allocator):
        allocator.reserve(ip(19))
        allocator.allocate()
        allocator.allocate()
        assert allocator.stats() == {
            "range": "192.168.1.10-192.168.1.20",
            "size": 10,
            "remaining": 7,
            "allocated": 2,
            "reserved": 1,
        }
        assert allocator.allocated == [ip(10), ip(11)]

    def test_logs_transitions(self, allocator, log_messages):
        allocator.allocate()
        allocator.release("192.168.1.50")
        text = "".join(log_messages)
        assert "ipalloc.allocator | Allocated 192.168.1.10" in text
        assert "Ignoring release of 192.168.1.50" in text


def test_reserve_allocate_release_walkthrough(allocator):
    allocator.reserve(ip(11))

    addresses = [allocator.allocate() for _ in range(9)]
    assert addresses == [ip(n) for n in (10, 12, 13, 14, 15, 16, 17, 18, 19)]
    assert allocator.remaining == 0

    allocator.release(ip(12))
    assert allocator.remaining == 1
    assert allocator.allocate() == ip(12)


def test_concurrent_allocation_hands_out_each_address_once():
    ip_range = IPRange.parse("10.0.0.0-256")
    allocator = Allocator(ip_range)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: allocator.allocate(), range(300)))

    handed_out = [r for r in results if r is not None]
    assert len(handed_out) == 256
    assert len(set(handed_out)) == 256
    assert results.count(None) == 44
    assert allocator.remaining == 0


def test_concurrent_release_and_allocate_keep_count_consistent():
    ip_range = IPRange.parse("10.0.0.0-256")
    allocator = Allocator(ip_range)
    held = [allocator.allocate() for _ in range(128)]

    def churn(address):
        allocator.release(address)
        return allocator.allocate()

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(churn, held))

    assert None not in results
    assert len(set(results)) == 128
    assert allocator.remaining == 128
    assert allocator.stats()["allocated"] == 128
