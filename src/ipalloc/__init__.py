"""
Address allocation for bounded IP ranges.

Re-exports main classes so callers can write:
    from ipalloc import Allocator, IPRange
"""

from ipalloc.allocator import Allocator
from ipalloc.models.enums import AddressState
from ipalloc.models.ip_range import IPRange

__version__ = "0.1.0"

__all__ = ["Allocator", "AddressState", "IPRange"]
