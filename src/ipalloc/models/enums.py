"""
Enumeration types for ipalloc.

This module defines the enumeration types used throughout ipalloc for
address state tracking and configuration options.
"""

from enum import Enum, IntEnum


# =============================================================================
# Allocation-Related Enums
# =============================================================================


class AddressState(IntEnum):
    """
    Per-address allocation state.

    Values are stored directly in the allocator's state bytearray, so they
    must stay small integers.

    State transitions:
        FREE -> ALLOCATED (allocate) -> FREE (release)
        FREE -> RESERVED (reserve, terminal)
    """

    FREE = 0  # Eligible for allocation
    ALLOCATED = 1  # Held by some consumer
    RESERVED = 2  # Permanently withheld from the pool


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels for ipalloc components.

    Levels (from most to least verbose):
        - FULL: Debug output with loguru backtraces and variable values
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"


class OutputFormat(str, Enum):
    """CLI output format."""

    TABLE = "table"
    JSON = "json"
