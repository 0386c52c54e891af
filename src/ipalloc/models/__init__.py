"""Data models for ipalloc."""

from ipalloc.models.enums import AddressState, LogLevel, OutputFormat
from ipalloc.models.ip_range import IPRange

__all__ = ["AddressState", "IPRange", "LogLevel", "OutputFormat"]
