"""
Configuration for ipalloc.

This module defines the configuration dataclass shared by the library,
the REST client and the CLI, providing a centralized place for all
configurable parameters.

Configuration can be modified at runtime by importing the global config
instance and updating its attributes before use.

Usage:
    from ipalloc.config import config

    # Modify configuration before building clients or allocators
    config.REST_TIMEOUT = 30.0
    config.LOG_LEVEL = LogLevel.DEBUG
"""

from dataclasses import dataclass

from ipalloc.models.enums import LogLevel, OutputFormat


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class IPAllocConfig:
    """
    ipalloc configuration.

    Attributes:
        DEFAULT_RANGE: Range used by the CLI when none is given.
        MAX_RANGE_SIZE: Address count limit for a single Allocator.
        LOG_LEVEL: Logging verbosity level.
        LOG_FILE: Optional log file path (empty for console only).
        OUTPUT_FORMAT: CLI output format.
        REST_TIMEOUT: Timeout in seconds for REST client requests.
        REST_USER_AGENT: User-Agent header sent by the REST client.
    """

    # -------------------------------------------------------------------------
    # Allocation Configuration
    # -------------------------------------------------------------------------

    # Container range of the first runner subnet in the default overlay layout
    # (END is exclusive: .2 through .253)
    DEFAULT_RANGE: str = "10.128.64.2-254/18"

    # Largest range an Allocator accepts; state costs one byte per address
    MAX_RANGE_SIZE: int = 2**24

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------

    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_FILE: str = ""

    # -------------------------------------------------------------------------
    # CLI Configuration
    # -------------------------------------------------------------------------

    OUTPUT_FORMAT: OutputFormat = OutputFormat.TABLE

    # -------------------------------------------------------------------------
    # REST Client Configuration
    # -------------------------------------------------------------------------

    REST_TIMEOUT: float = 10.0
    REST_USER_AGENT: str = "ipalloc-restclient"

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def get_log_file(self) -> str | None:
        """
        Get the log file path.

        Returns:
            The configured path, or None when file logging is disabled.
        """
        return self.LOG_FILE or None


# =============================================================================
# Global Instance
# =============================================================================

# Global config instance - modify before use
config = IPAllocConfig()
