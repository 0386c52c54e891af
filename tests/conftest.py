"""Shared fixtures for the ipalloc test suite."""

import dataclasses
import sys

import pytest
from loguru import logger

from ipalloc.allocator import Allocator
from ipalloc.config import config
from ipalloc.models.ip_range import IPRange


@pytest.fixture(autouse=True)
def restore_global_state():
    """Undo config edits and logging setup made by a test."""
    saved = dataclasses.replace(config)
    yield
    for f in dataclasses.fields(config):
        setattr(config, f.name, getattr(saved, f.name))

    # configure_logging() replaces loguru's sinks; put the default back
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_messages():
    """Collect formatted loguru records emitted during a test."""
    messages = []
    handler_id = logger.add(
        messages.append, level="DEBUG", format="{level} | {extra[name]} | {message}"
    )
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass  # already removed by configure_logging()


@pytest.fixture
def ten_range() -> IPRange:
    """192.168.1.10 through 192.168.1.19 (END is exclusive)."""
    return IPRange.parse("192.168.1.10-20")


@pytest.fixture
def allocator(ten_range) -> Allocator:
    return Allocator(ten_range)
