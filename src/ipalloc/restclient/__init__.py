"""
REST client subpackage.

Re-exports the public names so that ``from ipalloc.restclient import X``
works for any of them.
"""

from ipalloc.restclient._base import Method, RestError
from ipalloc.restclient.client import Client, Request

__all__ = ["Client", "Method", "Request", "RestError"]
