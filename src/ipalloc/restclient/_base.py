"""
Shared REST types: HTTP methods, the error type, and response decoding.

The client module imports from here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx

from ipalloc.utils.logger import get_logger

logger = get_logger(__name__)


class Method(str, Enum):
    """HTTP verbs used by REST operations."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RestError(Exception):
    """
    REST request error carrying the request and response for inspection.

    Raised when a request cannot be prepared or sent, when the response
    status is outside the 2xx family, or when a body cannot be decoded.
    """

    def __init__(
        self,
        message: str,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.request = request
        self.response = response

    @property
    def status_code(self) -> int | None:
        if self.response is None:
            return None
        return self.response.status_code

    @property
    def body(self) -> str:
        """Response body text, empty when there is no response."""
        if self.response is None:
            return ""
        try:
            return self.response.text
        except httpx.ResponseNotRead:
            return self.response.read().decode(errors="replace")

    def __str__(self) -> str:
        if self.response is None:
            return f"REST error: {self.message}"
        return f"REST error - {self.message} - Body: {self.body}"


def _handle_http_error(
    message: str,
    request: httpx.Request | None = None,
    response: httpx.Response | None = None,
) -> None:
    """Log and raise a RestError with consistent formatting."""
    error = RestError(message, request=request, response=response)
    target = f"{request.method} {request.url}" if request is not None else "request"
    logger.error(f"{target}: {error}")
    raise error


def _decode_response(response: httpx.Response) -> Any:
    """
    Decode a successful response body.

    Returns:
        Parsed JSON, or None for an empty body.

    Raises:
        RestError: If the body is not JSON.
    """
    if response.status_code == 204 or not response.content:
        return None

    content_type = response.headers.get("Content-Type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json":
        _handle_http_error(
            f"unexpected response: {response.status_code} "
            f"{response.reason_phrase} {media_type or '<no content type>'}",
            request=response.request,
            response=response,
        )

    try:
        return response.json()
    except ValueError as e:
        _handle_http_error(
            f"invalid JSON in response: {e}",
            request=response.request,
            response=response,
        )
