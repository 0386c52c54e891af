"""
REST client bound to a base URL.

Construct a client with ``Client("http://service.example/api")`` and use its
verb methods to receive decoded JSON. For example, ``client.get("items")``
fetches ``http://service.example/api/items``.

Lower level helpers build ``Request`` objects that may be sent later, by
``Client.do`` or by any other ``httpx.Client``.
"""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from ipalloc.config import config
from ipalloc.restclient._base import (
    Method,
    RestError,
    _decode_response,
    _handle_http_error,
    logger,
)
from ipalloc.utils.logger import format_traceback

# Produces (body, content type) when the request is built
BodyPreparer = Callable[[], tuple[bytes, str]]


# =============================================================================
# Request
# =============================================================================


@dataclass
class Request:
    """A REST request that has been described but not sent yet."""

    method: Method
    url: httpx.URL
    headers: dict[str, str] = field(default_factory=dict)
    prepare: BodyPreparer | None = None

    def to_httpx(self) -> httpx.Request:
        """
        Build an httpx.Request usable by any httpx.Client.

        Raises:
            TypeError, ValueError: If the body cannot be encoded.
        """
        headers = dict(self.headers)
        content = None
        if self.prepare is not None:
            content, content_type = self.prepare()
            headers["Content-Type"] = content_type
        return httpx.Request(
            self.method.value, self.url, headers=headers, content=content
        )


# =============================================================================
# Client
# =============================================================================


class Client:
    """Client bound to a REST base URL."""

    def __init__(
        self,
        base_url: str,
        driver: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Absolute URL under which all resources live,
                including port and path where required
            driver: httpx.Client that performs requests (one is created
                and owned by this client when omitted)
            timeout: Request timeout for an owned driver

        Raises:
            ValueError: If base_url is not an absolute URL.
        """
        try:
            base = httpx.URL(base_url)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid base URL '{base_url}': {e}")

        if not base.scheme or not base.host:
            raise ValueError(f"URL is not absolute: {base_url}")

        self._base = base
        self._owns_driver = driver is None
        self.driver = driver or httpx.Client(
            timeout=timeout if timeout is not None else config.REST_TIMEOUT,
            headers={"User-Agent": config.REST_USER_AGENT},
        )

    @property
    def base_url(self) -> httpx.URL:
        """Copy of the base URL; modifying it does not affect the client."""
        return self._base.copy_with()

    # =========================================================================
    # Verb Helpers
    # =========================================================================

    def get(self, endpoint: str) -> Any:
        """GET an endpoint and decode the JSON response."""
        return self.result(self.new_json_request(Method.GET, endpoint))

    def post(self, endpoint: str, payload: Any = None) -> Any:
        """POST a JSON payload to an endpoint and decode the response."""
        return self.result(self.new_json_request(Method.POST, endpoint, payload))

    def put(self, endpoint: str, payload: Any = None) -> Any:
        """PUT a JSON payload to an endpoint and decode the response."""
        return self.result(self.new_json_request(Method.PUT, endpoint, payload))

    def delete(self, endpoint: str) -> Any:
        """DELETE an endpoint and decode the response."""
        return self.result(self.new_json_request(Method.DELETE, endpoint))

    # =========================================================================
    # Execution
    # =========================================================================

    def result(self, request: Request, decode: bool = True) -> Any:
        """
        Perform a request and decode a successful response.

        Args:
            request: Request to send
            decode: When False the body is discarded and None is returned

        Returns:
            Decoded JSON body, or None.
        """
        response = self.do(request)
        if not decode:
            response.close()
            return None
        return _decode_response(response)

    def do(self, request: Request) -> httpx.Response:
        """
        Perform a request and return the raw response.

        Raises:
            RestError: If the request cannot be prepared or sent, or the
                response status is not 2xx.
        """
        try:
            http_request = request.to_httpx()
        except (TypeError, ValueError) as e:
            _handle_http_error(f"error preparing request: {e}")

        logger.debug(f"{http_request.method} {http_request.url}")
        try:
            response = self.driver.send(http_request)
        except httpx.RequestError as e:
            logger.debug(f"Traceback:\n{format_traceback(e)}")
            _handle_http_error(f"error sending request: {e}", request=http_request)

        if not response.is_success:
            _handle_http_error(
                f"error in response: {response.status_code} {response.reason_phrase}",
                request=http_request,
                response=response,
            )
        return response

    # =========================================================================
    # Request Builders
    # =========================================================================

    def new_request(
        self,
        method: Method,
        endpoint: str,
        content: bytes | str | None = None,
        content_type: str = "application/octet-stream",
    ) -> Request:
        """Build a request sending raw content to an endpoint."""
        request = self._new_request(method, endpoint)
        if content is None:
            return request

        body = content.encode() if isinstance(content, str) else content
        request.prepare = lambda: (body, content_type)
        return request

    def new_json_request(
        self, method: Method, endpoint: str, obj: Any = None
    ) -> Request:
        """Build a request whose body is obj encoded as JSON."""
        request = self._new_request(method, endpoint)
        if obj is None:
            return request

        request.prepare = lambda: (json.dumps(obj).encode(), "application/json")
        return request

    def new_form_request(
        self, method: Method, endpoint: str, params: dict[str, str]
    ) -> Request:
        """Build a request with a form encoded body."""
        request = self._new_request(method, endpoint)
        request.prepare = lambda: (
            urlencode(params).encode(),
            "application/x-www-form-urlencoded",
        )
        return request

    def _new_request(self, method: Method, endpoint: str) -> Request:
        return Request(method=Method(method), url=self._resource_url(endpoint))

    def _resource_url(self, endpoint: str) -> httpx.URL:
        """Resolve an endpoint path under the base URL."""
        path = posixpath.join(self._base.path or "/", endpoint.lstrip("/"))
        path = posixpath.normpath(path) if endpoint else path
        return self._base.copy_with(path=path)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the underlying driver if this client created it."""
        if self._owns_driver:
            self.driver.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Client({self._base})"
