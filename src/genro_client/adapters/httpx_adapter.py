# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""httpx adapter - performs requests with a synchronous ``httpx.Client``.

The ``httpx.Client`` (and its connection pool) is created lazily on first
use and shared by every request going through this adapter instance;
``httpx.Client`` is safe to use from several threads.

Conn options understood:
    timeout (float): Per-request timeout in seconds. Falls back to the
        adapter ``timeout`` argument, then to the httpx default.
    follow_redirects (bool): Follow 3xx responses. Default: False.

Request body:
    ``bytes``/``str`` bodies are sent as-is and ``bytearray`` is copied to
    ``bytes``; ``None`` sends no body. Any other value fails with
    ``TransportError``: add the ``json`` middleware (or another encoder) in
    front of the adapter.

Failures:
    Every ``httpx.HTTPError`` (connect errors, timeouts, protocol errors),
    an invalid URL, a header value httpx cannot encode and a malformed
    ``timeout`` option become ``TransportError(exc, conn)``; the exception
    itself is the reason.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

import httpx

from . import BaseAdapter
from ..results import TransportError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["HttpxAdapter"]

logger = logging.getLogger("genro_client.adapters")

# malformed URLs, non-ASCII header values and bad timeout options surface
# while the request is built, outside httpx.HTTPError
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError, ValueError, TypeError)


class HttpxAdapter(BaseAdapter):
    """Transport adapter backed by ``httpx.Client``.

    Args:
        client: An existing ``httpx.Client`` to use (not closed by ``close()``
            unless ``owns_client`` is True).
        timeout: Default timeout in seconds for requests without a
            ``timeout`` option.
        **client_options: Keyword arguments for ``httpx.Client`` when the
            adapter creates its own client (e.g. ``transport``, ``verify``).
    """

    adapter_name = "httpx"

    def __init__(
        self,
        client: httpx.Client | None = None,
        owns_client: bool | None = None,
        timeout: float | None = None,
        **client_options: Any,
    ) -> None:
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None if owns_client is None else owns_client
        self._client_options = client_options
        self._lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(**self._client_options)
        return self._client

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None and self._owns_client:
            client.close()

    def call(self, conn: Conn) -> StepResult:
        if not conn.url:
            return TransportError("missing url", conn)
        body = conn.req_body
        if body is not None and not isinstance(body, (bytes, bytearray, str)):
            return TransportError(
                f"request body must be bytes or str, got {type(body).__name__}", conn
            )
        if isinstance(body, bytearray):
            body = bytes(body)

        method = conn.method.value if conn.method else "GET"
        url = conn.full_url
        try:
            request = self.client.build_request(
                method,
                url,
                headers=conn.req_headers.multi_items(),
                content=body,
                timeout=self._timeout(conn),
            )
            response = self.client.send(
                request, follow_redirects=bool(conn.opts.get("follow_redirects", False))
            )
        except _TRANSPORT_ERRORS as exc:
            logger.warning("%s %s failed: %r", method, url, exc)
            return TransportError(exc, conn)

        return (
            conn.put_status(response.status_code)
            .put_resp_headers(_collect_headers(response.headers.multi_items()))
            .put_resp_body(response.content)
        )

    def _timeout(self, conn: Conn) -> Any:
        timeout = conn.opts.get("timeout")
        if timeout is not None:
            return float(timeout)
        if self.timeout is not None:
            return self.timeout
        return httpx.USE_CLIENT_DEFAULT


def _collect_headers(items: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    collected: dict[str, str | list[str]] = {}
    for name, value in items:
        key = name.lower()
        previous = collected.get(key)
        if previous is None:
            collected[key] = value
        elif isinstance(previous, list):
            previous.append(value)
        else:
            collected[key] = [previous, value]
    return collected
