# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Module-level verbs for one-off requests.

For cases where declaring a ``Client`` subclass is too heavy. The verbs go
through a client with no middleware and the configured default adapter::

    import genro_client

    genro_client.get_strict("http://httpbin.org/ip").resp_body
    genro_client.post("http://httpbin.org/post", {"content-type": "text/plain"}, b"hi")
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING, Any

from .client import default_client

if TYPE_CHECKING:
    from .conn import Conn
    from .datastructures.headers import HeadersInput
    from .methods import Method
    from .results import Result

__all__ = [
    "request",
    "request_strict",
    "get",
    "head",
    "delete",
    "trace",
    "options",
    "post",
    "put",
    "patch",
    "get_strict",
    "head_strict",
    "delete_strict",
    "trace_strict",
    "options_strict",
    "post_strict",
    "put_strict",
    "patch_strict",
]


def request(
    method: str | Method,
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
) -> Result:
    return default_client().request(method, url_or_conn, headers, body)


def request_strict(
    method: str | Method,
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return default_client().request_strict(method, url_or_conn, headers, body, statuses=statuses)


def get(url_or_conn: str | Conn | None = None, headers: HeadersInput = None) -> Result:
    return request("GET", url_or_conn, headers)


def head(url_or_conn: str | Conn | None = None, headers: HeadersInput = None) -> Result:
    return request("HEAD", url_or_conn, headers)


def delete(url_or_conn: str | Conn | None = None, headers: HeadersInput = None) -> Result:
    return request("DELETE", url_or_conn, headers)


def trace(url_or_conn: str | Conn | None = None, headers: HeadersInput = None) -> Result:
    return request("TRACE", url_or_conn, headers)


def options(url_or_conn: str | Conn | None = None, headers: HeadersInput = None) -> Result:
    return request("OPTIONS", url_or_conn, headers)


def post(
    url_or_conn: str | Conn | None = None, headers: HeadersInput = None, body: Any = None
) -> Result:
    return request("POST", url_or_conn, headers, body)


def put(
    url_or_conn: str | Conn | None = None, headers: HeadersInput = None, body: Any = None
) -> Result:
    return request("PUT", url_or_conn, headers, body)


def patch(
    url_or_conn: str | Conn | None = None, headers: HeadersInput = None, body: Any = None
) -> Result:
    return request("PATCH", url_or_conn, headers, body)


def get_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("GET", url_or_conn, headers, statuses=statuses)


def head_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("HEAD", url_or_conn, headers, statuses=statuses)


def delete_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("DELETE", url_or_conn, headers, statuses=statuses)


def trace_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("TRACE", url_or_conn, headers, statuses=statuses)


def options_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("OPTIONS", url_or_conn, headers, statuses=statuses)


def post_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("POST", url_or_conn, headers, body, statuses=statuses)


def put_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("PUT", url_or_conn, headers, body, statuses=statuses)


def patch_strict(
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
    *,
    statuses: Collection[int] | None = None,
) -> Conn:
    return request_strict("PATCH", url_or_conn, headers, body, statuses=statuses)
