# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Request/response context flowing through a genro-client pipeline.

Purpose
=======
A ``Conn`` describes one request/response cycle. The client builds it, every
middleware receives one and hands a (possibly different) one to the next
stage, the adapter fills in the response fields, and the caller reads the
result. No stage changes a ``Conn`` in place: every ``put_*`` method returns
a new value, which is what lets the same compiled pipeline run concurrently
and lets a middleware keep the context it saw on the way in.

Fields::

    method        Method | None        set by the verb entry point
    url           str | None           absolute or relative
    req_headers   Headers              case-insensitive, last write wins
    query_params  QueryParams          merged into the URL by the adapter
    req_body      Any                  opaque payload (None = no body)
    opts          Mapping[str, Any]    adapter options (e.g. timeout)
    status        int | None           None until a response exists
    resp_headers  Headers
    resp_body     Any
    state         State                private data shared between stages

Example::

    from genro_client import Conn

    conn = (
        Conn.new("/users")
        .put_req_header("Accept", "application/json")
        .put_query_string({"page": 2})
    )
    conn.full_url   # "/users?page=2"

Every method also exists as a module-level function taking the conn first
(``put_req_header(conn, "Accept", "...")``), for pipeline-style code.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .datastructures import Headers, QueryParams, State, append_query
from .datastructures.headers import HeadersInput
from .datastructures.query_params import QueryInput
from .exceptions import ConfigurationError
from .methods import Method

__all__ = [
    "Conn",
    "new",
    "put_method",
    "put_url",
    "put_path",
    "put_req_header",
    "put_req_headers",
    "delete_req_header",
    "get_req_header",
    "get_req_headers",
    "put_query_string",
    "put_req_body",
    "get_req_body",
    "put_opt",
    "put_opts",
    "put_private",
    "get_private",
    "put_status",
    "put_resp_header",
    "put_resp_headers",
    "put_resp_body",
    "get_status",
    "get_resp_header",
    "get_resp_headers",
    "get_resp_body",
]


def _frozen_mapping(value: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    if isinstance(value, MappingProxyType):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Adapter options must be a mapping, got {value!r}")
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class Conn:
    """
    Immutable context for one request/response cycle.

    Construct with ``Conn.new(url)`` or with keyword fields; plain dicts are
    accepted for the header, query, option and state fields and converted
    to their immutable counterparts.

    Raises:
        ConfigurationError: On a malformed field (non-string URL or header
            name, unknown method, non-mapping options).
    """

    url: str | None = None
    method: Method | None = None
    req_headers: Headers = field(default_factory=Headers)
    query_params: QueryParams = field(default_factory=QueryParams)
    req_body: Any = None
    opts: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    status: int | None = None
    resp_headers: Headers = field(default_factory=Headers)
    resp_body: Any = None
    state: State = field(default_factory=State)

    def __post_init__(self) -> None:
        if self.url is not None and not isinstance(self.url, str):
            raise ConfigurationError(f"URL must be a string, got {self.url!r}")
        if self.method is not None and not isinstance(self.method, Method):
            object.__setattr__(self, "method", Method.parse(self.method))
        if not isinstance(self.req_headers, Headers):
            object.__setattr__(self, "req_headers", Headers(self.req_headers))
        if not isinstance(self.resp_headers, Headers):
            object.__setattr__(self, "resp_headers", Headers(self.resp_headers))
        if not isinstance(self.query_params, QueryParams):
            object.__setattr__(self, "query_params", QueryParams(self.query_params))
        if not isinstance(self.state, State):
            object.__setattr__(self, "state", State(self.state))
        object.__setattr__(self, "opts", _frozen_mapping(self.opts))
        if self.status is not None and (
            isinstance(self.status, bool) or not isinstance(self.status, int)
        ):
            raise ConfigurationError(f"Status must be an integer, got {self.status!r}")

    @classmethod
    def new(cls, url: str | None = None) -> Conn:
        """Build a context for ``url`` with no method, headers, body or response."""
        return cls(url=url)

    def _replace(self, **changes: Any) -> Conn:
        return dataclasses.replace(self, **changes)

    # -- request side ------------------------------------------------------

    def put_method(self, method: str | Method) -> Conn:
        return self._replace(method=Method.parse(method))

    def put_url(self, url: str) -> Conn:
        return self._replace(url=url)

    def put_path(self, path: str) -> Conn:
        """Alias of ``put_url`` for relative paths completed by ``base_url``."""
        return self._replace(url=path)

    def put_req_header(self, name: str, value: Any) -> Conn:
        """Set one request header. Names are case-folded, last write wins."""
        return self._replace(req_headers=self.req_headers.set(name, value))

    def put_req_headers(self, headers: HeadersInput) -> Conn:
        """Merge ``headers`` into the request headers, overwriting same names."""
        return self._replace(req_headers=self.req_headers.merge(headers))

    def delete_req_header(self, name: str) -> Conn:
        return self._replace(req_headers=self.req_headers.delete(name))

    def get_req_header(self, name: str, default: str | None = None) -> str | None:
        return self.req_headers.get(name, default)

    def put_query_string(self, params: QueryInput) -> Conn:
        """Merge ``params`` into the query parameters, overwriting same keys."""
        return self._replace(query_params=self.query_params.merge(params))

    def put_req_body(self, body: Any) -> Conn:
        """Set the request body. Method compatibility is checked at dispatch."""
        return self._replace(req_body=body)

    def put_opt(self, key: str, value: Any) -> Conn:
        opts = dict(self.opts)
        opts[key] = value
        return self._replace(opts=opts)

    def put_opts(self, opts: Mapping[str, Any]) -> Conn:
        merged = dict(self.opts)
        merged.update(opts)
        return self._replace(opts=merged)

    def put_private(self, key: str, value: Any) -> Conn:
        return self._replace(state=self.state.set(key, value))

    def get_private(self, key: str, default: Any = None) -> Any:
        return self.state.get(key, default)

    @property
    def has_body(self) -> bool:
        """True when a non-empty request body is set."""
        if self.req_body is None:
            return False
        if isinstance(self.req_body, (bytes, bytearray, str)):
            return len(self.req_body) > 0
        return True

    @property
    def full_url(self) -> str:
        """URL with the query parameters appended."""
        return append_query(self.url or "", self.query_params.encode())

    # -- response side -----------------------------------------------------

    def put_status(self, status: int) -> Conn:
        return self._replace(status=status)

    def put_resp_header(self, name: str, value: Any) -> Conn:
        return self._replace(resp_headers=self.resp_headers.set(name, value))

    def put_resp_headers(self, headers: HeadersInput) -> Conn:
        return self._replace(resp_headers=self.resp_headers.merge(headers))

    def put_resp_body(self, body: Any) -> Conn:
        return self._replace(resp_body=body)

    def get_status(self) -> int | None:
        return self.status

    def get_resp_header(self, name: str, default: str | None = None) -> str | None:
        return self.resp_headers.get(name, default)

    def get_resp_headers(self) -> Headers:
        return self.resp_headers

    def get_resp_body(self) -> Any:
        return self.resp_body


def new(url: str | None = None) -> Conn:
    """Build a context for ``url``."""
    if url is not None and not isinstance(url, str):
        raise ConfigurationError(f"URL must be a string, got {url!r}")
    return Conn.new(url)


def put_method(conn: Conn, method: str | Method) -> Conn:
    return conn.put_method(method)


def put_url(conn: Conn, url: str) -> Conn:
    return conn.put_url(url)


def put_path(conn: Conn, path: str) -> Conn:
    return conn.put_path(path)


def put_req_header(conn: Conn, name: str, value: Any) -> Conn:
    return conn.put_req_header(name, value)


def put_req_headers(conn: Conn, headers: HeadersInput) -> Conn:
    return conn.put_req_headers(headers)


def delete_req_header(conn: Conn, name: str) -> Conn:
    return conn.delete_req_header(name)


def get_req_header(conn: Conn, name: str, default: str | None = None) -> str | None:
    return conn.get_req_header(name, default)


def get_req_headers(conn: Conn) -> Headers:
    return conn.req_headers


def put_query_string(conn: Conn, params: QueryInput) -> Conn:
    return conn.put_query_string(params)


def put_req_body(conn: Conn, body: Any) -> Conn:
    return conn.put_req_body(body)


def get_req_body(conn: Conn) -> Any:
    return conn.req_body


def put_opt(conn: Conn, key: str, value: Any) -> Conn:
    return conn.put_opt(key, value)


def put_opts(conn: Conn, opts: Mapping[str, Any]) -> Conn:
    return conn.put_opts(opts)


def put_private(conn: Conn, key: str, value: Any) -> Conn:
    return conn.put_private(key, value)


def get_private(conn: Conn, key: str, default: Any = None) -> Any:
    return conn.get_private(key, default)


def put_status(conn: Conn, status: int) -> Conn:
    return conn.put_status(status)


def put_resp_header(conn: Conn, name: str, value: Any) -> Conn:
    return conn.put_resp_header(name, value)


def put_resp_headers(conn: Conn, headers: HeadersInput) -> Conn:
    return conn.put_resp_headers(headers)


def put_resp_body(conn: Conn, body: Any) -> Conn:
    return conn.put_resp_body(body)


def get_status(conn: Conn) -> int | None:
    return conn.status


def get_resp_header(conn: Conn, name: str, default: str | None = None) -> str | None:
    return conn.get_resp_header(name, default)


def get_resp_headers(conn: Conn) -> Headers:
    return conn.resp_headers


def get_resp_body(conn: Conn) -> Any:
    return conn.resp_body
