# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""JSON middleware - encode request bodies, decode response bodies.

Config:
    encode (bool): Encode dict/list request bodies to JSON bytes. Default: True.
    decode (bool): Decode JSON response bodies. Default: True.
    content_type (str): Content-Type set on encoded requests.
        Default: "application/json".
    decode_content_types (list[str]): Response content types treated as JSON.
        Default: ["application/json", "text/javascript"]. Any "+json" suffix
        (e.g. "application/problem+json") is always accepted.

Request side:
    A body that is a dict or a list is serialized and the Content-Type header
    is set unless the caller already set one. Bytes and strings pass through.
    A body that cannot be serialized short-circuits with ``MiddlewareError``.

Response side:
    A bytes/str body whose Content-Type is JSON is parsed. Empty bodies are
    left alone. Invalid JSON turns the result into ``MiddlewareError`` with
    the response conn attached.

Example::

    class Api(Client):
        middleware = [("base_url", "http://api.test"), "json"]

    Api.post("/users", body={"name": "x"})
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError
from ..results import ErrorResult, MiddlewareError
from ..utils import parse_bool, split_and_strip

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["JsonMiddleware", "JsonOptions"]


class JsonOptions(NamedTuple):
    encode: bool
    decode: bool
    content_type: str
    decode_content_types: tuple[str, ...]


class JsonMiddleware(BaseMiddleware):
    """Encode and decode JSON bodies."""

    middleware_name = "json"

    __slots__ = ()

    def init(self, opts: Any) -> JsonOptions:
        if opts is None:
            opts = {}
        if not isinstance(opts, Mapping):
            raise ConfigurationError(f"json middleware needs a mapping, got {opts!r}")
        unknown = set(opts) - set(JsonOptions._fields)
        if unknown:
            raise ConfigurationError(f"Unknown json middleware options: {sorted(unknown)}")
        types = split_and_strip(
            opts.get("decode_content_types"), ["application/json", "text/javascript"]
        )
        return JsonOptions(
            encode=parse_bool(opts.get("encode", True)),
            decode=parse_bool(opts.get("decode", True)),
            content_type=opts.get("content_type", "application/json"),
            decode_content_types=tuple(t.lower() for t in types),
        )

    def call(self, conn: Conn, call_next: CallNext, opts: JsonOptions) -> StepResult:
        if opts.encode and isinstance(conn.req_body, (dict, list)):
            try:
                encoded = json.dumps(conn.req_body).encode("utf-8")
            except (TypeError, ValueError) as exc:
                return MiddlewareError(exc, conn)
            conn = conn.put_req_body(encoded)
            if "content-type" not in conn.req_headers:
                conn = conn.put_req_header("content-type", opts.content_type)

        result = call_next(conn)
        if isinstance(result, ErrorResult) or not opts.decode:
            return result
        return self._decode(result, opts)

    def _decode(self, conn: Conn, opts: JsonOptions) -> StepResult:
        body = conn.resp_body
        if not isinstance(body, (bytes, bytearray, str)) or not body:
            return conn
        content_type = (conn.get_resp_header("content-type") or "").split(";")[0].strip().lower()
        if content_type not in opts.decode_content_types and not content_type.endswith("+json"):
            return conn
        try:
            return conn.put_resp_body(json.loads(body))
        except ValueError as exc:
            return MiddlewareError(exc, conn)
