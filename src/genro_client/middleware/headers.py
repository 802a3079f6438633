# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Default request headers middleware.

Config:
    Mapping of header name to value. Names are case-insensitive.

Headers already present on the request win over the defaults, so a caller
can override any default for a single request.

Example::

    class Api(Client):
        middleware = [("headers", {"User-Agent": "genro-client", "Accept": "application/json"})]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..datastructures import Headers
from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["HeadersMiddleware"]


class HeadersMiddleware(BaseMiddleware):
    """Add default request headers without overriding the caller's."""

    middleware_name = "headers"

    __slots__ = ()

    def init(self, opts: Any) -> Headers:
        if not isinstance(opts, (Mapping, Headers)):
            raise ConfigurationError(f"headers middleware needs a mapping, got {opts!r}")
        return Headers(opts)

    def call(self, conn: Conn, call_next: CallNext, opts: Headers) -> StepResult:
        return call_next(conn.put_req_headers(opts.merge(conn.req_headers)))
