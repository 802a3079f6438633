# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Required headers middleware - refuse requests missing mandatory headers.

Config:
    Header names as a list or a comma-separated string.

A request missing any of them never reaches the later middleware or the
adapter: the chain returns ``MiddlewareError`` whose reason names the
missing headers.

Example::

    class Api(Client):
        middleware = [("require_headers", "authorization, x-tenant")]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError
from ..results import MiddlewareError
from ..utils import split_and_strip

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["RequireHeadersMiddleware"]


class RequireHeadersMiddleware(BaseMiddleware):
    """Short-circuit when a required request header is absent."""

    middleware_name = "require_headers"

    __slots__ = ()

    def init(self, opts: Any) -> tuple[str, ...]:
        if opts is not None and not isinstance(opts, (str, list, tuple)):
            raise ConfigurationError(f"require_headers needs header names, got {opts!r}")
        names = tuple(name.lower() for name in split_and_strip(opts) if name)
        if not names:
            raise ConfigurationError("require_headers needs at least one header name")
        return names

    def call(self, conn: Conn, call_next: CallNext, opts: tuple[str, ...]) -> StepResult:
        missing = [name for name in opts if name not in conn.req_headers]
        if missing:
            return MiddlewareError(f"missing required header: {', '.join(missing)}", conn)
        return call_next(conn)
