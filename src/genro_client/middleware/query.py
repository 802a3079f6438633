# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Default query parameters middleware.

Config:
    Mapping of parameter name to value (string, number or list), or a raw
    query string (``"format=json&v=2"``).

Parameters already on the request win over the defaults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..datastructures import QueryParams

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["QueryMiddleware"]


class QueryMiddleware(BaseMiddleware):
    """Add default query parameters without overriding the caller's."""

    middleware_name = "query"

    __slots__ = ()

    def init(self, opts: Any) -> QueryParams:
        return QueryParams(opts)

    def call(self, conn: Conn, call_next: CallNext, opts: QueryParams) -> StepResult:
        params = conn.query_params.setdefaults(opts)
        return call_next(conn._replace(query_params=params))
