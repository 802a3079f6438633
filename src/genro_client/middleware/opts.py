# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Default adapter options middleware.

Config:
    Mapping of adapter options, e.g. ``{"timeout": 5, "follow_redirects": True}``.
    Options already set on the request win.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["OptsMiddleware"]


class OptsMiddleware(BaseMiddleware):
    """Merge default adapter options under the request's own options."""

    middleware_name = "opts"

    __slots__ = ()

    def init(self, opts: Any) -> Mapping[str, Any]:
        if not isinstance(opts, Mapping):
            raise ConfigurationError(f"opts middleware needs a mapping, got {opts!r}")
        return MappingProxyType(dict(opts))

    def call(self, conn: Conn, call_next: CallNext, opts: Mapping[str, Any]) -> StepResult:
        return call_next(conn._replace(opts={**opts, **conn.opts}))
