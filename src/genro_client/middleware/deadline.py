# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Deadline middleware - bound the time a request may take.

Config:
    Seconds as a number, or ``{"seconds": ...}``. Must be positive.

Behavior:
    - Stores the absolute deadline in ``conn.state["deadline"]``. When an
      outer deadline is already present the earlier one is kept.
    - Sets the adapter ``timeout`` option to the remaining time unless the
      request already carries one.
    - Short-circuits with ``MiddlewareError("deadline_exceeded", conn)``
      when the deadline has already passed on the way in, and turns a
      successful result into the same error when it arrives late.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError
from ..results import ErrorResult, MiddlewareError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["DeadlineMiddleware", "DEADLINE_EXCEEDED"]

DEADLINE_EXCEEDED = "deadline_exceeded"

_clock = time.monotonic


class DeadlineMiddleware(BaseMiddleware):
    """Fail requests that do not complete within a configured time."""

    middleware_name = "deadline"

    __slots__ = ()

    def init(self, opts: Any) -> float:
        if isinstance(opts, Mapping):
            opts = opts.get("seconds")
        if isinstance(opts, bool) or not isinstance(opts, (int, float)) or opts <= 0:
            raise ConfigurationError(f"deadline needs a positive number of seconds, got {opts!r}")
        return float(opts)

    def call(self, conn: Conn, call_next: CallNext, opts: float) -> StepResult:
        now = _clock()
        deadline = now + opts
        outer = conn.get_private("deadline")
        if outer is not None:
            deadline = min(deadline, outer)
        if deadline <= now:
            return MiddlewareError(DEADLINE_EXCEEDED, conn)

        conn = conn.put_private("deadline", deadline)
        if "timeout" not in conn.opts:
            conn = conn.put_opt("timeout", deadline - now)

        result = call_next(conn)
        if isinstance(result, ErrorResult):
            return result
        if _clock() > deadline:
            return MiddlewareError(DEADLINE_EXCEEDED, result)
        return result
