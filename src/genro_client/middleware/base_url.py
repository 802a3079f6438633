# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Base URL middleware - prefix relative request URLs.

Config:
    The base URL, as a string or as ``{"url": "..."}``. Must be absolute
    (scheme and host). A path prefix is allowed and kept.

Behavior::

    base "http://api.test"      + "/ping"              → "http://api.test/ping"
    base "http://api.test/v1"   + "users"              → "http://api.test/v1/users"
    base "http://api.test"      + "https://other.io/x" → "https://other.io/x"
    base "http://api.test"      + None                 → "http://api.test"

Example:
    Declare in a client::

        class Api(Client):
            middleware = [("base_url", "http://api.test")]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..datastructures import is_absolute, join_url
from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["BaseUrlMiddleware"]


class BaseUrlMiddleware(BaseMiddleware):
    """Prefix the request URL with a configured base URL."""

    middleware_name = "base_url"

    __slots__ = ()

    def init(self, opts: Any) -> str:
        """Return the validated base URL.

        Raises:
            ConfigurationError: If the base URL is missing or not absolute.
        """
        if isinstance(opts, Mapping):
            opts = opts.get("url")
        if not isinstance(opts, str) or not is_absolute(opts):
            raise ConfigurationError(
                f"base_url middleware needs an absolute URL, got {opts!r}"
            )
        return opts

    def call(self, conn: Conn, call_next: CallNext, opts: str) -> StepResult:
        return call_next(conn.put_url(join_url(opts, conn.url)))
