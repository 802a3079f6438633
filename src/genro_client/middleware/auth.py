# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Authentication middleware - attach credentials to outgoing requests.

Backends:
    bearer: Static token, sent as ``Authorization: Bearer <token>``.
    basic: Username/password, sent as ``Authorization: Basic <base64>``.

The Authorization value is computed once, when the pipeline is assembled.
A request that already carries an Authorization header keeps it.

Config:
    bearer: Token string, or ``{"token": "..."}``.
    basic: ``{"username": "...", "password": "..."}``.

Exactly one backend must be configured.

Example::

    class Api(Client):
        middleware = [("auth", {"bearer": "sk_live_abc123"})]
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["AuthMiddleware"]


class AuthMiddleware(BaseMiddleware):
    """Set the Authorization header from configured credentials."""

    middleware_name = "auth"

    __slots__ = ()

    def init(self, opts: Any) -> str:
        """Return the Authorization header value.

        Raises:
            ConfigurationError: If no backend or more than one is configured,
                or a backend is missing a required value.
        """
        if not isinstance(opts, Mapping) or len(opts) != 1:
            raise ConfigurationError(
                f"auth middleware needs exactly one of 'bearer' or 'basic', got {opts!r}"
            )
        ((auth_type, credentials),) = opts.items()
        method = getattr(self, f"_configure_{auth_type}", None)
        if method is None:
            raise ConfigurationError(f"Unknown auth backend '{auth_type}'")
        value: str = method(credentials=credentials)
        return value

    def _configure_bearer(self, *, credentials: Any) -> str:
        token = credentials.get("token") if isinstance(credentials, Mapping) else credentials
        if not token or not isinstance(token, str):
            raise ConfigurationError("Bearer auth missing 'token' value")
        return f"Bearer {token}"

    def _configure_basic(self, *, credentials: Any) -> str:
        if not isinstance(credentials, Mapping):
            raise ConfigurationError("Basic auth needs {'username': ..., 'password': ...}")
        username = credentials.get("username")
        password = credentials.get("password")
        if not username or password is None:
            raise ConfigurationError("Basic auth missing 'username' or 'password' value")
        encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        return f"Basic {encoded}"

    def call(self, conn: Conn, call_next: CallNext, opts: str) -> StepResult:
        if "authorization" not in conn.req_headers:
            conn = conn.put_req_header("authorization", opts)
        return call_next(conn)
