# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Logging Middleware - outgoing request/response logging.

Logs each request before it goes down the chain and its outcome when it
comes back, with timing. Uses Python's standard logging module for output.
The middleware never changes the conn or the result.

Log format:
    Request:  "-> GET http://api.test/users"
    Response: "<- GET http://api.test/users 200 (12.5ms)"
    Failure:  "<- GET http://api.test/users ERROR: timeout (12.5ms)"

Config:
    logger_name (str): Logger name. Default: "genro_client.access".
    level (str): Log level (DEBUG, INFO, WARNING, ERROR). Default: "INFO".
    include_headers (bool): Log request headers at DEBUG level. Default: False.

Example:
    Declare in a client::

        class Api(Client):
            middleware = [("logging", {"level": "DEBUG", "include_headers": True})]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

from . import BaseMiddleware, CallNext
from ..exceptions import ConfigurationError
from ..results import ErrorResult
from ..utils import parse_bool

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

__all__ = ["LoggingMiddleware", "LoggingOptions"]

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingOptions(NamedTuple):
    logger: logging.Logger
    level: int
    include_headers: bool


class LoggingMiddleware(BaseMiddleware):
    """Access logging for outgoing requests.

    Failures returned by later stages are logged at ERROR level and passed
    back up unchanged.
    """

    middleware_name = "logging"

    __slots__ = ()

    def init(self, opts: Any) -> LoggingOptions:
        """Resolve logger and level once per pipeline.

        Raises:
            ConfigurationError: If options are not a mapping or the level is unknown.
        """
        if opts is None:
            opts = {}
        if not isinstance(opts, Mapping):
            raise ConfigurationError(f"logging middleware needs a mapping, got {opts!r}")
        level = str(opts.get("level", "INFO")).upper()
        if level not in _LEVELS:
            raise ConfigurationError(f"Invalid log level '{level}', expected one of {_LEVELS}")
        return LoggingOptions(
            logger=logging.getLogger(opts.get("logger_name", "genro_client.access")),
            level=getattr(logging, level),
            include_headers=parse_bool(opts.get("include_headers", False)),
        )

    def call(self, conn: Conn, call_next: CallNext, opts: LoggingOptions) -> StepResult:
        method = conn.method.value if conn.method else "?"
        request_info = f"{method} {conn.full_url}"
        opts.logger.log(opts.level, f"-> {request_info}")
        if opts.include_headers:
            opts.logger.debug(f"   Headers: {conn.req_headers.as_dict()}")

        start_time = time.perf_counter()
        result = call_next(conn)
        duration = (time.perf_counter() - start_time) * 1000

        if isinstance(result, ErrorResult):
            opts.logger.error(f"<- {request_info} ERROR: {result.reason} ({duration:.1f}ms)")
        else:
            opts.logger.log(opts.level, f"<- {request_info} {result.status} ({duration:.1f}ms)")
        return result
