# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Pipeline compiler - fold middleware and an adapter into one callable.

Composition::

    middleware = [m1, m2, m3], adapter = A

    chain(conn) = m1.call(conn, λc1. m2.call(c1, λc2. m3.call(c2, λc3. A.call(c3))))

The fold runs over the middleware in reverse registration order, so the
first-registered middleware is outermost (sees the raw request first and the
response last) and the last-registered one sits next to the adapter.

Short-circuit rule:
    Every continuation returns an ``ErrorResult`` argument untouched, so once
    any stage produces an error no later stage runs, whether the error was
    returned directly or passed forward by a sloppy middleware.

Assembly happens once per client, before any request is sent; the compiled
chain closes over immutable entries only and can be called from any number
of threads at once.

Declarations accepted by ``resolve_middleware``::

    LoggingMiddleware                   class, no options
    LoggingMiddleware()                 instance, no options
    "logging"                           registry name, no options
    ("base_url", "http://api.test")     (class | instance | name, raw options)
    {"base_url": "http://api.test"}     single-key mapping (config files)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .adapters import BaseAdapter, default_adapter, get_adapter
from .conn import Conn
from .exceptions import ConfigurationError
from .middleware import BaseMiddleware, get_middleware
from .results import ErrorResult, Failure, Ok, Result, StepResult
from .utils import split_and_strip

__all__ = [
    "Chain",
    "MiddlewareEntry",
    "Pipeline",
    "compile_chain",
    "interpret",
    "parse_middleware_config",
    "resolve_adapter",
    "resolve_middleware",
]

logger = logging.getLogger("genro_client.pipeline")

Chain = Callable[[Conn], StepResult]


@dataclass(frozen=True)
class MiddlewareEntry:
    """A middleware paired with the options its ``init`` returned."""

    middleware: BaseMiddleware
    opts: Any = None

    @property
    def name(self) -> str:
        return self.middleware.middleware_name


def _instantiate_middleware(declaration: Any) -> BaseMiddleware:
    if isinstance(declaration, BaseMiddleware):
        return declaration
    if isinstance(declaration, str):
        declaration = get_middleware(declaration)
    if isinstance(declaration, type) and issubclass(declaration, BaseMiddleware):
        return declaration()
    raise ConfigurationError(f"Not a middleware: {declaration!r}")


def resolve_middleware(declaration: Any) -> MiddlewareEntry:
    """Turn one middleware declaration into an initialized entry.

    Raises:
        ConfigurationError: If the declaration is malformed or ``init``
            rejects the options.
    """
    raw_opts: Any = None
    if isinstance(declaration, MiddlewareEntry):
        return declaration
    if hasattr(declaration, "as_dict"):
        # SmartOptions
        declaration = declaration.as_dict()
    if isinstance(declaration, Mapping):
        if len(declaration) != 1:
            raise ConfigurationError(
                f"Middleware mapping must have exactly one key, got {dict(declaration)!r}"
            )
        ((declaration, raw_opts),) = declaration.items()
    elif isinstance(declaration, (tuple, list)):
        if len(declaration) != 2:
            raise ConfigurationError(
                f"Middleware declaration must be (middleware, options), got {declaration!r}"
            )
        declaration, raw_opts = declaration
    middleware = _instantiate_middleware(declaration)
    return MiddlewareEntry(middleware, middleware.init(raw_opts))


def parse_middleware_config(config: Any) -> list[Any]:
    """Normalize a middleware declaration list from code or config files.

    Accepts a comma-separated string of names, a sequence of declarations, or
    an ordered mapping ``{name: options}``. In a mapping, ``True`` means
    "enabled, no options" and ``False`` drops the entry.
    """
    if config is None:
        return []
    if hasattr(config, "as_dict"):
        config = config.as_dict()
    if isinstance(config, str):
        return [name for name in split_and_strip(config) if name]
    if isinstance(config, Mapping):
        declarations: list[Any] = []
        for name, value in config.items():
            if value is False:
                continue
            declarations.append(name if value is True or value is None else (name, value))
        return declarations
    if isinstance(config, Iterable):
        return list(config)
    raise ConfigurationError(f"Invalid middleware configuration: {config!r}")


def resolve_adapter(declaration: Any = None) -> BaseAdapter:
    """Return an adapter instance for a class, instance, registry name or None.

    None selects the shared default adapter.

    Raises:
        ConfigurationError: If the declaration is not an adapter.
    """
    if declaration is None:
        return default_adapter()
    if isinstance(declaration, BaseAdapter):
        return declaration
    if isinstance(declaration, str):
        declaration = get_adapter(declaration)
    if isinstance(declaration, type) and issubclass(declaration, BaseAdapter):
        return declaration()
    raise ConfigurationError(f"Adapter must be a BaseAdapter, got {declaration!r}")


def compile_chain(entries: Sequence[MiddlewareEntry], adapter: BaseAdapter) -> Chain:
    """Fold ``entries`` and ``adapter`` into a single callable."""

    def call_adapter(conn: StepResult) -> StepResult:
        if isinstance(conn, ErrorResult):
            return conn
        return adapter.call(conn)

    chain: Chain = call_adapter  # type: ignore[assignment]
    for entry in reversed(entries):
        chain = _wrap(entry, chain)
    return chain


def _wrap(entry: MiddlewareEntry, call_next: Chain) -> Chain:
    middleware, opts = entry.middleware, entry.opts

    def call_middleware(conn: StepResult) -> StepResult:
        if isinstance(conn, ErrorResult):
            return conn
        return middleware.call(conn, call_next, opts)

    return call_middleware  # type: ignore[return-value]


def interpret(result: Any, conn: Conn) -> Result:
    """Wrap the chain's return value into ``Ok`` or ``Failure``.

    Args:
        result: Whatever the compiled chain returned.
        conn: The context that was dispatched, attached to bare failures.

    Raises:
        TypeError: If a stage returned neither a ``Conn`` nor an ``ErrorResult``.
    """
    if isinstance(result, Conn):
        return Ok(result)
    if isinstance(result, ErrorResult):
        failed_conn = conn if result.conn is None else result.conn
        return Failure(result.reason, failed_conn, result)
    raise TypeError(
        f"Pipeline returned {type(result).__name__}, expected Conn or ErrorResult"
    )


class Pipeline:
    """Compiled middleware chain plus the adapter that terminates it.

    Example:
        >>> pipeline = Pipeline([("base_url", "http://api.test"), "json"], "httpx")
        >>> pipeline.names
        ('base_url', 'json', 'httpx')
        >>> pipeline.run(Conn.new("/ping").put_method("GET"))
        Ok(conn=Conn(url='http://api.test/ping', ...))
    """

    __slots__ = ("entries", "adapter", "chain")

    def __init__(self, middleware: Any = (), adapter: Any = None) -> None:
        """Resolve declarations, run every ``init`` and compile the chain.

        Raises:
            ConfigurationError: If any declaration or option is invalid.
        """
        self.entries: tuple[MiddlewareEntry, ...] = tuple(
            resolve_middleware(declaration)
            for declaration in parse_middleware_config(middleware)
        )
        self.adapter: BaseAdapter = resolve_adapter(adapter)
        self.chain: Chain = compile_chain(self.entries, self.adapter)
        logger.debug("Assembled pipeline: %s", " -> ".join(self.names))

    @property
    def names(self) -> tuple[str, ...]:
        return (*(entry.name for entry in self.entries), self.adapter.adapter_name)

    def __call__(self, conn: Conn) -> StepResult:
        return self.chain(conn)

    def run(self, conn: Conn) -> Result:
        """Run the chain on ``conn`` and interpret the outcome."""
        return interpret(self.chain(conn), conn)

    def __repr__(self) -> str:
        return f"Pipeline({' -> '.join(self.names)})"
