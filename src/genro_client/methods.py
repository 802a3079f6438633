# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HTTP method table for genro-client.

A single table decides, for every verb, whether a request body is permitted.
Clients expose a subset of the verbs; ``serialize_http_methods`` normalizes
whatever the module author wrote (string, list of strings, list of
``Method``) into a tuple of ``Method`` members.

Example::

    serialize_http_methods("get, post")   # (Method.GET, Method.POST)
    serialize_http_methods(["PUT"])       # (Method.PUT,)
    serialize_http_methods(None)          # all eight methods
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .exceptions import ConfigurationError
from .utils import split_and_strip

__all__ = [
    "Method",
    "HTTP_METHODS",
    "BODYLESS_METHODS",
    "BODY_METHODS",
    "serialize_http_methods",
    "method_allowed",
]


class Method(str, Enum):
    """HTTP request methods understood by the pipeline."""

    GET = "GET"
    HEAD = "HEAD"
    DELETE = "DELETE"
    TRACE = "TRACE"
    OPTIONS = "OPTIONS"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def allows_body(self) -> bool:
        """True for verbs whose entry points accept a request body."""
        return self in BODY_METHODS

    @property
    def verb(self) -> str:
        """Lowercase verb name, as used for client attribute names."""
        return self.value.lower()

    @classmethod
    def parse(cls, value: str | Method) -> Method:
        """Return the member for ``value`` (case-insensitive).

        Raises:
            ConfigurationError: If ``value`` names no HTTP method.
        """
        if isinstance(value, Method):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Invalid HTTP method name ({value!r})! Expected one of {_names()}"
            )
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ConfigurationError(
                f"Invalid HTTP method name ({value}). Expected one of {_names()}"
            ) from None


HTTP_METHODS: tuple[Method, ...] = tuple(Method)
BODYLESS_METHODS: frozenset[Method] = frozenset(
    {Method.GET, Method.HEAD, Method.DELETE, Method.TRACE, Method.OPTIONS}
)
BODY_METHODS: frozenset[Method] = frozenset({Method.POST, Method.PUT, Method.PATCH})


def _names() -> list[str]:
    return [m.verb for m in HTTP_METHODS]


def serialize_http_methods(
    methods: str | Iterable[str | Method] | None,
    default: Iterable[Method] = HTTP_METHODS,
) -> tuple[Method, ...]:
    """Normalize a method declaration to a tuple of unique ``Method`` members.

    Args:
        methods: Comma-separated string, iterable of names or members, or None.
        default: Returned when ``methods`` is None or empty.

    Returns:
        Methods in declaration order, duplicates removed.

    Raises:
        ConfigurationError: If any name is not an HTTP method.
    """
    if isinstance(methods, str):
        names: list[str | Method] = [m for m in split_and_strip(methods) if m]
    elif methods is None:
        names = []
    else:
        names = list(methods)
    if not names:
        return tuple(default)
    result: list[Method] = []
    for name in names:
        method = Method.parse(name)
        if method not in result:
            result.append(method)
    return tuple(result)


def method_allowed(method: str | Method, allowed: Iterable[Method]) -> bool:
    """Ensure ``method`` is part of ``allowed``.

    Raises:
        ConfigurationError: If the method is unknown or not allowed.
    """
    allowed = tuple(allowed)
    if Method.parse(method) in allowed:
        return True
    raise ConfigurationError(
        f"HTTP method `{method}` not allowed, expected one of `{[m.verb for m in allowed]}`"
    )
