# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Values returned by pipeline stages and by safe-form verbs.

Inside the pipeline nothing is raised: a stage reports failure by returning
an ``ErrorResult`` instead of a ``Conn``. Two concrete shapes exist, with the
same structure and the same treatment by the core:

- ``MiddlewareError`` - a middleware short-circuited the chain.
- ``TransportError`` - the adapter could not complete the exchange.

Both carry an optional ``conn``: a bare failure has none, a failure with
context carries the ``Conn`` as of the abort.

At the client boundary the final value is wrapped into a tagged result::

    Conn         →  Ok(conn)
    ErrorResult  →  Failure(reason, conn)

``Ok`` and ``Failure`` unpack like two and three element tuples so callers
can match on them::

    match client.get("/users"):
        case Ok(conn):
            ...
        case Failure(reason, conn):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Union

from .exceptions import RequestError

if TYPE_CHECKING:
    from .conn import Conn

__all__ = [
    "ErrorResult",
    "MiddlewareError",
    "TransportError",
    "Ok",
    "Failure",
    "Result",
    "StepResult",
    "is_error",
]


@dataclass(frozen=True)
class ErrorResult:
    """Failure returned (not raised) by a middleware or an adapter.

    Attributes:
        reason: Why the stage failed. Any value; strings and exceptions are usual.
        conn: The context as of the failure, or None for a bare failure.
    """

    reason: Any
    conn: Conn | None = None

    @property
    def is_bare(self) -> bool:
        return self.conn is None


@dataclass(frozen=True)
class MiddlewareError(ErrorResult):
    """A middleware short-circuited the chain."""


@dataclass(frozen=True)
class TransportError(ErrorResult):
    """The adapter failed to perform the exchange."""


@dataclass(frozen=True)
class Ok:
    """Successful outcome of a safe-form verb."""

    conn: Conn

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def status(self) -> int | None:
        return self.conn.status

    def unwrap(self) -> Conn:
        return self.conn

    def __iter__(self) -> Iterator[Any]:
        return iter(("ok", self.conn))


@dataclass(frozen=True)
class Failure:
    """Failed outcome of a safe-form verb.

    Attributes:
        reason: The reason given by the failing stage.
        conn: The context as of the failure. For a bare failure this is the
            context that was dispatched.
        error: The ``ErrorResult`` the chain returned.
    """

    reason: Any
    conn: Conn | None
    error: ErrorResult | None = None

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Conn:
        """Raise ``RequestError`` carrying reason and context."""
        raise RequestError(self.reason, self.conn)

    def __iter__(self) -> Iterator[Any]:
        return iter(("error", self.reason, self.conn))


StepResult = Union["Conn", ErrorResult]
Result = Union[Ok, Failure]


def is_error(value: object) -> bool:
    """True when ``value`` is one of the two ``ErrorResult`` shapes."""
    return isinstance(value, ErrorResult)
