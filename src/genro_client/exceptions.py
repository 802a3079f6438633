# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for genro-client.

Only two situations raise in genro-client: a caller or module author got the
configuration wrong, or a strict-form verb (``get_strict`` and friends)
converts a failed request into an exception at the boundary. Everything that
happens inside the pipeline is reported as a returned value (see
``genro_client.results``), never raised.

Module Structure
----------------
::

    GenroClientError
    ├── ConfigurationError   (also a ValueError)
    └── RequestError
        └── StatusMismatchError

ConfigurationError
------------------
Invalid middleware options, an unknown HTTP method name, a non-string header
name, or a request body given to a body-less verb. Detected at assembly or
call-construction time, never at network time.

Example:
    >>> client.get(Conn("/x", req_body=b"data"))
    Traceback (most recent call last):
        ...
    ConfigurationError: get should not contain a body

RequestError
------------
Raised by strict-form verbs when the pipeline produced a failure result.
Carries the failure ``reason`` and the ``conn`` as of the failure.

StatusMismatchError
-------------------
Raised by strict-form verbs when the request structurally succeeded but the
response status is not accepted (default 200-299, or an explicit list).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .conn import Conn

__all__ = [
    "GenroClientError",
    "ConfigurationError",
    "RequestError",
    "StatusMismatchError",
    "STATUS_NOT_MATCH",
]

STATUS_NOT_MATCH = "response_status_not_match"


class GenroClientError(Exception):
    """Base class for all genro-client exceptions."""


class ConfigurationError(GenroClientError, ValueError):
    """
    Invalid configuration detected before any request reaches the network.

    Example:
        >>> raise ConfigurationError("HTTP method 'fetch' not allowed")
    """


class RequestError(GenroClientError):
    """
    A request failed and the caller asked for an exception.

    Attributes:
        reason: Failure reason as returned by the middleware or adapter.
        conn: The context as of the failure (may be None for bare failures).
        source: Name of the client class that dispatched the request.
    """

    def __init__(self, reason: Any, conn: Conn | None = None, source: str = "") -> None:
        """
        Initialize request error.

        Args:
            reason: Failure reason (any value, usually a string or exception).
            conn: Context as of the failure.
            source: Name of the dispatching client (default: "").
        """
        self.reason = reason
        self.conn = conn
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{reason}")

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{type(self).__name__}(reason={self.reason!r}, source={self.source!r})"


class StatusMismatchError(RequestError):
    """
    The response status is outside the accepted set.

    Example:
        >>> try:
        ...     client.get_strict("/missing")
        ... except StatusMismatchError as e:
        ...     print(e.status)
        404
    """

    def __init__(
        self,
        conn: Conn,
        statuses: Iterable[int] | None = None,
        source: str = "",
    ) -> None:
        """
        Initialize status mismatch error.

        Args:
            conn: The successful context whose status was not accepted.
            statuses: The accepted statuses, or None for the default 2xx range.
            source: Name of the dispatching client (default: "").
        """
        self.status: int | None = conn.status
        self.statuses: tuple[int, ...] | None = tuple(statuses) if statuses is not None else None
        super().__init__(STATUS_NOT_MATCH, conn, source)

    def __str__(self) -> str:
        accepted = "200..299" if self.statuses is None else ", ".join(map(str, self.statuses))
        prefix = f"{self.source}: " if self.source else ""
        return f"{prefix}{STATUS_NOT_MATCH} (status {self.status}, accepted {accepted})"
