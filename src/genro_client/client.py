# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Client base class - per-verb entry points over a compiled pipeline.

Declare a client by subclassing ``Client``; the pipeline is assembled once,
when the class is created::

    from genro_client import Client

    class GitHub(Client):
        adapter = "httpx"
        methods = "get, post"
        middleware = [
            ("base_url", "https://api.github.com"),
            ("headers", {"accept": "application/vnd.github+json"}),
            "json",
        ]

    result = GitHub.get("/users/octocat")          # Ok(conn) | Failure(reason, conn)
    conn = GitHub.get_strict("/users/octocat")     # Conn, or raises
    conn = GitHub.get_strict("/maybe", statuses=[200, 404])

Verbs
=====
Each verb has a safe form and a strict form:

    +---------------------------+-------------------------------------------+
    | Safe form                 | Returns ``Ok(conn)`` or ``Failure``       |
    | ``get(url_or_conn, headers)``                                          |
    | ``post(url_or_conn, headers, body)``                                   |
    +---------------------------+-------------------------------------------+
    | Strict form               | Returns the conn; raises ``RequestError`` |
    | ``get_strict(...)``       | on failure, ``StatusMismatchError`` when  |
    | ``post_strict(...)``      | the status is not accepted                |
    +---------------------------+-------------------------------------------+

Body-less verbs (GET, HEAD, DELETE, TRACE, OPTIONS) reject a request body
with ``ConfigurationError`` before any middleware runs.

Verbs left out of ``methods`` are not attributes of the client class.
Verbs work on the class and on instances alike.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from .conn import Conn
from .exceptions import ConfigurationError, RequestError, StatusMismatchError
from .methods import HTTP_METHODS, Method, method_allowed, serialize_http_methods
from .pipeline import Pipeline
from .results import Failure, Ok, Result

if TYPE_CHECKING:
    from .datastructures.headers import HeadersInput

__all__ = ["Client", "build_conn", "ensure_success", "default_client"]

logger = logging.getLogger("genro_client.client")


def build_conn(
    method: str | Method,
    url_or_conn: str | Conn | None = None,
    headers: HeadersInput = None,
    body: Any = None,
) -> Conn:
    """Build the context a verb entry point dispatches.

    Args:
        method: HTTP method; overwrites the method of an existing conn.
        url_or_conn: URL string, existing ``Conn``, or None for an empty conn.
        headers: Request headers merged over the conn's own.
        body: Request body; only accepted by POST, PUT and PATCH.

    Raises:
        ConfigurationError: On a malformed argument, or a body on a body-less verb.
    """
    method = Method.parse(method)
    if url_or_conn is None:
        conn = Conn()
    elif isinstance(url_or_conn, str):
        conn = Conn.new(url_or_conn)
    elif isinstance(url_or_conn, Conn):
        conn = url_or_conn
    else:
        raise ConfigurationError(f"Expected a URL string or a Conn, got {url_or_conn!r}")

    if headers is not None:
        if not isinstance(headers, Mapping):
            raise ConfigurationError(f"Headers must be a mapping, got {headers!r}")
        conn = conn.put_req_headers(headers)
    if body is not None:
        if not method.allows_body:
            raise ConfigurationError(f"{method.verb} does not accept a body")
        conn = conn.put_req_body(body)
    if not method.allows_body and conn.has_body:
        raise ConfigurationError(f"{method.verb} should not contain a body")
    return conn.put_method(method)


def status_accepted(status: int | None, statuses: Collection[int] | None = None) -> bool:
    """True if ``status`` is in ``statuses``, or in 200..299 when None."""
    if status is None:
        return False
    if statuses is None:
        return 200 <= status <= 299
    return status in statuses


def ensure_success(
    result: Result,
    statuses: Collection[int] | None = None,
    source: str = "",
) -> Conn:
    """Convert a tagged result into a conn, raising on anything else.

    Raises:
        RequestError: If ``result`` is a ``Failure``.
        StatusMismatchError: If the status is not accepted.
    """
    if isinstance(result, Failure):
        raise RequestError(result.reason, result.conn, source)
    if not isinstance(result, Ok):
        raise TypeError(f"Expected Ok or Failure, got {type(result).__name__}")
    if isinstance(statuses, (str, bytes)):
        raise ConfigurationError(f"statuses must be a collection of integers, got {statuses!r}")
    if not status_accepted(result.conn.status, statuses):
        raise StatusMismatchError(result.conn, statuses, source)
    return result.conn


class _Verb:
    """Descriptor exposing one verb entry point, safe or strict."""

    __slots__ = ("method", "strict", "name")

    def __init__(self, method: Method, strict: bool = False) -> None:
        self.method = method
        self.strict = strict
        self.name = f"{method.verb}_strict" if strict else method.verb

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type[Client]) -> Callable[..., Any]:
        if self.method not in owner.allowed_methods:
            raise AttributeError(f"{owner.__name__} does not expose '{self.name}'")
        method = self.method
        if method.allows_body:
            if self.strict:

                def strict_with_body(
                    url_or_conn: str | Conn | None = None,
                    headers: HeadersInput = None,
                    body: Any = None,
                    *,
                    statuses: Collection[int] | None = None,
                ) -> Conn:
                    return owner.request_strict(
                        method, url_or_conn, headers, body, statuses=statuses
                    )

                verb = strict_with_body
            else:

                def safe_with_body(
                    url_or_conn: str | Conn | None = None,
                    headers: HeadersInput = None,
                    body: Any = None,
                ) -> Result:
                    return owner.request(method, url_or_conn, headers, body)

                verb = safe_with_body  # type: ignore[assignment]
        elif self.strict:

            def strict_bodyless(
                url_or_conn: str | Conn | None = None,
                headers: HeadersInput = None,
                *,
                statuses: Collection[int] | None = None,
            ) -> Conn:
                return owner.request_strict(method, url_or_conn, headers, statuses=statuses)

            verb = strict_bodyless  # type: ignore[assignment]
        else:

            def safe_bodyless(
                url_or_conn: str | Conn | None = None,
                headers: HeadersInput = None,
            ) -> Result:
                return owner.request(method, url_or_conn, headers)

            verb = safe_bodyless  # type: ignore[assignment]

        verb.__name__ = self.name
        verb.__qualname__ = f"{owner.__name__}.{self.name}"
        return verb


class Client:
    """Base class for HTTP client declarations.

    Class attributes (declared by subclasses):
        adapter: Adapter class, instance or registry name. None selects the
            configured default adapter.
        middleware: Ordered middleware declarations (see ``genro_client.pipeline``).
        methods: Exposed verbs as a comma-separated string or a list. None
            exposes all eight.

    Set at class creation:
        pipeline: The compiled ``Pipeline``.
        allowed_methods: Tuple of exposed ``Method`` members.

    Raises:
        ConfigurationError: At class creation, for any invalid declaration.
    """

    adapter: ClassVar[Any] = None
    middleware: ClassVar[Any] = ()
    methods: ClassVar[Any] = None

    pipeline: ClassVar[Pipeline | None] = None
    allowed_methods: ClassVar[tuple[Method, ...]] = HTTP_METHODS

    get = _Verb(Method.GET)
    head = _Verb(Method.HEAD)
    delete = _Verb(Method.DELETE)
    trace = _Verb(Method.TRACE)
    options = _Verb(Method.OPTIONS)
    post = _Verb(Method.POST)
    put = _Verb(Method.PUT)
    patch = _Verb(Method.PATCH)

    get_strict = _Verb(Method.GET, strict=True)
    head_strict = _Verb(Method.HEAD, strict=True)
    delete_strict = _Verb(Method.DELETE, strict=True)
    trace_strict = _Verb(Method.TRACE, strict=True)
    options_strict = _Verb(Method.OPTIONS, strict=True)
    post_strict = _Verb(Method.POST, strict=True)
    put_strict = _Verb(Method.PUT, strict=True)
    patch_strict = _Verb(Method.PATCH, strict=True)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.allowed_methods = serialize_http_methods(cls.methods)
        cls.pipeline = Pipeline(cls.middleware, cls.adapter)

    @classmethod
    def request(
        cls,
        method: str | Method,
        url_or_conn: str | Conn | None = None,
        headers: HeadersInput = None,
        body: Any = None,
    ) -> Result:
        """Dispatch one request through the pipeline (safe form).

        Returns:
            ``Ok(conn)`` or ``Failure(reason, conn)``.

        Raises:
            ConfigurationError: If the verb is not exposed or the request is
                malformed. The pipeline is not invoked.
        """
        if cls.pipeline is None:
            raise ConfigurationError("Client must be subclassed before sending requests")
        method_allowed(method, cls.allowed_methods)
        conn = build_conn(method, url_or_conn, headers, body)
        logger.debug("%s dispatching %s %s", cls.__name__, conn.method.value, conn.url)  # type: ignore[union-attr]
        return cls.pipeline.run(conn)

    @classmethod
    def request_strict(
        cls,
        method: str | Method,
        url_or_conn: str | Conn | None = None,
        headers: HeadersInput = None,
        body: Any = None,
        *,
        statuses: Collection[int] | None = None,
    ) -> Conn:
        """Dispatch one request and return the conn, raising on failure.

        Raises:
            RequestError: If the pipeline returned a failure.
            StatusMismatchError: If the status is outside ``statuses``
                (default 200..299).
        """
        result = cls.request(method, url_or_conn, headers, body)
        return ensure_success(result, statuses, cls.__name__)

    @classmethod
    def from_config(cls, name: str, options: Any) -> type[Client]:
        """Create a ``Client`` subclass named ``name`` from a config mapping.

        Args:
            name: Class name for the new client.
            options: Mapping (or SmartOptions) with optional keys ``adapter``,
                ``middleware`` and ``methods``.
        """
        if hasattr(options, "as_dict"):
            options = options.as_dict()
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Client '{name}' configuration must be a mapping")
        unknown = set(options) - {"adapter", "middleware", "methods"}
        if unknown:
            raise ConfigurationError(f"Unknown options for client '{name}': {sorted(unknown)}")
        namespace = {
            "adapter": options.get("adapter"),
            "middleware": options.get("middleware") or (),
            "methods": options.get("methods"),
        }
        return type(name, (cls,), namespace)


_default_client: type[Client] | None = None
_default_client_lock = threading.Lock()


def default_client() -> type[Client]:
    """Return the client behind the module-level verbs.

    No middleware, every verb, and the configured default adapter. Built on
    first use.
    """
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            _default_client = type("DefaultClient", (Client,), {})
        return _default_client


def reset_default_client() -> None:
    global _default_client
    with _default_client_lock:
        _default_client = None
