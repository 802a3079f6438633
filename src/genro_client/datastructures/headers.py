# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Case-insensitive, immutable HTTP headers for request and response contexts.

Purpose
=======
HTTP header names are case-insensitive per RFC 7230. A ``Conn`` carries two
header collections (request and response); both are ``Headers`` instances.
Since a context is never mutated in place, ``Headers`` has no mutation
methods: ``set``, ``merge`` and ``delete`` return new instances.

Processing Schema::

    Input (any case):
    {"Content-Type": "application/json", "X-Custom": "value"}
                        ↓
                Normalization
                        ↓
    Internal storage (ordered dict, lowercase names):
    {"content-type": "application/json", "x-custom": "value"}
                        ↓
    headers.get("CONTENT-TYPE") → "application/json"

Write Semantics::

    Headers().set("X", "a").set("x", "b")  →  Headers({"x": "b"})

    Last write wins, keys stay unique, insertion order of the first write
    is kept.

Values
======
A value is either a string or a tuple of strings (for headers sent more than
once, e.g. ``Accept`` or ``Set-Cookie``). ``get`` returns the first value,
``getlist`` returns all of them, ``multi_items`` flattens the collection into
``(name, value)`` pairs for the transport.

Example::

    from genro_client.datastructures import Headers

    headers = Headers({"Accept": "text/html"})
    headers = headers.set("User-Agent", "genro-client")
    headers.get("accept")           # "text/html"
    headers.merge({"ACCEPT": ["a", "b"]}).getlist("accept")  # ["a", "b"]

Design Notes
============
- Uses ``__slots__`` for memory efficiency
- Non-string header names raise ``ConfigurationError`` at write time
- Values are stored as given (strings), numbers are converted with ``str``
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Iterator, Union

from ..exceptions import ConfigurationError

__all__ = ["Headers", "HeaderValue", "HeadersInput"]

HeaderValue = Union[str, tuple[str, ...]]
HeadersInput = Union["Headers", Mapping[str, Any], Iterable[tuple[str, Any]], None]


def _normalize_name(name: object) -> str:
    if not isinstance(name, str):
        raise ConfigurationError(f"Header name must be a string, got {name!r}")
    if not name:
        raise ConfigurationError("Header name must not be empty")
    return name.lower()


def _normalize_value(name: str, value: Any) -> HeaderValue:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, (list, tuple)):
        return tuple(_normalize_value(name, item) for item in value)  # type: ignore[misc]
    raise ConfigurationError(f"Invalid value for header '{name}': {value!r}")


def _iter_input(headers: HeadersInput) -> Iterator[tuple[Any, Any]]:
    if headers is None:
        return iter(())
    if isinstance(headers, Headers):
        return iter(headers.items())
    if isinstance(headers, Mapping):
        return iter(headers.items())
    if isinstance(headers, (str, bytes)):
        raise ConfigurationError(f"Headers must be a mapping, got {headers!r}")
    return iter(headers)


class Headers:
    """
    Immutable, ordered, case-insensitive HTTP header collection.

    Example:
        >>> headers = Headers({"Content-Type": "application/json"})
        >>> headers.get("content-type")
        'application/json'
        >>> headers["CONTENT-TYPE"]
        'application/json'
        >>> "content-type" in headers
        True
        >>> headers.set("content-type", "text/plain").get("Content-Type")
        'text/plain'
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: HeadersInput = None) -> None:
        """
        Initialize Headers from a mapping or an iterable of pairs.

        Args:
            headers: Mapping or iterable of (name, value) pairs. Names are
                     normalized to lowercase, a repeated name overwrites the
                     earlier value.

        Raises:
            ConfigurationError: If a name is not a string or a value is invalid.
        """
        data: dict[str, HeaderValue] = {}
        for name, value in _iter_input(headers):
            key = _normalize_name(name)
            data[key] = _normalize_value(key, value)
        self._headers = data

    @classmethod
    def _from_dict(cls, data: dict[str, HeaderValue]) -> Headers:
        instance = cls.__new__(cls)
        instance._headers = data
        return instance

    def get(self, key: str, default: str | None = None) -> str | None:
        """
        Get the first value for a header (case-insensitive).

        Args:
            key: Header name (case-insensitive).
            default: Value to return if header not found.

        Returns:
            The first value for the header, or default if not found.

        Raises:
            ConfigurationError: If ``key`` is not a non-empty string.
        """
        value = self._headers.get(_normalize_name(key))
        if value is None:
            return default
        if isinstance(value, tuple):
            return value[0] if value else default
        return value

    def getlist(self, key: str) -> list[str]:
        """Get all values for a header (case-insensitive)."""
        value = self._headers.get(_normalize_name(key))
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return [value]

    def set(self, name: str, value: Any) -> Headers:
        """Return new Headers with ``name`` set to ``value`` (last write wins)."""
        key = _normalize_name(name)
        data = dict(self._headers)
        data[key] = _normalize_value(key, value)
        return self._from_dict(data)

    def merge(self, headers: HeadersInput) -> Headers:
        """Return new Headers with every entry of ``headers`` written over self."""
        data = dict(self._headers)
        for name, value in _iter_input(headers):
            key = _normalize_name(name)
            data[key] = _normalize_value(key, value)
        return self._from_dict(data)

    def setdefaults(self, headers: HeadersInput) -> Headers:
        """Return new Headers adding entries of ``headers`` not already present."""
        data = dict(self._headers)
        for name, value in _iter_input(headers):
            key = _normalize_name(name)
            if key not in data:
                data[key] = _normalize_value(key, value)
        return self._from_dict(data)

    def delete(self, name: str) -> Headers:
        """Return new Headers without ``name``. Missing names are ignored."""
        key = _normalize_name(name)
        if key not in self._headers:
            return self
        data = dict(self._headers)
        del data[key]
        return self._from_dict(data)

    def keys(self) -> list[str]:
        """Return header names (lowercase) in insertion order."""
        return list(self._headers)

    def values(self) -> list[HeaderValue]:
        """Return header values in insertion order."""
        return list(self._headers.values())

    def items(self) -> list[tuple[str, HeaderValue]]:
        """Return (name, value) pairs in insertion order."""
        return list(self._headers.items())

    def multi_items(self) -> list[tuple[str, str]]:
        """
        Return one (name, value) pair per value.

        Example:
            >>> Headers({"Accept": ["a", "b"], "Host": "x"}).multi_items()
            [('accept', 'a'), ('accept', 'b'), ('host', 'x')]
        """
        result: list[tuple[str, str]] = []
        for name, value in self._headers.items():
            if isinstance(value, tuple):
                result.extend((name, item) for item in value)
            else:
                result.append((name, value))
        return result

    def as_dict(self) -> dict[str, HeaderValue]:
        """Return a plain dict copy."""
        return dict(self._headers)

    def __getitem__(self, key: str) -> str:
        """
        Get header value by name, raising KeyError if not found.

        Raises:
            KeyError: If header is not present.
        """
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        """Check if header exists (case-insensitive)."""
        if not isinstance(key, str):
            return False
        return key.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        """Iterate over header names."""
        return iter(self._headers)

    def __len__(self) -> int:
        """Return number of distinct header names."""
        return len(self._headers)

    def __bool__(self) -> bool:
        return bool(self._headers)

    def __eq__(self, other: object) -> bool:
        """Compare with another Headers or a mapping (case-insensitive names)."""
        if isinstance(other, Headers):
            return self._headers == other._headers
        if isinstance(other, Mapping):
            try:
                return self._headers == Headers(other)._headers
            except ConfigurationError:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._headers.items()))

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"Headers({self._headers!r})"
