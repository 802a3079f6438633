# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Immutable query parameters with multi-value support.

Purpose
=======
Query parameters are case-sensitive (unlike headers). A ``Conn`` keeps them
apart from the URL so middleware can add defaults without string surgery;
the adapter merges them into the URL at send time (see ``append_query``).

Input Forms::

    QueryParams({"page": 1, "tags": ["a", "b"]})
    QueryParams([("page", "1"), ("tags", "a")])
    QueryParams("page=1&tags=a&tags=b")       # parsed with parse_qsl

Encoding Schema::

    {"name": "john", "tags": ("python", "web")}
                        ↓
            urllib.parse.urlencode(doseq=True)
                        ↓
    "name=john&tags=python&tags=web"

Differences from Headers::

    +-----------------+------------------+------------------+
    | Aspect          | Headers          | QueryParams      |
    +-----------------+------------------+------------------+
    | Case            | Case-insensitive | Case-sensitive   |
    | Empty values    | N/A              | Supported (?k=)  |
    | URL encoding    | No               | Yes (encode())   |
    +-----------------+------------------+------------------+

Design Notes
============
- Uses ``__slots__`` for memory efficiency
- Immutable: ``merge`` and ``setdefaults`` return new instances
- Empty values are preserved (``?key=`` → ``""``  not ``None``)
- ``__bool__`` returns False for empty params
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Iterator, Union
from urllib.parse import parse_qsl, urlencode

from ..exceptions import ConfigurationError

__all__ = ["QueryParams", "ParamValue", "QueryInput"]

ParamValue = Union[str, tuple[str, ...]]
QueryInput = Union["QueryParams", Mapping[str, Any], Iterable[tuple[str, Any]], str, None]


def _normalize_value(key: str, value: Any) -> ParamValue:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return tuple(_normalize_value(key, item) for item in value)  # type: ignore[misc]
    raise ConfigurationError(f"Invalid value for query parameter '{key}': {value!r}")


def _iter_input(params: QueryInput) -> Iterator[tuple[Any, Any]]:
    if params is None:
        return iter(())
    if isinstance(params, str):
        return iter(parse_qsl(params.lstrip("?"), keep_blank_values=True))
    if isinstance(params, QueryParams):
        return iter(params.items())
    if isinstance(params, Mapping):
        return iter(params.items())
    return iter(params)


def _collect(params: QueryInput, into: dict[str, ParamValue], overwrite: bool = True) -> None:
    from_string = isinstance(params, str)
    seen: set[str] = set()
    for key, value in _iter_input(params):
        if not isinstance(key, str):
            raise ConfigurationError(f"Query parameter name must be a string, got {key!r}")
        normalized = _normalize_value(key, value)
        if from_string and key in seen:
            # repeated key in a raw query string accumulates
            previous = into[key]
            previous = previous if isinstance(previous, tuple) else (previous,)
            into[key] = previous + (normalized,)  # type: ignore[operator]
            continue
        if overwrite or key not in into:
            into[key] = normalized
            seen.add(key)


class QueryParams:
    """
    Immutable, ordered query parameters.

    Example:
        >>> params = QueryParams({"name": "john", "tags": ["python", "web"]})
        >>> params.get("name")
        'john'
        >>> params.getlist("tags")
        ['python', 'web']
        >>> params.encode()
        'name=john&tags=python&tags=web'
    """

    __slots__ = ("_params",)

    def __init__(self, params: QueryInput = None) -> None:
        """
        Initialize QueryParams.

        Args:
            params: Mapping, iterable of pairs, or raw query string.

        Raises:
            ConfigurationError: If a name is not a string or a value is invalid.
        """
        data: dict[str, ParamValue] = {}
        _collect(params, data)
        self._params = data

    @classmethod
    def _from_dict(cls, data: dict[str, ParamValue]) -> QueryParams:
        instance = cls.__new__(cls)
        instance._params = data
        return instance

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get the first value for a parameter, or default if not found."""
        value = self._params.get(key)
        if value is None:
            return default
        if isinstance(value, tuple):
            return value[0] if value else default
        return value

    def getlist(self, key: str) -> list[str]:
        """Get all values for a parameter, empty list if not found."""
        value = self._params.get(key)
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return [value]

    def merge(self, params: QueryInput) -> QueryParams:
        """Return new QueryParams with ``params`` written over self."""
        data = dict(self._params)
        _collect(params, data)
        return self._from_dict(data)

    def setdefaults(self, params: QueryInput) -> QueryParams:
        """Return new QueryParams adding entries of ``params`` not already present."""
        data = dict(self._params)
        _collect(params, data, overwrite=False)
        return self._from_dict(data)

    def encode(self) -> str:
        """Return the urlencoded query string (without leading '?')."""
        return urlencode(list(self._params.items()), doseq=True)

    def keys(self) -> list[str]:
        """Return parameter names in insertion order."""
        return list(self._params)

    def items(self) -> list[tuple[str, ParamValue]]:
        """Return (name, value) pairs in insertion order."""
        return list(self._params.items())

    def multi_items(self) -> list[tuple[str, str]]:
        """
        Return all (name, value) pairs, one per value.

        Example:
            >>> QueryParams({"a": ["1", "2"], "b": "3"}).multi_items()
            [('a', '1'), ('a', '2'), ('b', '3')]
        """
        result: list[tuple[str, str]] = []
        for key, value in self._params.items():
            if isinstance(value, tuple):
                result.extend((key, item) for item in value)
            else:
                result.append((key, value))
        return result

    def as_dict(self) -> dict[str, ParamValue]:
        """Return a plain dict copy."""
        return dict(self._params)

    def __getitem__(self, key: str) -> str:
        """
        Get parameter value by name, raising KeyError if not found.

        Raises:
            KeyError: If parameter is not present.
        """
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        """Check if parameter exists (case-sensitive)."""
        if not isinstance(key, str):
            return False
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        """Iterate over parameter names."""
        return iter(self._params)

    def __len__(self) -> int:
        """Return number of unique parameters."""
        return len(self._params)

    def __bool__(self) -> bool:
        """Return True if there are any parameters."""
        return bool(self._params)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._params == other._params
        if isinstance(other, Mapping):
            try:
                return self._params == QueryParams(other)._params
            except ConfigurationError:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._params.items()))

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"QueryParams({self._params!r})"
