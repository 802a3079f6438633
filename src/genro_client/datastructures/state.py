# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Per-request private state for middleware.

Purpose
=======
Middleware sometimes needs to hand data to a later stage of the same
pipeline run (a start timestamp, a deadline, a trace id) without touching
request or response fields. ``Conn.state`` holds that data.

Like the rest of a ``Conn``, ``State`` is never changed in place: ``set``
returns a new instance. Reads support both ``state["key"]`` and
``state.key`` syntax.

Example::

    from genro_client.datastructures import State

    state = State().set("started_at", 12.5)
    state.started_at           # 12.5
    state.get("missing", 0)    # 0
    "started_at" in state      # True

Design Notes
============
- Uses ``__slots__`` and ``object.__setattr__`` in ``__init__`` to keep
  attribute assignment disabled
- Missing attributes raise ``AttributeError`` (not ``KeyError``)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

__all__ = ["State"]


class State:
    """
    Immutable string-keyed state container with attribute access.

    Example:
        >>> state = State({"user_id": 123})
        >>> state.user_id
        123
        >>> state.set("user_id", 7).user_id
        7
        >>> state.user_id
        123
    """

    __slots__ = ("_state",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        """
        Initialize State container.

        Args:
            data: Initial entries (copied).
        """
        object.__setattr__(self, "_state", dict(data or {}))

    def set(self, name: str, value: Any) -> State:
        """Return a new State with ``name`` bound to ``value``."""
        data = dict(self._state)
        data[name] = value
        return State(data)

    def update(self, data: Mapping[str, Any]) -> State:
        """Return a new State with every entry of ``data`` applied."""
        merged = dict(self._state)
        merged.update(data)
        return State(merged)

    def delete(self, name: str) -> State:
        """Return a new State without ``name``. Missing names are ignored."""
        if name not in self._state:
            return self
        data = dict(self._state)
        del data[name]
        return State(data)

    def get(self, name: str, default: Any = None) -> Any:
        return self._state.get(name, default)

    def as_dict(self) -> dict[str, Any]:
        """Return a plain dict copy."""
        return dict(self._state)

    def __getattr__(self, name: str) -> Any:
        """
        Get a state attribute.

        Raises:
            AttributeError: If attribute does not exist.
        """
        if name == "_state":
            raise AttributeError(name)
        try:
            return self._state[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("State is immutable, use State.set()")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("State is immutable, use State.delete()")

    def __getitem__(self, name: str) -> Any:
        return self._state[name]

    def __contains__(self, name: object) -> bool:
        """Check if attribute exists in state."""
        if not isinstance(name, str):
            return False
        return name in self._state

    def __iter__(self) -> Iterator[str]:
        return iter(self._state)

    def __len__(self) -> int:
        return len(self._state)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            return self._state == other._state
        if isinstance(other, Mapping):
            return self._state == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"State({self._state!r})"
