# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Small helpers shared across genro-client modules."""

from __future__ import annotations

from typing import Any

__all__ = ["split_and_strip", "parse_bool"]


def split_and_strip(
    value: str | list[str] | None, default: list[str] | None = None
) -> list[str]:
    """Split comma-separated string and strip whitespace from each item.

    If value is already a list, returns a copy. If None, returns default.

    Examples:
        split_and_strip("a, b, c")  # ["a", "b", "c"]
        split_and_strip(["x", "y"])  # ["x", "y"]
        split_and_strip(None, ["default"])  # ["default"]
    """
    if value is None:
        return default if default is not None else []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",")]
    return list(value)


def parse_bool(value: Any) -> bool:
    """Parse on/off/true/false value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("on", "true", "yes", "1")
    return bool(value)
