# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Adapters package - terminal transport stages for genro-client pipelines."""

from __future__ import annotations

import importlib
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

ADAPTER_REGISTRY: dict[str, type["BaseAdapter"]] = {}


class BaseAdapter(ABC):
    """Base class for all adapters. Subclasses auto-register via __init_subclass__.

    An adapter is always the last stage of a pipeline and never receives a
    continuation. It performs the transport I/O and returns either a conn
    with the response fields set or a ``TransportError`` carrying the conn
    as of the failure. Transport resources (connection pools, sockets)
    belong to the adapter instance.

    Class attributes:
        adapter_name: Registry key (default: class name).
    """

    adapter_name: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.__dict__.get("adapter_name") or cls.__name__
        if name in ADAPTER_REGISTRY:
            raise ValueError(f"Adapter name '{name}' already registered")
        cls.adapter_name = name
        ADAPTER_REGISTRY[name] = cls

    @abstractmethod
    def call(self, conn: Conn) -> StepResult: ...

    def close(self) -> None:
        """Release transport resources. Default: nothing to release."""

    def __enter__(self) -> BaseAdapter:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.adapter_name!r}>"


def get_adapter(name: str) -> type[BaseAdapter]:
    """Return the adapter class registered under ``name``.

    Raises:
        ConfigurationError: If no adapter has that name.
    """
    try:
        return ADAPTER_REGISTRY[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown adapter '{name}'. Registered: {sorted(ADAPTER_REGISTRY)}"
        ) from None


_default_adapters: dict[str, BaseAdapter] = {}
_default_lock = threading.Lock()


def default_adapter() -> BaseAdapter:
    """Return the shared instance of the configured default adapter.

    The adapter name comes from ``ClientSettings.adapter`` (``"httpx"`` unless
    configured otherwise). One instance per name is created and reused by
    every client that does not declare its own adapter. A configured
    ``timeout`` setting is passed to the adapter constructor.
    """
    from ..config import get_settings

    settings = get_settings()
    name = settings.adapter
    with _default_lock:
        adapter = _default_adapters.get(name)
        if adapter is None:
            adapter_cls = get_adapter(name)
            timeout = settings.timeout
            adapter = adapter_cls() if timeout is None else adapter_cls(timeout=timeout)
            _default_adapters[name] = adapter
        return adapter


def close_default_adapters() -> None:
    """Close and forget every shared default adapter."""
    with _default_lock:
        adapters = list(_default_adapters.values())
        _default_adapters.clear()
    for adapter in adapters:
        adapter.close()


def _autodiscover() -> None:
    """Import all adapter modules in this package to trigger registration."""
    package_dir = Path(__file__).parent
    for py_file in package_dir.glob("*.py"):
        if py_file.name.startswith("_"):
            continue
        importlib.import_module(f".{py_file.stem}", __package__)


_autodiscover()
globals().update({cls.__name__: cls for cls in ADAPTER_REGISTRY.values()})

__all__ = [
    "ADAPTER_REGISTRY",
    "BaseAdapter",
    "close_default_adapters",
    "default_adapter",
    "get_adapter",
    *(cls.__name__ for cls in ADAPTER_REGISTRY.values()),
]
