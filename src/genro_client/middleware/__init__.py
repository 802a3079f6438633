# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package - request/response stages for genro-client pipelines."""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from ..conn import Conn
    from ..results import StepResult

MIDDLEWARE_REGISTRY: dict[str, type["BaseMiddleware"]] = {}

CallNext: TypeAlias = "Callable[[Conn], StepResult]"


class BaseMiddleware(ABC):
    """Base class for all middleware. Subclasses auto-register via __init_subclass__.

    A middleware is stateless: everything it needs per pipeline comes from
    ``opts``, computed once by ``init`` when the pipeline is assembled, and
    everything it needs per request comes from the ``Conn``. One instance
    can therefore serve any number of pipelines and concurrent requests.

    Class attributes:
        middleware_name: Registry key (default: class name). Client
            declarations and config files refer to middleware by this name.

    Contract for ``call``:
        - transform ``conn`` and return ``call_next(conn)``, optionally
          post-processing a successful result, or
        - return an ``ErrorResult`` without calling ``call_next``
          (short-circuit: later middleware and the adapter never run).
        ``call_next`` must be called at most once.
    """

    middleware_name: str = ""

    __slots__ = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.__dict__.get("middleware_name") or cls.__name__
        if name in MIDDLEWARE_REGISTRY:
            raise ValueError(f"Middleware name '{name}' already registered")
        cls.middleware_name = name
        MIDDLEWARE_REGISTRY[name] = cls

    def init(self, opts: Any) -> Any:
        """Validate and normalize raw options. Called once per pipeline.

        Raises:
            ConfigurationError: If options are invalid.
        """
        return opts

    @abstractmethod
    def call(self, conn: Conn, call_next: CallNext, opts: Any) -> StepResult: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.middleware_name!r}>"


def get_middleware(name: str) -> type[BaseMiddleware]:
    """Return the middleware class registered under ``name``.

    Raises:
        ConfigurationError: If no middleware has that name.
    """
    from ..exceptions import ConfigurationError

    try:
        return MIDDLEWARE_REGISTRY[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown middleware '{name}'. Registered: {sorted(MIDDLEWARE_REGISTRY)}"
        ) from None


def _autodiscover() -> None:
    """Import all middleware modules in this package to trigger registration."""
    package_dir = Path(__file__).parent
    for py_file in package_dir.glob("*.py"):
        if py_file.name.startswith("_"):
            continue
        module_name = py_file.stem
        importlib.import_module(f".{module_name}", __package__)


_autodiscover()
globals().update({cls.__name__: cls for cls in MIDDLEWARE_REGISTRY.values()})

__all__ = [
    "BaseMiddleware",
    "CallNext",
    "MIDDLEWARE_REGISTRY",
    "get_middleware",
    *(cls.__name__ for cls in MIDDLEWARE_REGISTRY.values()),
]
