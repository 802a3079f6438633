# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Client configuration - layered settings and client declarations from files.

Settings precedence (later overrides earlier):

1. Built-in DEFAULTS
2. Config file: explicit path, else ``$GENRO_CLIENT_CONFIG``, else
   ``./genro-client.yaml`` when present
3. Environment variables: ``GENRO_CLIENT_*`` (e.g. ``GENRO_CLIENT_ADAPTER``)
4. Explicit constructor parameters

Config file (YAML)::

    adapter: httpx
    timeout: 10

    clients:
      github:
        adapter: httpx
        methods: get, post
        middleware:
          - base_url: "https://api.github.com"
          - headers:
              accept: application/vnd.github+json
          - logging

``ClientSettings.client("github")`` returns a ``Client`` subclass assembled
from that declaration.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .client import Client

__all__ = ["ClientSettings", "get_settings", "reset_settings", "DEFAULTS"]

DEFAULTS = {"adapter": "httpx", "timeout": None}

CONFIG_ENV = "GENRO_CLIENT_CONFIG"
DEFAULT_CONFIG_FILE = "genro-client.yaml"


def _client_opts_spec(
    adapter: str,
    timeout: float,
) -> None:
    """Reference function for SmartOptions type extraction (no defaults)."""


class ClientSettings:
    """Handles settings loading and client declarations."""

    __slots__ = ("_opts", "config_path")

    def __init__(
        self,
        config_path: str | Path | None = None,
        adapter: str | None = None,
        timeout: float | None = None,
        env: bool = True,
    ) -> None:
        self.config_path = self._find_config_file(config_path)
        self._opts = self._build_config(adapter=adapter, timeout=timeout, env=env)

    @staticmethod
    def _find_config_file(config_path: str | Path | None) -> Path | None:
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            return path
        env_path = os.environ.get(CONFIG_ENV)
        if env_path:
            path = Path(env_path)
            if not path.exists():
                raise ConfigurationError(f"{CONFIG_ENV} points to a missing file: {path}")
            return path
        path = Path.cwd() / DEFAULT_CONFIG_FILE
        return path if path.exists() else None

    def _build_config(
        self,
        adapter: str | None,
        timeout: float | None,
        env: bool,
    ) -> SmartOptions:
        file_config = (
            SmartOptions(str(self.config_path)) if self.config_path else SmartOptions({})
        )
        caller_opts = SmartOptions(dict(adapter=adapter, timeout=timeout), ignore_none=True)

        config = SmartOptions(DEFAULTS) + file_config
        if env:
            config = config + SmartOptions(_client_opts_spec, env="GENRO_CLIENT", argv=[])
        return config + caller_opts

    @property
    def adapter(self) -> str:
        """Name of the default adapter."""
        return self._opts["adapter"] or DEFAULTS["adapter"]

    @property
    def timeout(self) -> float | None:
        """Default adapter timeout in seconds, None for the adapter's own default."""
        value = self._opts["timeout"]
        if value in (None, ""):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid timeout setting: {value!r}") from None

    @property
    def clients(self) -> dict[str, Any]:
        """Client declarations by name."""
        clients = self._opts["clients"]
        if clients is None:
            return {}
        if hasattr(clients, "as_dict"):
            clients = clients.as_dict()
        return dict(clients)

    def client(self, name: str) -> type[Client]:
        """Assemble the ``Client`` subclass declared under ``clients.<name>``.

        Raises:
            ConfigurationError: If no client with that name is declared.
        """
        from .client import Client

        declaration = self.clients.get(name)
        if declaration is None:
            raise ConfigurationError(
                f"No client '{name}' in configuration. Declared: {sorted(self.clients)}"
            )
        return Client.from_config(name, declaration)

    def __getitem__(self, key: str) -> Any:
        return self._opts[key]


_settings: ClientSettings | None = None
_settings_lock = threading.Lock()


def get_settings() -> ClientSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = ClientSettings()
        return _settings


def reset_settings(settings: ClientSettings | None = None) -> None:
    """Replace (or drop, with None) the process-wide settings."""
    global _settings
    with _settings_lock:
        _settings = settings
