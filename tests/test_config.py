# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for layered client settings."""

import pytest

from genro_client.config import CONFIG_ENV, ClientSettings
from genro_client.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test in an empty directory with no GENRO_CLIENT_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (CONFIG_ENV, "GENRO_CLIENT_ADAPTER", "GENRO_CLIENT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestDefaults:
    def test_builtin_defaults(self):
        settings = ClientSettings(env=False)
        assert settings.config_path is None
        assert settings.adapter == "httpx"
        assert settings.timeout is None
        assert settings.clients == {}

    def test_explicit_arguments_win(self):
        settings = ClientSettings(adapter="custom", timeout=2.5, env=False)
        assert settings.adapter == "custom"
        assert settings.timeout == 2.5

    def test_invalid_timeout(self):
        settings = ClientSettings(timeout="soon", env=False)
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            settings.timeout

    def test_unknown_client(self):
        with pytest.raises(ConfigurationError, match="No client 'github'"):
            ClientSettings(env=False).client("github")


class TestConfigFile:
    def test_missing_explicit_file(self, isolated_env):
        with pytest.raises(ConfigurationError, match="not found"):
            ClientSettings(config_path=isolated_env / "missing.yaml")

    def test_missing_env_file(self, monkeypatch, isolated_env):
        monkeypatch.setenv(CONFIG_ENV, str(isolated_env / "missing.yaml"))
        with pytest.raises(ConfigurationError, match=CONFIG_ENV):
            ClientSettings()

    def test_file_settings_and_clients(self, isolated_env):
        pytest.importorskip("yaml")
        path = isolated_env / "genro-client.yaml"
        path.write_text(
            "timeout: 10\n"
            "clients:\n"
            "  github:\n"
            "    adapter: httpx\n"
            "    methods: get\n"
            "    middleware:\n"
            "      - base_url: https://api.github.com\n"
            "      - logging\n"
        )
        settings = ClientSettings(env=False)
        assert settings.config_path == path
        assert settings.timeout == 10.0
        assert settings.adapter == "httpx"

        github = settings.client("github")
        assert github.__name__ == "github"
        assert github.pipeline.names == ("base_url", "logging", "httpx")
        assert not hasattr(github, "post")
        github.pipeline.adapter.close()

    def test_explicit_argument_over_file(self, isolated_env):
        pytest.importorskip("yaml")
        path = isolated_env / "settings.yaml"
        path.write_text("adapter: from_file\ntimeout: 10\n")
        settings = ClientSettings(config_path=path, timeout=1, env=False)
        assert settings.adapter == "from_file"
        assert settings.timeout == 1.0
