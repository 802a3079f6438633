# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import genro_client


def test_version() -> None:
    """Test that version is defined."""
    assert genro_client.__version__ == "0.1.0"


def test_exports() -> None:
    """Test that main exports are available."""
    assert hasattr(genro_client, "Client")
    assert hasattr(genro_client, "Conn")
    assert hasattr(genro_client, "Pipeline")
    assert hasattr(genro_client, "BaseMiddleware")
    assert hasattr(genro_client, "BaseAdapter")
    assert hasattr(genro_client, "HttpxAdapter")


def test_module_level_verbs() -> None:
    """Every verb has a safe and a strict module-level function."""
    for verb in ("get", "head", "delete", "trace", "options", "post", "put", "patch"):
        assert callable(getattr(genro_client, verb))
        assert callable(getattr(genro_client, f"{verb}_strict"))


def test_builtin_middleware_registered() -> None:
    """Built-in middleware modules register themselves on import."""
    from genro_client.middleware import MIDDLEWARE_REGISTRY

    for name in (
        "auth",
        "base_url",
        "deadline",
        "headers",
        "json",
        "logging",
        "opts",
        "query",
        "require_headers",
    ):
        assert name in MIDDLEWARE_REGISTRY
