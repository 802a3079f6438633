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

"""genro-client - HTTP client modules built from middleware pipelines.

Main components:
    Conn: Immutable request/response context flowing through a pipeline
    Client: Base class declaring adapter, middleware and exposed verbs
    Pipeline: Middleware folded around an adapter into one callable
    Ok / Failure: Tagged results returned by safe-form verbs

Middleware:
    base_url, headers, query, opts: Request shaping
    json: Body encoding and decoding
    auth, require_headers: Credentials and mandatory headers
    deadline, logging: Timing

Adapters:
    HttpxAdapter: Synchronous transport over httpx

Usage:
    from genro_client import Client

    class Api(Client):
        middleware = [("base_url", "http://api.test"), "json"]

    Api.get_strict("/ping").resp_body
"""

__version__ = "0.1.0"

from .adapters import (
    ADAPTER_REGISTRY,
    BaseAdapter,
    HttpxAdapter,
    close_default_adapters,
    default_adapter,
)
from .api import (
    delete,
    delete_strict,
    get,
    get_strict,
    head,
    head_strict,
    options,
    options_strict,
    patch,
    patch_strict,
    post,
    post_strict,
    put,
    put_strict,
    request,
    request_strict,
    trace,
    trace_strict,
)
from .client import Client, build_conn, default_client, ensure_success
from .config import ClientSettings, get_settings
from .conn import Conn
from .datastructures import URL, Headers, QueryParams, State
from .exceptions import (
    ConfigurationError,
    GenroClientError,
    RequestError,
    StatusMismatchError,
)
from .methods import Method
from .middleware import MIDDLEWARE_REGISTRY, BaseMiddleware, CallNext
from .pipeline import MiddlewareEntry, Pipeline, compile_chain, interpret
from .results import ErrorResult, Failure, MiddlewareError, Ok, Result, TransportError

__all__ = [
    # Context
    "Conn",
    "Method",
    # Data structures
    "URL",
    "Headers",
    "QueryParams",
    "State",
    # Client
    "Client",
    "build_conn",
    "default_client",
    "ensure_success",
    # Pipeline
    "Pipeline",
    "MiddlewareEntry",
    "compile_chain",
    "interpret",
    "BaseMiddleware",
    "CallNext",
    "MIDDLEWARE_REGISTRY",
    "BaseAdapter",
    "HttpxAdapter",
    "ADAPTER_REGISTRY",
    "default_adapter",
    "close_default_adapters",
    # Results
    "Ok",
    "Failure",
    "Result",
    "ErrorResult",
    "MiddlewareError",
    "TransportError",
    # Exceptions
    "GenroClientError",
    "ConfigurationError",
    "RequestError",
    "StatusMismatchError",
    # Configuration
    "ClientSettings",
    "get_settings",
    # Module-level verbs
    "request",
    "request_strict",
    "get",
    "head",
    "delete",
    "trace",
    "options",
    "post",
    "put",
    "patch",
    "get_strict",
    "head_strict",
    "delete_strict",
    "trace_strict",
    "options_strict",
    "post_strict",
    "put_strict",
    "patch_strict",
]
