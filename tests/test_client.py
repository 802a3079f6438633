# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for Client declarations, verb entry points and strict handling."""

from types import SimpleNamespace

import pytest

import genro_client
from genro_client import (
    BaseAdapter,
    Client,
    ConfigurationError,
    Conn,
    Failure,
    Method,
    Ok,
    RequestError,
    StatusMismatchError,
    TransportError,
)
from genro_client import api
from genro_client.adapters import close_default_adapters
from genro_client.client import build_conn, default_client, ensure_success, reset_default_client
from genro_client.config import reset_settings


class CountingAdapter(BaseAdapter):
    """Records each conn and answers with a fixed status."""

    adapter_name = "client_counting"

    def __init__(self, status=200, body=b""):
        self.status = status
        self.body = body
        self.received = []

    def call(self, conn):
        self.received.append(conn)
        return conn.put_status(self.status).put_resp_body(self.body)

    @property
    def calls(self):
        return len(self.received)


class RefusingAdapter(BaseAdapter):
    adapter_name = "client_refusing"

    def call(self, conn):
        return TransportError("econnrefused", conn)


def make_client(status=200, middleware=(), methods=None, name="Api"):
    adapter = CountingAdapter(status)
    return type(name, (Client,), {"adapter": adapter, "middleware": middleware, "methods": methods})


class TestVerbs:
    """Safe verbs return Ok or Failure; nothing is raised for request failures."""

    @pytest.mark.parametrize("verb", ["get", "head", "delete", "trace", "options"])
    def test_bodyless_verbs(self, verb):
        api_cls = make_client()
        result = getattr(api_cls, verb)("/x", {"accept": "a"})
        assert isinstance(result, Ok)
        sent = api_cls.pipeline.adapter.received[0]
        assert sent.method is Method.parse(verb)
        assert sent.get_req_header("accept") == "a"

    @pytest.mark.parametrize("verb", ["post", "put", "patch"])
    def test_body_verbs(self, verb):
        api_cls = make_client(status=201)
        result = getattr(api_cls, verb)("/x", None, b"payload")
        assert result.status == 201
        sent = api_cls.pipeline.adapter.received[0]
        assert sent.method is Method.parse(verb)
        assert sent.req_body == b"payload"

    def test_conn_argument(self):
        api_cls = make_client()
        conn = Conn.new("/x").put_req_header("x-trace", "1").put_method("POST")
        api_cls.get(conn)
        sent = api_cls.pipeline.adapter.received[0]
        assert sent.method is Method.GET
        assert sent.get_req_header("x-trace") == "1"

    def test_no_url(self):
        api_cls = make_client()
        result = api_cls.get()
        assert isinstance(result, Ok)
        assert result.conn.url is None

    def test_transport_failure_is_returned(self):
        api_cls = type("Refused", (Client,), {"adapter": RefusingAdapter})
        conn = Conn.new("http://api.test/x")
        result = api_cls.get(conn)
        assert isinstance(result, Failure)
        assert result.reason == "econnrefused"
        assert result.conn.url == "http://api.test/x"

    def test_verbs_on_instances(self):
        api_cls = make_client()
        assert isinstance(api_cls().get("/x"), Ok)

    def test_verb_names(self):
        api_cls = make_client(name="Named")
        assert api_cls.get.__name__ == "get"
        assert api_cls.post_strict.__qualname__ == "Named.post_strict"

    def test_request(self):
        api_cls = make_client()
        result = api_cls.request("patch", "/x", body=b"p")
        assert result.conn.method is Method.PATCH

    def test_base_client_cannot_send(self):
        with pytest.raises(ConfigurationError, match="must be subclassed"):
            Client.get("/x")


class TestBodylessCheck:
    """A body on a body-less verb fails before any stage runs."""

    @pytest.mark.parametrize("verb", ["get", "head", "delete", "trace", "options"])
    def test_conn_with_body_rejected(self, verb):
        api_cls = make_client()
        conn = Conn.new("/x").put_req_body(b"payload")
        with pytest.raises(ConfigurationError, match="should not contain a body"):
            getattr(api_cls, verb)(conn)
        assert api_cls.pipeline.adapter.calls == 0

    def test_body_argument_rejected(self):
        api_cls = make_client()
        with pytest.raises(ConfigurationError, match="does not accept a body"):
            api_cls.request("GET", "/x", body=b"payload")
        assert api_cls.pipeline.adapter.calls == 0

    def test_strict_form_also_rejects(self):
        api_cls = make_client()
        with pytest.raises(ConfigurationError):
            api_cls.delete_strict(Conn.new("/x").put_req_body("payload"))
        assert api_cls.pipeline.adapter.calls == 0

    def test_empty_body_is_no_body(self):
        api_cls = make_client()
        assert isinstance(api_cls.get(Conn.new("/x").put_req_body(b"")), Ok)

    def test_bodyless_safe_form_has_no_body_parameter(self):
        api_cls = make_client()
        with pytest.raises(TypeError):
            api_cls.get("/x", None, b"payload")

    def test_invalid_arguments(self):
        api_cls = make_client()
        with pytest.raises(ConfigurationError):
            api_cls.get(42)
        with pytest.raises(ConfigurationError):
            api_cls.get("/x", "accept: a")


class TestStrict:
    """Strict verbs return the conn or raise."""

    def test_default_accepts_2xx(self):
        api_cls = make_client(status=204)
        conn = api_cls.get_strict("/x")
        assert isinstance(conn, Conn)
        assert conn.status == 204

    def test_status_outside_default(self):
        api_cls = make_client(status=404)
        with pytest.raises(StatusMismatchError) as exc_info:
            api_cls.get_strict("/x")
        assert exc_info.value.status == 404
        assert exc_info.value.conn.status == 404
        assert exc_info.value.source == "Api"

    def test_explicit_statuses(self):
        api_cls = make_client(status=404)
        conn = api_cls.get_strict("/x", statuses=[200, 404])
        assert conn.status == 404

    def test_explicit_statuses_exclude_2xx(self):
        api_cls = make_client(status=200)
        with pytest.raises(StatusMismatchError):
            api_cls.post_strict("/x", None, b"p", statuses=(201,))

    def test_statuses_is_keyword_only(self):
        api_cls = make_client()
        with pytest.raises(TypeError):
            api_cls.get_strict("/x", None, [200])

    def test_failure_raises_request_error(self):
        api_cls = type("Refused", (Client,), {"adapter": "client_refusing"})
        with pytest.raises(RequestError) as exc_info:
            api_cls.get_strict("/x")
        assert not isinstance(exc_info.value, StatusMismatchError)
        assert exc_info.value.reason == "econnrefused"
        assert exc_info.value.source == "Refused"

    def test_request_strict(self):
        api_cls = make_client(status=201)
        assert api_cls.request_strict("POST", "/x", body=b"p").status == 201


class TestEnsureSuccess:
    def test_ok(self):
        conn = Conn.new("/x").put_status(200)
        assert ensure_success(Ok(conn)) is conn

    def test_none_status_rejected(self):
        with pytest.raises(StatusMismatchError):
            ensure_success(Ok(Conn.new("/x")))

    def test_string_statuses_rejected(self):
        with pytest.raises(ConfigurationError):
            ensure_success(Ok(Conn.new("/x").put_status(200)), statuses="200")

    def test_not_a_result(self):
        with pytest.raises(TypeError):
            ensure_success(Conn.new("/x"))


class TestBuildConn:
    def test_headers_merged_over_conn(self):
        conn = build_conn("GET", Conn.new("/x").put_req_header("accept", "a"), {"Accept": "b"})
        assert conn.get_req_header("accept") == "b"
        assert conn.method is Method.GET

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            build_conn("FETCH", "/x")


class TestDeclaration:
    """Class-level declarations are validated when the class is created."""

    def test_restricted_methods(self):
        api_cls = make_client(methods="get, post")
        assert api_cls.allowed_methods == (Method.GET, Method.POST)
        assert isinstance(api_cls.get("/x"), Ok)
        assert not hasattr(api_cls, "delete")
        assert not hasattr(api_cls, "delete_strict")
        with pytest.raises(AttributeError):
            api_cls.put("/x")

    def test_request_with_unexposed_method(self):
        api_cls = make_client(methods=["get"])
        with pytest.raises(ConfigurationError, match="not allowed"):
            api_cls.request("DELETE", "/x")
        assert api_cls.pipeline.adapter.calls == 0

    def test_invalid_method_declaration(self):
        with pytest.raises(ConfigurationError):
            make_client(methods="get, fetch")

    def test_invalid_middleware_declaration(self):
        with pytest.raises(ConfigurationError):
            make_client(middleware=[("base_url", "not-absolute")])

    def test_subclass_inherits_declarations(self):
        parent = make_client(middleware=[("base_url", "http://api.test")], name="Parent")
        child = type("Child", (parent,), {"methods": "get"})
        child.get("/ping")
        assert child.pipeline is not parent.pipeline
        assert child.pipeline.adapter.received[-1].url == "http://api.test/ping"

    def test_from_config(self):
        adapter = CountingAdapter()
        api_cls = Client.from_config(
            "Configured",
            {
                "adapter": adapter,
                "methods": "get",
                "middleware": {"base_url": "http://api.test", "logging": True},
            },
        )
        assert api_cls.__name__ == "Configured"
        assert api_cls.pipeline.names == ("base_url", "logging", "client_counting")
        api_cls.get("/ping")
        assert adapter.received[0].url == "http://api.test/ping"

    def test_from_config_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="Unknown options"):
            Client.from_config("Bad", {"adapter": CountingAdapter(), "retries": 3})

    def test_from_config_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            Client.from_config("Bad", ["get"])


class TestScenarios:
    """End-to-end scenarios through declared clients."""

    def test_not_found_with_logging(self, caplog):
        api_cls = make_client(status=404, middleware=["logging"])
        with caplog.at_level("INFO", logger="genro_client.access"):
            result = api_cls.get("http://api.test/missing")
        assert isinstance(result, Ok)
        assert result.status == 404
        assert any("404" in r.getMessage() for r in caplog.records)
        with pytest.raises(StatusMismatchError):
            api_cls.get_strict("http://api.test/missing")
        assert api_cls.get_strict("http://api.test/missing", statuses=[404]).status == 404

    def test_base_url(self):
        api_cls = make_client(middleware=[("base_url", "http://api.test")])
        result = api_cls.get("/ping")
        assert result.conn.url == "http://api.test/ping"
        assert api_cls.pipeline.adapter.received[0].url == "http://api.test/ping"

    def test_auth_short_circuit(self):
        api_cls = make_client(middleware=[("require_headers", "authorization")])
        result = api_cls.post("/items", None, b"{}")
        assert isinstance(result, Failure)
        assert result.reason == "missing required header: authorization"
        assert api_cls.pipeline.adapter.calls == 0
        with pytest.raises(RequestError):
            api_cls.post_strict("/items", None, b"{}")
        assert api_cls.pipeline.adapter.calls == 0

    def test_json_round(self):
        api_cls = make_client(middleware=["json"], status=201)
        result = api_cls.post("/items", None, {"name": "x"})
        sent = api_cls.pipeline.adapter.received[0]
        assert sent.req_body == b'{"name": "x"}'
        assert sent.get_req_header("content-type") == "application/json"
        assert result.status == 201


@pytest.fixture
def default_stack():
    """Point the default client at a counting adapter instead of the network."""
    reset_settings(SimpleNamespace(adapter="client_counting", timeout=None))
    close_default_adapters()
    reset_default_client()
    yield
    reset_default_client()
    close_default_adapters()
    reset_settings(None)


class TestModuleLevel:
    """Module-level verbs go through the default client."""

    def test_default_client_uses_default_adapter(self, default_stack):
        client_cls = default_client()
        assert client_cls is default_client()
        assert isinstance(client_cls.pipeline.adapter, CountingAdapter)
        assert client_cls.allowed_methods == genro_client.methods.HTTP_METHODS

    def test_module_verbs(self, default_stack):
        result = genro_client.get("http://api.test/x")
        assert isinstance(result, Ok)
        conn = genro_client.put_strict("http://api.test/x", None, b"p")
        assert conn.method is Method.PUT
        adapter = default_client().pipeline.adapter
        assert [c.method for c in adapter.received] == [Method.GET, Method.PUT]

    def test_module_bodyless_check(self, default_stack):
        with pytest.raises(ConfigurationError):
            api.request("OPTIONS", "http://api.test/x", body=b"p")
        assert default_client().pipeline.adapter.calls == 0

    def test_module_strict_statuses(self, monkeypatch):
        api_cls = make_client(status=404)
        monkeypatch.setattr(api, "default_client", lambda: api_cls)
        assert genro_client.get_strict("/x", statuses=[404]).status == 404
        with pytest.raises(StatusMismatchError):
            api.delete_strict("/x")
