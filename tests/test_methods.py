# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for HTTP method parsing and method sets."""

import pytest

from genro_client.exceptions import ConfigurationError
from genro_client.methods import (
    BODY_METHODS,
    BODYLESS_METHODS,
    HTTP_METHODS,
    Method,
    method_allowed,
    serialize_http_methods,
)


class TestMethod:
    """Test the Method enum."""

    def test_parse_case_insensitive(self):
        assert Method.parse("get") is Method.GET
        assert Method.parse(" Patch ") is Method.PATCH
        assert Method.parse(Method.PUT) is Method.PUT

    def test_parse_invalid(self):
        with pytest.raises(ConfigurationError, match="Invalid HTTP method"):
            Method.parse("fetch")
        with pytest.raises(ConfigurationError, match="Invalid HTTP method"):
            Method.parse(42)

    def test_body_sets(self):
        """Eight verbs split into body-less and body-carrying."""
        assert len(HTTP_METHODS) == 8
        assert BODYLESS_METHODS | BODY_METHODS == set(HTTP_METHODS)
        assert not BODYLESS_METHODS & BODY_METHODS
        assert {m.verb for m in BODY_METHODS} == {"post", "put", "patch"}

    def test_allows_body(self):
        assert Method.POST.allows_body
        assert not Method.GET.allows_body
        assert not Method.OPTIONS.allows_body

    def test_is_a_string(self):
        assert Method.GET == "GET"
        assert Method.DELETE.verb == "delete"


class TestSerializeHttpMethods:
    """Test method declaration normalization."""

    def test_none_means_all(self):
        assert serialize_http_methods(None) == HTTP_METHODS

    def test_comma_string(self):
        assert serialize_http_methods("get, post") == (Method.GET, Method.POST)

    def test_list_with_duplicates(self):
        assert serialize_http_methods(["GET", "get", Method.PUT]) == (Method.GET, Method.PUT)

    def test_empty_uses_default(self):
        assert serialize_http_methods("", default=(Method.GET,)) == (Method.GET,)

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            serialize_http_methods("get, fetch")


class TestMethodAllowed:
    def test_allowed(self):
        assert method_allowed("get", (Method.GET, Method.POST)) is True

    def test_not_allowed(self):
        with pytest.raises(ConfigurationError, match="not allowed"):
            method_allowed("delete", (Method.GET,))
