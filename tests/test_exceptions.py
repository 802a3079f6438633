# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for exception classes and tagged results."""

import pytest

from genro_client.conn import Conn
from genro_client.exceptions import (
    STATUS_NOT_MATCH,
    ConfigurationError,
    GenroClientError,
    RequestError,
    StatusMismatchError,
)
from genro_client.results import (
    ErrorResult,
    Failure,
    MiddlewareError,
    Ok,
    TransportError,
    is_error,
)


class TestConfigurationError:
    """Tests for ConfigurationError class."""

    def test_hierarchy(self) -> None:
        """ConfigurationError is both a GenroClientError and a ValueError."""
        exc = ConfigurationError("bad option")
        assert isinstance(exc, GenroClientError)
        assert isinstance(exc, ValueError)
        assert str(exc) == "bad option"

    def test_can_be_raised(self) -> None:
        with pytest.raises(ValueError):
            raise ConfigurationError("bad option")


class TestRequestError:
    """Tests for RequestError class."""

    def test_attributes(self) -> None:
        conn = Conn.new("/x")
        exc = RequestError("timeout", conn, "Api")
        assert exc.reason == "timeout"
        assert exc.conn is conn
        assert exc.source == "Api"
        assert str(exc) == "Api: timeout"

    def test_without_source(self) -> None:
        exc = RequestError("timeout")
        assert exc.conn is None
        assert str(exc) == "timeout"

    def test_reason_may_be_an_exception(self) -> None:
        cause = OSError("connection refused")
        exc = RequestError(cause)
        assert exc.reason is cause
        assert "connection refused" in str(exc)

    def test_repr(self) -> None:
        exc = RequestError("timeout", source="Api")
        assert repr(exc) == "RequestError(reason='timeout', source='Api')"


class TestStatusMismatchError:
    """Tests for StatusMismatchError class."""

    def test_default_range(self) -> None:
        conn = Conn.new("/x").put_status(404)
        exc = StatusMismatchError(conn)
        assert isinstance(exc, RequestError)
        assert exc.reason == STATUS_NOT_MATCH
        assert exc.status == 404
        assert exc.statuses is None
        assert exc.conn is conn
        assert str(exc) == "response_status_not_match (status 404, accepted 200..299)"

    def test_explicit_statuses(self) -> None:
        conn = Conn.new("/x").put_status(500)
        exc = StatusMismatchError(conn, [200, 404], "Api")
        assert exc.statuses == (200, 404)
        assert str(exc) == "Api: response_status_not_match (status 500, accepted 200, 404)"


class TestResults:
    """Tests for the tagged values returned by the pipeline."""

    def test_error_result_shapes(self) -> None:
        conn = Conn.new("/x")
        bare = MiddlewareError("denied")
        with_conn = TransportError("timeout", conn)
        assert bare.is_bare
        assert not with_conn.is_bare
        assert isinstance(bare, ErrorResult)
        assert isinstance(with_conn, ErrorResult)
        assert is_error(bare)
        assert not is_error(conn)

    def test_ok(self) -> None:
        conn = Conn.new("/x").put_status(201)
        ok = Ok(conn)
        assert ok.is_ok
        assert ok.status == 201
        assert ok.unwrap() is conn
        tag, value = ok
        assert (tag, value) == ("ok", conn)

    def test_failure(self) -> None:
        conn = Conn.new("/x")
        failure = Failure("timeout", conn)
        assert not failure.is_ok
        tag, reason, failed_conn = failure
        assert (tag, reason, failed_conn) == ("error", "timeout", conn)
        with pytest.raises(RequestError) as exc_info:
            failure.unwrap()
        assert exc_info.value.reason == "timeout"
        assert exc_info.value.conn is conn

    def test_pattern_matching(self) -> None:
        conn = Conn.new("/x")
        match Failure("timeout", conn):
            case Ok(conn=ok_conn):
                outcome = ("ok", ok_conn)
            case Failure(reason=reason):
                outcome = ("error", reason)
        assert outcome == ("error", "timeout")
