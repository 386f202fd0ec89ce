"""Tests for the switchyard exception hierarchy and error responses."""

import logging

import pytest

from switchyard.errors import (
    ConfigurationError,
    HTTPError,
    InvalidPattern,
    InvalidRegistration,
    MethodNotAllowed,
    NotFound,
    SwitchyardError,
)
from switchyard.http.request import Request
from switchyard.server.errors import handle_http_error, handle_internal_error


class TestHierarchy:
    def test_configuration_errors(self) -> None:
        assert issubclass(InvalidPattern, ConfigurationError)
        assert issubclass(InvalidRegistration, ConfigurationError)
        assert issubclass(ConfigurationError, SwitchyardError)

    def test_http_errors(self) -> None:
        assert issubclass(NotFound, HTTPError)
        assert issubclass(MethodNotAllowed, HTTPError)
        assert issubclass(HTTPError, SwitchyardError)


class TestInvalidPattern:
    def test_fields(self) -> None:
        exc = InvalidPattern("/a/:", "unnamed capture")
        assert exc.pattern == "/a/:"
        assert exc.reason == "unnamed capture"
        assert str(exc) == "Invalid route pattern '/a/:': unnamed capture"


class TestHTTPError:
    def test_str(self) -> None:
        assert str(HTTPError(status=418, detail="teapot")) == "418: teapot"
        assert str(HTTPError(status=418)) == "418"

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert exc.detail == "Not Found"

    def test_method_not_allowed_keeps_order(self) -> None:
        exc = MethodNotAllowed(("PUT", "GET"))
        assert exc.status == 405
        assert exc.headers == (("Allow", "PUT, GET"),)

    def test_can_be_raised(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise NotFound("gone")
        assert exc_info.value.detail == "gone"


class TestErrorResponses:
    def test_http_error_response(self) -> None:
        request = Request(method="POST", path="/archive")
        response = handle_http_error(MethodNotAllowed(("GET",)), request)
        assert response.status == 405
        assert response.text == "Method Not Allowed"
        assert response.header("Allow") == "GET"

    def test_http_error_without_detail(self) -> None:
        response = handle_http_error(HTTPError(status=409), Request(method="GET", path="/"))
        assert response.text == "Error 409"

    def test_internal_error_hides_details(self, caplog: pytest.LogCaptureFixture) -> None:
        request = Request(method="GET", path="/boom")
        try:
            raise ValueError("secret")
        except ValueError as exc:
            with caplog.at_level(logging.ERROR, logger="switchyard.server"):
                response = handle_internal_error(exc, request, debug=False)

        assert response.status == 500
        assert "secret" not in response.text
        assert "500 GET /boom" in caplog.text

    def test_internal_error_debug_traceback(self) -> None:
        request = Request(method="GET", path="/boom")
        try:
            raise ValueError("secret")
        except ValueError as exc:
            response = handle_internal_error(exc, request, debug=True)

        assert "Traceback" in response.text
        assert "ValueError: secret" in response.text
