"""Unit tests for the client exception hierarchy."""

import pytest

from client.exceptions import (
    APIError,
    ConnectionError,
    ListingClientError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            ConnectionError("x"),
            TimeoutError("x"),
            APIError("x", status_code=400),
            ValidationError("x"),
            NotFoundError("x"),
            ServerError("x"),
        ],
    )
    def test_all_are_client_errors(self, exc):
        assert isinstance(exc, ListingClientError)

    def test_api_subclasses(self):
        assert issubclass(ValidationError, APIError)
        assert issubclass(NotFoundError, APIError)
        assert issubclass(ServerError, APIError)

    def test_status_codes(self):
        assert ValidationError("x").status_code == 422
        assert NotFoundError("x").status_code == 404
        assert ServerError("x").status_code == 500
        assert ServerError("x", status_code=503).status_code == 503


class TestStringRepresentations:
    def test_base(self):
        assert str(ListingClientError("plain")) == "plain"

    def test_connection_error_with_url(self):
        exc = ConnectionError("Failed", url="http://x")
        assert str(exc) == "Failed (url: http://x)"

    def test_timeout_error(self):
        assert str(TimeoutError("Slow")) == "Slow"
        assert str(TimeoutError("Slow", timeout=2.0, url="http://x")) == (
            "Slow (timeout: 2.0s, url: http://x)"
        )

    def test_api_error(self):
        assert str(APIError("bad", status_code=400)) == "[HTTP 400] bad"
        assert str(NotFoundError("gone")) == "[HTTP 404] [not_found] gone"


class TestServiceErrorFields:
    """Test access to the fields of the service's error bodies."""

    def test_tree_not_found(self):
        body = {
            "error": "Tree Not Found",
            "detail": "The tree 't9' does not exist",
            "requested_tree": "t9",
            "available_trees": ["t1"],
        }
        exc = NotFoundError(
            body["detail"],
            details={"requested_tree": "t9", "available_trees": ["t1"]},
            response_body=body,
        )

        assert exc.title == "Tree Not Found"
        assert exc.is_tree_not_found
        assert not exc.is_threshold_unsatisfiable
        assert exc.requested_tree == "t9"
        assert exc.available_trees == ["t1"]
        assert exc.largest_size is None

    def test_threshold_unsatisfiable(self):
        body = {"error": "Threshold Unsatisfiable", "required": 10, "largest_size": 4}
        exc = NotFoundError("none", details={"required": 10, "largest_size": 4}, response_body=body)

        assert exc.is_threshold_unsatisfiable
        assert exc.largest_size == 4
        assert exc.available_trees == []

    def test_malformed_size(self):
        body = {"error": "Malformed Size", "line": "² x", "line_number": 3}
        exc = ValidationError("bad size", details={"line": "² x", "line_number": 3}, response_body=body)

        assert exc.is_malformed_size
        assert exc.line == "² x"
        assert exc.line_number == 3

    def test_fields_absent_without_body(self):
        exc = ValidationError("bad")

        assert exc.title is None
        assert not exc.is_malformed_size
        assert exc.line is None
