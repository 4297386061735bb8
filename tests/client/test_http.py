"""Unit tests for the client HTTP layer.

These tests use httpx's MockTransport to avoid real network calls.
"""

import httpx
import pytest

from client._http import (
    DEFAULT_RETRY_BACKOFF_BASE,
    DEFAULT_RETRY_BACKOFF_MAX,
    RETRYABLE_STATUS_CODES,
    AsyncHTTPClient,
    HTTPClient,
    _calculate_backoff,
    _parse_error_response,
    _raise_for_status,
)
from client.exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)


# =============================================================================
# Helper Function Tests
# =============================================================================


class TestParseErrorResponse:
    """Tests for _parse_error_response."""

    def test_service_error_body(self):
        response = httpx.Response(
            status_code=404,
            json={
                "error": "Tree Not Found",
                "detail": "The tree 'x' does not exist",
                "requested_tree": "x",
                "available_trees": [],
            },
        )
        message, error_type, details = _parse_error_response(response)

        assert message == "The tree 'x' does not exist"
        assert error_type is None
        assert details == {"requested_tree": "x", "available_trees": []}

    def test_detail_with_type(self):
        response = httpx.Response(400, json={"detail": "bad", "type": "ValueError"})
        message, error_type, details = _parse_error_response(response)

        assert message == "bad"
        assert error_type == "ValueError"
        assert details is None

    def test_fastapi_validation_list(self):
        response = httpx.Response(
            422,
            json={"detail": [{"loc": ["body", "transcript"], "msg": "Field required"}]},
        )
        message, error_type, details = _parse_error_response(response)

        assert message == "transcript: Field required"
        assert error_type == "validation_error"
        assert "errors" in details

    def test_error_key_only(self):
        response = httpx.Response(500, json={"error": "Boom"})
        message, _, _ = _parse_error_response(response)
        assert message == "Boom"

    def test_plain_text(self):
        response = httpx.Response(502, text="Bad Gateway")
        message, error_type, details = _parse_error_response(response)

        assert message == "Bad Gateway"
        assert error_type is None
        assert details is None

    def test_empty_body(self):
        response = httpx.Response(503)
        message, _, _ = _parse_error_response(response)
        assert message == "HTTP 503 error"


class TestRaiseForStatus:
    """Tests for _raise_for_status."""

    def test_success_does_not_raise(self):
        _raise_for_status(httpx.Response(200, json={}))

    @pytest.mark.parametrize(
        ("status_code", "exception"),
        [
            (422, ValidationError),
            (404, NotFoundError),
            (500, ServerError),
            (503, ServerError),
            (400, APIError),
        ],
    )
    def test_maps_status_codes(self, status_code, exception):
        with pytest.raises(exception) as exc_info:
            _raise_for_status(httpx.Response(status_code, json={"detail": "x"}))
        assert exc_info.value.status_code == status_code


class TestCalculateBackoff:
    def test_exponential(self):
        assert _calculate_backoff(0) == DEFAULT_RETRY_BACKOFF_BASE
        assert _calculate_backoff(2) == DEFAULT_RETRY_BACKOFF_BASE * 4

    def test_capped(self):
        assert _calculate_backoff(100) == DEFAULT_RETRY_BACKOFF_MAX

    def test_retryable_codes(self):
        assert RETRYABLE_STATUS_CODES == {502, 503, 504}


# =============================================================================
# HTTPClient Tests
# =============================================================================


def make_client(handler, **kwargs) -> HTTPClient:
    return HTTPClient("http://test/", transport=httpx.MockTransport(handler), **kwargs)


class TestHTTPClient:
    """Tests for the synchronous HTTPClient."""

    def test_strips_trailing_slash(self):
        client = make_client(lambda request: httpx.Response(200))
        assert client.base_url == "http://test"

    def test_get_returns_json(self):
        client = make_client(lambda request: httpx.Response(200, json={"ok": True}))
        assert client.get("/health") == {"ok": True}

    def test_empty_body_returns_none(self):
        client = make_client(lambda request: httpx.Response(204))
        assert client.delete("/trees/x") is None

    def test_none_params_dropped(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={})

        client = make_client(handler)
        client.get("/trees/x/small-directories", params={"limit": None, "other": 3})

        assert seen["params"] == {"other": "3"}

    def test_post_sends_json(self):
        seen = {}

        def handler(request):
            seen["body"] = request.content
            return httpx.Response(201, json={})

        client = make_client(handler)
        client.post("/trees", json={"transcript": "$ ls"})

        assert b'"transcript"' in seen["body"]

    def test_error_raises(self):
        client = make_client(lambda request: httpx.Response(404, json={"detail": "gone"}))

        with pytest.raises(NotFoundError) as exc_info:
            client.get("/trees/x")
        assert exc_info.value.message == "gone"

    def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(ConnectionError) as exc_info:
            client.get("/health")
        assert exc_info.value.url == "http://test/health"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(handler, timeout=1.5)
        with pytest.raises(TimeoutError) as exc_info:
            client.get("/health")
        assert exc_info.value.timeout == 1.5

    def test_retries_transient_status(self, monkeypatch):
        monkeypatch.setattr("client._http.time.sleep", lambda seconds: None)
        responses = iter([httpx.Response(503), httpx.Response(200, json={"ok": 1})])

        client = make_client(lambda request: next(responses), retry_enabled=True)

        assert client.get("/health") == {"ok": 1}

    def test_retry_gives_up(self, monkeypatch):
        monkeypatch.setattr("client._http.time.sleep", lambda seconds: None)
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        client = make_client(handler, retry_enabled=True, max_retries=2)
        with pytest.raises(ServerError):
            client.get("/health")
        assert len(calls) == 3

    def test_no_retry_by_default(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        client = make_client(handler)
        with pytest.raises(ServerError):
            client.get("/health")
        assert len(calls) == 1

    def test_retries_connect_error(self, monkeypatch):
        monkeypatch.setattr("client._http.time.sleep", lambda seconds: None)
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"ok": True})

        client = make_client(handler, retry_enabled=True)
        assert client.get("/health") == {"ok": True}

    def test_context_manager(self):
        with make_client(lambda request: httpx.Response(200)) as client:
            assert isinstance(client, HTTPClient)


# =============================================================================
# AsyncHTTPClient Tests
# =============================================================================


def make_async_client(handler, **kwargs) -> AsyncHTTPClient:
    return AsyncHTTPClient("http://test", transport=httpx.MockTransport(handler), **kwargs)


class TestAsyncHTTPClient:
    """Tests for the asynchronous AsyncHTTPClient."""

    async def test_get_returns_json(self):
        async with make_async_client(
            lambda request: httpx.Response(200, json={"ok": True})
        ) as client:
            assert await client.get("/health") == {"ok": True}

    async def test_error_raises(self):
        async with make_async_client(
            lambda request: httpx.Response(422, json={"detail": "bad"})
        ) as client:
            with pytest.raises(ValidationError):
                await client.post("/trees", json={})

    async def test_retries_transient_status(self, monkeypatch):
        async def no_sleep(seconds):
            return None

        monkeypatch.setattr("client._http.asyncio.sleep", no_sleep)
        responses = iter([httpx.Response(502), httpx.Response(200, json={"ok": 1})])

        async with make_async_client(
            lambda request: next(responses), retry_enabled=True
        ) as client:
            assert await client.get("/health") == {"ok": 1}

    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with make_async_client(handler) as client:
            with pytest.raises(ConnectionError):
                await client.delete("/trees/x")
