"""
Unit tests for the patch history client.

Tests focus on the request/response contract:
- Endpoint, method, headers and body of each call
- Both accepted response shapes
- Transport vs application failures
- Edge cases
"""
import logging

import httpx
import pytest

from app.services.history.service import (
    fetch_history,
    save_history,
    rollback_patch,
    ROLLBACK_FAILED_MESSAGE,
)
from app.services.history.exceptions import (
    HistoryClientError,
    TransportError,
    ApplicationError,
    InvalidResponseError,
)

BASE_URL = "https://history.example.com"
API_KEY = "test-api-key"


class TestFetchHistory:
    """Tests for fetch_history"""

    @pytest.mark.asyncio
    async def test_envelope_returns_data(self, fake_api, sample_record):
        """{code: 200, data: [...]} should return data"""
        fake_api.respond(200, {"code": 200, "data": [sample_record]})

        result = await fetch_history()

        assert result == [sample_record]

    @pytest.mark.asyncio
    async def test_bare_list_returned_directly(self, fake_api, caplog):
        """A bare JSON array is still accepted and flagged as deprecated"""
        fake_api.respond(200, [{"id": "p1"}])

        with caplog.at_level(logging.WARNING):
            result = await fetch_history()

        assert result == [{"id": "p1"}]
        assert "DEPRECATED_RESPONSE_SHAPE" in caplog.text

    @pytest.mark.asyncio
    async def test_non_200_code_returns_empty(self, fake_api):
        fake_api.respond(200, {"code": 500})
        assert await fetch_history() == []

    @pytest.mark.asyncio
    async def test_envelope_with_non_list_data_returns_empty(self, fake_api):
        fake_api.respond(200, {"code": 200, "data": {"id": "p1"}})
        assert await fetch_history() == []

    @pytest.mark.asyncio
    async def test_scalar_body_returns_empty(self, fake_api):
        fake_api.respond(200, "ok")
        assert await fetch_history() == []

    @pytest.mark.asyncio
    async def test_request_shape_default_project(self, fake_api):
        """GET /api/projects/proj_demo/patches with bearer auth"""
        fake_api.respond(200, [])

        await fetch_history()

        request = fake_api.last_request
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/api/projects/proj_demo/patches"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_request_uses_given_project(self, fake_api):
        fake_api.respond(200, [])

        await fetch_history("proj_42")

        assert fake_api.last_request.url.path == "/api/projects/proj_42/patches"

    @pytest.mark.asyncio
    async def test_records_are_not_validated(self, fake_api):
        """Backend records are passed through without shape checks"""
        odd = [{"id": "p1"}, {"unexpected": True}]
        fake_api.respond(200, {"code": 200, "data": odd})

        assert await fetch_history() == odd

    @pytest.mark.asyncio
    async def test_404_raises_transport_error(self, fake_api):
        """HTTP 404 should raise TransportError with the status text"""
        fake_api.respond(404, {"code": 404})

        with pytest.raises(TransportError) as exc_info:
            await fetch_history()

        assert "Not Found" in str(exc_info.value)
        assert str(exc_info.value) == "Failed to fetch history: Not Found"
        assert exc_info.value.status_code == 404
        assert exc_info.value.status_text == "Not Found"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_invalid_response(self, fake_api):
        fake_api.respond(200, content=b"<html>oops</html>")

        with pytest.raises(InvalidResponseError):
            await fetch_history()

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self, fake_api):
        fake_api.fail_with(httpx.ConnectError, "connection refused")

        with pytest.raises(TransportError) as exc_info:
            await fetch_history()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self, fake_api):
        fake_api.fail_with(httpx.ReadTimeout, "timed out")

        with pytest.raises(TransportError):
            await fetch_history()


class TestSaveHistory:
    """Tests for save_history"""

    @pytest.mark.asyncio
    async def test_envelope_returns_data(self, fake_api, sample_record):
        fake_api.respond(200, {"code": 200, "data": {"version": 7}})
        assert await save_history(sample_record) == {"version": 7}

    @pytest.mark.asyncio
    async def test_bare_body_returned_as_is(self, fake_api, sample_record):
        fake_api.respond(200, {"version": 7})
        assert await save_history(sample_record) == {"version": 7}

    @pytest.mark.asyncio
    async def test_envelope_without_data_returns_body(self, fake_api, sample_record):
        """code 200 with falsy data falls through to the raw body"""
        fake_api.respond(200, {"code": 200, "data": None})
        assert await save_history(sample_record) == {"code": 200, "data": None}

    @pytest.mark.asyncio
    async def test_request_shape(self, fake_api, sample_record):
        """POST with JSON content type, bearer auth and the record as body"""
        fake_api.respond(201, {"code": 200, "data": {"version": 8}})

        await save_history(sample_record, "proj_42")

        request = fake_api.last_request
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/api/projects/proj_42/patches"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.headers["Content-Type"] == "application/json"
        assert fake_api.last_json() == sample_record

    @pytest.mark.asyncio
    async def test_record_is_not_mutated(self, fake_api, sample_record):
        snapshot = dict(sample_record)
        fake_api.respond(200, {"code": 200, "data": {"version": 7}})

        await save_history(sample_record)

        assert sample_record == snapshot

    @pytest.mark.asyncio
    async def test_server_error_raises_transport_error(self, fake_api, sample_record):
        fake_api.respond(503, {"code": 503})

        with pytest.raises(TransportError, match="Failed to save patch: Service Unavailable"):
            await save_history(sample_record)


class TestRollbackPatch:
    """Tests for rollback_patch"""

    @pytest.mark.asyncio
    async def test_success_returns_none(self, fake_api):
        fake_api.respond(200, {"code": 200})
        assert await rollback_patch("p1") is None

    @pytest.mark.asyncio
    async def test_request_shape(self, fake_api):
        fake_api.respond(200, {"code": 200})

        await rollback_patch("p1", "proj_42")

        request = fake_api.last_request
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/api/projects/proj_42/rollback"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.headers["Content-Type"] == "application/json"
        assert fake_api.last_json() == {"target_patch_id": "p1"}

    @pytest.mark.asyncio
    async def test_application_error_with_message(self, fake_api):
        """HTTP 200 with code 400 should raise ApplicationError carrying the backend message"""
        fake_api.respond(200, {"code": 400, "message": "conflict"})

        with pytest.raises(ApplicationError) as exc_info:
            await rollback_patch("p1")

        assert str(exc_info.value) == "conflict"
        assert exc_info.value.code == 400

    @pytest.mark.asyncio
    async def test_application_error_without_message(self, fake_api):
        fake_api.respond(200, {"code": 400})

        with pytest.raises(ApplicationError) as exc_info:
            await rollback_patch("p1")

        assert str(exc_info.value) == ROLLBACK_FAILED_MESSAGE == "Rollback failed"

    @pytest.mark.asyncio
    async def test_empty_message_uses_generic(self, fake_api):
        fake_api.respond(200, {"code": 409, "message": ""})

        with pytest.raises(ApplicationError, match="Rollback failed"):
            await rollback_patch("p1")

    @pytest.mark.asyncio
    async def test_body_without_code_is_success(self, fake_api):
        fake_api.respond(200, {"status": "ok"})
        assert await rollback_patch("p1") is None

    @pytest.mark.asyncio
    async def test_http_500_raises_transport_before_code_check(self, fake_api):
        """Status is checked first: a failing body code must not surface as ApplicationError"""
        fake_api.respond(500, {"code": 400, "message": "conflict"})

        with pytest.raises(TransportError) as exc_info:
            await rollback_patch("p1")

        assert not isinstance(exc_info.value, ApplicationError)
        assert str(exc_info.value) == "Failed to rollback: Internal Server Error"


class TestConfigurationPerCall:
    """Base URL and key are read from the environment on every call"""

    @pytest.mark.asyncio
    async def test_changed_key_used_by_next_call(self, fake_api, history_env):
        fake_api.respond(200, [])

        await fetch_history()
        history_env.setenv("LOCAL_HISTORY_API_KEY", "rotated")
        await fetch_history()

        assert fake_api.requests[0].headers["Authorization"] == f"Bearer {API_KEY}"
        assert fake_api.requests[1].headers["Authorization"] == "Bearer rotated"

    @pytest.mark.asyncio
    async def test_missing_key_sends_empty_bearer(self, fake_api, history_env):
        history_env.delenv("LOCAL_HISTORY_API_KEY")
        fake_api.respond(200, [])

        await fetch_history()

        assert fake_api.last_request.headers["Authorization"].strip() == "Bearer"

    @pytest.mark.asyncio
    async def test_each_call_is_a_single_request(self, fake_api):
        fake_api.respond(502, {})

        with pytest.raises(TransportError):
            await fetch_history()

        assert len(fake_api.requests) == 1


def test_error_hierarchy():
    assert issubclass(TransportError, HistoryClientError)
    assert issubclass(ApplicationError, HistoryClientError)
    assert issubclass(InvalidResponseError, HistoryClientError)
