"""
Tests for the httpx UI-action service adapters.
"""

import json

import httpx
import pytest

from acceptance_core.errors import AcceptanceError, ErrorCode
from acceptance_core.execution import (
    FailureKind,
    HttpActionExecutor,
    HttpScreenshotCapture,
    HttpSessionGate,
    classify_failure,
)

BASE_URL = "http://executor.test"


def _transport(handler):
    return httpx.MockTransport(handler)


class TestHttpActionExecutor:
    """POST /actions"""

    @pytest.mark.asyncio
    async def test_success(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"success": True, "elapsedMs": 120})

        async with HttpActionExecutor(BASE_URL, transport=_transport(handler)) as executor:
            result = await executor.execute("check:visual-1", "await element(by.id(\"x\")).tap();", 2000)

        assert result.success
        assert result.elapsed_ms == 120
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/actions"
        assert json.loads(requests[0].content) == {
            "name": "check:visual-1",
            "snippet": "await element(by.id(\"x\")).tap();",
            "timeoutMs": 2000,
        }

    @pytest.mark.asyncio
    async def test_failure_payload(self):
        def handler(request):
            return httpx.Response(200, json={
                "success": False,
                "error": {"message": "Cannot find element", "details": "stack"},
                "evidence": ["/tmp/shot.png"],
            })

        async with HttpActionExecutor(BASE_URL, transport=_transport(handler)) as executor:
            result = await executor.execute("check:visual-1", "snippet", 2000)

        assert not result.success
        assert result.error_message == "Cannot find element"
        assert result.error.details == "stack"
        assert result.evidence == ("/tmp/shot.png",)

    @pytest.mark.asyncio
    async def test_client_timeout_is_unsuccessful_result(self):
        """A transport timeout is reported, not raised"""
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        async with HttpActionExecutor(BASE_URL, transport=_transport(handler)) as executor:
            result = await executor.execute("check:visual-1", "snippet", 1000)

        assert not result.success
        assert result.error_message == "Timed out after 1000 ms"
        assert classify_failure(result.error_message) == FailureKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        def handler(request):
            return httpx.Response(503, text="busy")

        async with HttpActionExecutor(BASE_URL, transport=_transport(handler)) as executor:
            with pytest.raises(AcceptanceError) as exc_info:
                await executor.execute("check:visual-1", "snippet", 1000)

        assert exc_info.value.code == ErrorCode.EXECUTOR_UNAVAILABLE
        assert exc_info.value.details == "busy"

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with HttpActionExecutor(BASE_URL, transport=_transport(handler)) as executor:
            with pytest.raises(AcceptanceError) as exc_info:
                await executor.execute("check:visual-1", "snippet", 1000)

        assert exc_info.value.code == ErrorCode.EXECUTOR_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_shared_client_is_not_closed(self):
        def handler(request):
            return httpx.Response(200, json={"success": True})

        async with httpx.AsyncClient(base_url=BASE_URL, transport=_transport(handler)) as client:
            executor = HttpActionExecutor(BASE_URL, client=client)
            await executor.cleanup()
            assert not client.is_closed
            assert (await executor.execute("a", "b", 100)).success


class TestHttpScreenshotCapture:
    """POST /screenshots"""

    @pytest.mark.asyncio
    async def test_capture(self):
        def handler(request):
            name = json.loads(request.content)["name"]
            return httpx.Response(200, json={"path": f"/artifacts/{name}.png"})

        capture = HttpScreenshotCapture(BASE_URL, transport=_transport(handler))
        try:
            screenshot = await capture.capture("visual-1")
        finally:
            await capture.cleanup()

        assert screenshot.path == "/artifacts/visual-1.png"

    @pytest.mark.asyncio
    async def test_missing_path_raises(self):
        def handler(request):
            return httpx.Response(200, json={})

        capture = HttpScreenshotCapture(BASE_URL, transport=_transport(handler))
        try:
            with pytest.raises(AcceptanceError):
                await capture.capture("visual-1")
        finally:
            await capture.cleanup()


class TestHttpSessionGate:
    """GET /session"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload,ready", [
        ({"ready": True}, True),
        ({"ready": False}, False),
        ({}, False),
    ])
    async def test_ready_flag(self, payload, ready):
        def handler(request):
            assert request.url.path == "/session"
            return httpx.Response(200, json=payload)

        gate = HttpSessionGate(BASE_URL, transport=_transport(handler))
        try:
            assert await gate.is_ready() is ready
        finally:
            await gate.cleanup()

    @pytest.mark.asyncio
    async def test_http_error_means_not_ready(self):
        def handler(request):
            return httpx.Response(500)

        gate = HttpSessionGate(BASE_URL, transport=_transport(handler))
        try:
            assert await gate.is_ready() is False
        finally:
            await gate.cleanup()

    @pytest.mark.asyncio
    async def test_unreachable_means_not_ready(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gate = HttpSessionGate(BASE_URL, transport=_transport(handler))
        try:
            assert await gate.is_ready() is False
        finally:
            await gate.cleanup()

    @pytest.mark.asyncio
    async def test_invalid_json_means_not_ready(self):
        def handler(request):
            return httpx.Response(200, text="not json")

        gate = HttpSessionGate(BASE_URL, transport=_transport(handler))
        try:
            assert await gate.is_ready() is False
        finally:
            await gate.cleanup()
