"""
httpx adapters for a remote UI-action service.

The service exposes:
    POST /actions      {"name", "snippet", "timeoutMs"} -> action result payload
    POST /screenshots  {"name"} -> {"path"}
    GET  /session      -> {"ready": bool}
"""

from __future__ import annotations

from typing import Optional

import httpx

from acceptance_core.errors import AcceptanceError, ErrorCode
from acceptance_core.utils import get_logger, validate_not_empty
from .base import (
    ActionError,
    ActionResult,
    BaseActionExecutor,
    BaseScreenshotCapture,
    BaseSessionGate,
    Screenshot,
)

logger = get_logger("http_client")

DEFAULT_HTTP_TIMEOUT_S = 30.0


class _HttpCollaborator:
    """Shared AsyncClient handling; the client is closed only if created here."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = validate_not_empty(base_url, "base_url").rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=DEFAULT_HTTP_TIMEOUT_S,
        )

    def _raise_unavailable(self, message: str, details: Optional[str] = None):
        raise AcceptanceError(message, code=ErrorCode.EXECUTOR_UNAVAILABLE, details=details)

    async def _post(self, path: str, payload: dict, timeout_s: float) -> dict:
        try:
            response = await self.client.post(path, json=payload, timeout=timeout_s)
        except httpx.TimeoutException:
            raise
        except httpx.HTTPError as e:
            self._raise_unavailable(f"UI-action service unreachable at {self.base_url}", str(e))

        if response.status_code >= 400:
            self._raise_unavailable(
                f"UI-action service returned HTTP {response.status_code} for {path}",
                response.text[:500],
            )
        return response.json()

    async def cleanup(self):
        if self._owns_client:
            await self.client.aclose()


class HttpActionExecutor(_HttpCollaborator, BaseActionExecutor):
    """
    Executes snippets through POST /actions.

    The HTTP timeout is the action timeout plus a margin, so the service
    gets to report its own timeout first. A client-side timeout still
    becomes an unsuccessful result rather than an exception.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_margin_s: float = 5.0,
    ):
        super().__init__(base_url, client=client, transport=transport)
        self.timeout_margin_s = timeout_margin_s

    async def execute(self, name: str, action_spec: str, timeout_ms: int) -> ActionResult:
        payload = {"name": name, "snippet": action_spec, "timeoutMs": timeout_ms}
        timeout_s = timeout_ms / 1000 + self.timeout_margin_s

        logger.debug("action_request", name=name, timeout_ms=timeout_ms)
        try:
            data = await self._post("/actions", payload, timeout_s)
        except httpx.TimeoutException:
            logger.warning("action_timed_out", name=name, timeout_ms=timeout_ms)
            return ActionResult(
                success=False,
                elapsed_ms=int(timeout_s * 1000),
                error=ActionError(message=f"Timed out after {timeout_ms} ms"),
            )

        return ActionResult.from_dict(data)


class HttpScreenshotCapture(_HttpCollaborator, BaseScreenshotCapture):
    async def capture(self, name: str) -> Screenshot:
        data = await self._post("/screenshots", {"name": name}, DEFAULT_HTTP_TIMEOUT_S)
        path = data.get("path")
        if not path:
            self._raise_unavailable(f"Screenshot service returned no path for '{name}'")
        return Screenshot(path=path)


class HttpSessionGate(_HttpCollaborator, BaseSessionGate):
    """Session readiness via GET /session; any transport problem means not ready."""

    async def is_ready(self) -> bool:
        try:
            response = await self.client.get("/session")
            response.raise_for_status()
            return bool(response.json().get("ready"))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("session_check_failed", url=self.base_url, error=str(e))
            return False
