"""HTTP client for the remote ``/convert`` endpoint."""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from htmlgo_workbench.runtime import telemetry

from .models import (
    ConversionErr,
    ConversionOk,
    ConversionRequest,
    ConversionResult,
    Direction,
)

RESULT_FIELDS = {
    Direction.MARKUP_TO_BUILDER: "code",
    Direction.BUILDER_TO_MARKUP: "html",
}


class ConversionBoundary(Protocol):
    """Anything that turns a request into a result without raising."""

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        ...


class HttpConversionClient:
    """Posts conversion requests and normalizes every failure into ``ConversionErr``.

    The orchestrator never sees exceptions from here: non-success statuses,
    unreachable hosts, timeouts and non-JSON bodies all come back as error
    results carrying a human-readable message.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 10.0,
        path: str = "/convert",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout = timeout
        self._transport = transport
        self.logger = telemetry.get_logger("htmlgo_workbench.client")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.path}"

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        payload = request.to_payload()
        self.logger.debug(f"POST {self.endpoint} direction={payload['direction']}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            self.logger.warning(f"Converter request failed: {exc!r}")
            return ConversionErr(f"converter request failed: {exc}")

        if not response.is_success:
            return ConversionErr(_error_text(response))

        try:
            data = response.json()
        except ValueError:
            return ConversionErr(f"converter returned a non-JSON body: {response.text}")
        if not isinstance(data, dict):
            return ConversionErr("converter returned an unexpected JSON shape")

        error = data.get("error")
        if error:
            return ConversionErr(str(error))
        output = data.get(RESULT_FIELDS[request.direction])
        return ConversionOk(output if isinstance(output, str) else "")


def _error_text(response: httpx.Response) -> str:
    try:
        data: Any = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    text = response.text.strip()
    return text or f"converter returned HTTP {response.status_code}"


__all__ = ["ConversionBoundary", "HttpConversionClient", "RESULT_FIELDS"]
