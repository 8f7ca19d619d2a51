import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from config import Settings
from services import GeminiAPIClient, UpstreamResult, reject_constant

logger = logging.getLogger(__name__)

ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ErrorKind(str, Enum):
    METHOD_NOT_ALLOWED = "method_not_allowed"
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


@dataclass
class RelayResult:
    """Relay step result: a payload to pass on, or a tagged error."""
    payload: Any = None
    error: Optional[ErrorKind] = None
    status_code: int = 200
    message: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def method_not_allowed(cls) -> "RelayResult":
        return cls(error=ErrorKind.METHOD_NOT_ALLOWED, status_code=405, message="Method Not Allowed")

    @classmethod
    def not_configured(cls) -> "RelayResult":
        return cls(error=ErrorKind.CONFIGURATION, status_code=500, message="API key is not configured.")

    @classmethod
    def upstream_error(cls, status_code: int, reason: str) -> "RelayResult":
        return cls(error=ErrorKind.UPSTREAM, status_code=status_code, message=f"API Error: {reason}")

    @classmethod
    def internal_error(cls) -> "RelayResult":
        return cls(error=ErrorKind.INTERNAL, status_code=500, message="An internal error occurred.")

    def to_response(self) -> JSONResponse:
        if not self.ok:
            return JSONResponse(status_code=self.status_code, content={"error": self.message})
        return JSONResponse(status_code=self.status_code, content=self.payload, headers=self.headers)


class RelayHandler:
    """
    Relays POSTed JSON to the Gemini API using the server-held key.

    Every outcome, including unexpected faults, is rendered as a JSON
    response; nothing is retried.
    """

    def __init__(self, settings: Settings, api_client: Optional[GeminiAPIClient] = None):
        self.settings = settings
        self.api_client = api_client or GeminiAPIClient(settings)

    async def handle(self, request: Request) -> Response:
        logger.info(f"Relaying request: {request.method} {request.url.path}")

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=PREFLIGHT_HEADERS)

        try:
            result = await self._relay(request)
            return result.to_response()
        except Exception as e:
            # Exception text can carry the upstream URL, and with it the key
            logger.error(f"Proxy error: {type(e).__name__}")
            return RelayResult.internal_error().to_response()

    async def _relay(self, request: Request) -> RelayResult:
        if request.method != "POST":
            return RelayResult.method_not_allowed()

        api_key = self.settings.GEMINI_API_KEY
        if not api_key:
            logger.error("GEMINI_API_KEY is not set; refusing to forward")
            return RelayResult.not_configured()

        body = self.parse_body(await request.body())
        if not body.ok:
            return body

        upstream = await self.api_client.generate_content(body.payload, api_key)
        return self.interpret(upstream)

    @staticmethod
    def parse_body(raw: bytes) -> RelayResult:
        try:
            return RelayResult(payload=json.loads(raw, parse_constant=reject_constant))
        except ValueError as e:
            logger.error(f"Invalid JSON in request body: {e}")
            return RelayResult.internal_error()

    @staticmethod
    def interpret(upstream: UpstreamResult) -> RelayResult:
        if upstream.exception is not None:
            return RelayResult.internal_error()

        if not upstream.ok:
            logger.error(f"Gemini API Error {upstream.status_code}: {upstream.error_text}")
            return RelayResult.upstream_error(upstream.status_code, upstream.reason)

        return RelayResult(payload=upstream.payload, status_code=200, headers=dict(ALLOW_ORIGIN))
