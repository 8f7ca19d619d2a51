import httpx
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional
from config import Settings

logger = logging.getLogger(__name__)


def reject_constant(name: str):
    """json parse_constant hook: NaN and Infinity are not JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


@dataclass
class UpstreamResult:
    """Outcome of one call to the Gemini API"""
    status_code: int = 0
    reason: str = ""
    payload: Any = None
    error_text: str = ""
    exception: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.exception is None and 200 <= self.status_code < 300


class GeminiAPIClient:
    """Forwards a JSON payload to the Gemini generateContent endpoint."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.timeout = httpx.Timeout(settings.UPSTREAM_TIMEOUT, connect=5.0)

    async def generate_content(self, payload: Any, api_key: str) -> UpstreamResult:
        url = self.settings.upstream_url
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.debug(f"API Request: POST {url}")
                response = await client.post(
                    url,
                    params={"key": api_key},
                    headers={"Content-Type": "application/json"},
                    content=json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"),
                )
                logger.debug(f"API Response: {response.status_code}")

                if not response.is_success:
                    return UpstreamResult(
                        status_code=response.status_code,
                        reason=response.reason_phrase,
                        error_text=response.text,
                    )

                return UpstreamResult(
                    status_code=response.status_code,
                    reason=response.reason_phrase,
                    payload=response.json(parse_constant=reject_constant),
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout contacting Gemini API: {type(e).__name__}")
            return UpstreamResult(exception=e)
        except httpx.RequestError as e:
            logger.error(f"Connection error to Gemini API: {type(e).__name__}")
            return UpstreamResult(exception=e)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Gemini API returned a non-JSON body: {e}")
            return UpstreamResult(exception=e)
