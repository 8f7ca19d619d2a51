"""Unit tests for the Gemini API client."""

from __future__ import annotations

import httpx
import pytest
from respx import MockRouter

from config import Settings
from services import GeminiAPIClient


async def test_generate_content_success(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, json={"candidates": []}))

    result = await GeminiAPIClient(settings).generate_content({"contents": []}, "k")

    assert result.ok
    assert result.payload == {"candidates": []}
    assert result.exception is None


async def test_generate_content_keeps_error_text(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(500, text="backend exploded"))

    result = await GeminiAPIClient(settings).generate_content({}, "k")

    assert not result.ok
    assert result.status_code == 500
    assert result.reason == "Internal Server Error"
    assert result.error_text == "backend exploded"
    assert result.payload is None


async def test_generate_content_timeout(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    respx_mock.post(upstream_url).mock(side_effect=httpx.ConnectTimeout("slow"))

    result = await GeminiAPIClient(settings).generate_content({}, "k")

    assert not result.ok
    assert isinstance(result.exception, httpx.TimeoutException)


async def test_generate_content_invalid_json(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, text="not json"))

    result = await GeminiAPIClient(settings).generate_content({}, "k")

    assert not result.ok
    assert isinstance(result.exception, ValueError)


def test_client_timeout_follows_settings() -> None:
    client = GeminiAPIClient(Settings(UPSTREAM_TIMEOUT=7.5))

    assert client.timeout.read == 7.5
    assert client.timeout.connect == 5.0


async def test_generate_content_sends_null_payload(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    route = respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, json={}))

    await GeminiAPIClient(settings).generate_content(None, "k")

    assert route.calls.last.request.content == b"null"
    assert route.calls.last.request.headers["content-type"] == "application/json"


async def test_generate_content_rejects_nan_in_response(
    settings: Settings, respx_mock: MockRouter, upstream_url: str
) -> None:
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, text='{"score": NaN}'))

    result = await GeminiAPIClient(settings).generate_content({}, "k")

    assert not result.ok
    assert isinstance(result.exception, ValueError)
