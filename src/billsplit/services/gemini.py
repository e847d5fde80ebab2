from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import aiohttp

from billsplit.config import Settings
from billsplit.errors import ErrorKind, ServiceError
from billsplit.logging import get_logger

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def build_request_body(prompt: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": 0.1, "maxOutputTokens": 2048},
    }


def decode_body(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return None


def extract_candidate_text(payload: Any) -> str:
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ServiceError(ErrorKind.PARSE_ERROR, "Unexpected response from text model") from exc
    if not isinstance(text, str):
        raise ServiceError(ErrorKind.PARSE_ERROR, "Unexpected response from text model")
    return text


def extract_api_error(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return None


class GeminiClient:
    def __init__(self, api_key: str, model: str, timeout: float = 30.0, url: Optional[str] = None) -> None:
        self._api_key = api_key
        self._url = url or GEMINI_URL.format(model=model)
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._log = get_logger(__name__)

    async def generate(self, prompt: str) -> str:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(
                    self._url,
                    params={"key": self._api_key},
                    json=build_request_body(prompt),
                ) as response:
                    status = response.status
                    body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self._log.warning("gemini.request.failed", error=str(exc))
            raise ServiceError(ErrorKind.NETWORK_ERROR, "Network error occurred") from exc

        # Non-200 bodies may not be JSON; they only supply the error message.
        if status != 200:
            message = extract_api_error(decode_body(body)) or f"API returned status {status}"
            self._log.warning("gemini.request.rejected", status=status, message=message)
            raise ServiceError(ErrorKind.NETWORK_ERROR, f"Gemini: {message}")

        return extract_candidate_text(decode_body(body))


def build_text_model(settings: Settings) -> GeminiClient:
    if not settings.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY is not configured")
    return GeminiClient(api_key=settings.gemini_api_key, model=settings.gemini_model)
