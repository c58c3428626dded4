"""Gemini generateContent client for schema-constrained generation."""

from dataclasses import dataclass

import httpx

from diet_planner.domain.errors import (
    EmptyResponseError,
    ProviderHTTPError,
    ProviderNetworkError,
)
from diet_planner.domain.providers import PlanRequest, ProviderTarget
from diet_planner.services.prompts import CONNECTION_TEST_PROMPT
from diet_planner.services.providers import ProviderClient


@dataclass
class HttpxGeminiClient(ProviderClient):
    """HTTPX-backed Gemini client that declares the response schema."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 120

    @classmethod
    def create(cls, timeout_seconds: float = 120) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), timeout_seconds=timeout_seconds)

    async def generate(self, target: ProviderTarget, request: PlanRequest) -> str:
        """Request a weekly plan constrained by ``request.response_schema``."""
        payload: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": request.response_schema,
                "temperature": request.temperature,
                "maxOutputTokens": request.max_output_tokens,
            },
        }
        data = await self._post(target, payload)
        text = _candidate_text(data)
        if not text:
            raise EmptyResponseError(f"{target.label} returned no content")
        return text

    async def ping(self, target: ProviderTarget) -> None:
        """Send a minimal prompt and require some text back."""
        payload: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": CONNECTION_TEST_PROMPT}]}]
        }
        data = await self._post(target, payload)
        if not _candidate_text(data):
            raise EmptyResponseError(f"{target.label} returned no content")

    async def _post(
        self, target: ProviderTarget, payload: dict[str, object]
    ) -> dict[str, object]:
        url = f"{target.endpoint.rstrip('/')}/models/{target.model}:generateContent"
        try:
            response = await self.http_client.post(
                url,
                headers={"x-goog-api-key": target.api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
        except httpx.TransportError as exc:
            raise ProviderNetworkError(str(exc) or type(exc).__name__) from exc
        if response.is_error:
            raise ProviderHTTPError(response.status_code, _error_message(response))
        try:
            data = response.json()
        except ValueError as exc:
            message = f"{target.label} returned a non-JSON body"
            raise EmptyResponseError(message) from exc
        if not isinstance(data, dict):
            raise EmptyResponseError(f"{target.label} returned an unexpected body")
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _candidate_text(data: dict[str, object]) -> str:
    """Join the text parts of the first candidate."""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    texts = (part.get("text", "") for part in parts if isinstance(part, dict))
    return "".join(str(text) for text in texts).strip()


def _error_message(response: httpx.Response) -> str:
    """Extract the provider error message, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        status = error.get("status")
        message = str(error.get("message", ""))
        return f"{status}: {message}" if status else message
    return response.text[:200]
