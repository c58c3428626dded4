"""OpenAI-compatible chat completions client."""

from dataclasses import dataclass
from typing import Any

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    AsyncOpenAI,
)
from openai.types.chat import ChatCompletion

from diet_planner.domain.errors import (
    EmptyResponseError,
    ProviderHTTPError,
    ProviderNetworkError,
)
from diet_planner.domain.providers import PlanRequest, ProviderTarget
from diet_planner.services.prompts import CONNECTION_TEST_PROMPT
from diet_planner.services.providers import ProviderClient

_CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass
class OpenAIChatClient(ProviderClient):
    """Chat client for OpenAI and compatible endpoints (DeepSeek, Kimi, Qwen...)."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 120

    @classmethod
    def create(cls, timeout_seconds: float = 120) -> "OpenAIChatClient":
        """Create a chat client sharing one httpx session across endpoints."""
        return cls(http_client=httpx.AsyncClient(), timeout_seconds=timeout_seconds)

    async def generate(self, target: ProviderTarget, request: PlanRequest) -> str:
        """Send the plan prompt with the JSON contract as system message."""
        completion = await self._create(
            target,
            messages=[
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.prompt},
            ],
            response_format={"type": "json_object"},
            temperature=request.temperature,
            max_tokens=request.max_output_tokens,
        )
        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise EmptyResponseError(f"{target.label} returned no content")
        return content

    async def ping(self, target: ProviderTarget) -> None:
        """Send a tiny prompt and require some text back."""
        completion = await self._create(
            target,
            messages=[{"role": "user", "content": CONNECTION_TEST_PROMPT}],
            max_tokens=8,
            temperature=0,
        )
        if not completion.choices or not completion.choices[0].message.content:
            raise EmptyResponseError(f"{target.label} returned no content")

    async def _create(self, target: ProviderTarget, **kwargs: Any) -> ChatCompletion:
        client = AsyncOpenAI(
            api_key=target.api_key,
            base_url=chat_base_url(target.endpoint),
            http_client=self.http_client,
            max_retries=0,
            timeout=self.timeout_seconds,
        )
        try:
            completion = await client.chat.completions.create(
                model=target.model, **kwargs
            )
        except APIStatusError as exc:
            raise ProviderHTTPError(exc.status_code, exc.message) from exc
        except APIConnectionError as exc:
            raise ProviderNetworkError(str(exc)) from exc
        except (APIResponseValidationError, ValueError) as exc:
            message = f"{target.label} returned an unreadable body"
            raise EmptyResponseError(message) from exc
        if not isinstance(completion, ChatCompletion):
            raise EmptyResponseError(f"{target.label} returned a non-JSON body")
        return completion

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def chat_base_url(endpoint: str) -> str:
    """Return the SDK base URL for a full chat completions endpoint."""
    if endpoint.endswith(_CHAT_COMPLETIONS_SUFFIX):
        return endpoint[: -len(_CHAT_COMPLETIONS_SUFFIX)]
    return endpoint
