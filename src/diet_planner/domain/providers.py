"""LLM provider configuration and resolved provider targets."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GEMINI_PROVIDER_ID = "gemini"
OPENAI_PROVIDER_ID = "openai"
BUILTIN_PROVIDER_IDS: tuple[str, ...] = (GEMINI_PROVIDER_ID, OPENAI_PROVIDER_ID)
PROVIDER_SETTINGS_VERSION = 2


class CustomProvider(BaseModel):
    """User-defined OpenAI-compatible chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    base_url: str = Field(default="", alias="baseUrl")
    model: str = ""
    api_key: str = Field(default="", alias="apiKey")

    def is_complete(self) -> bool:
        """Return True when URL, model and key are all filled in."""
        return all(
            value.strip() for value in (self.base_url, self.model, self.api_key)
        )


class ProviderSettings(BaseModel):
    """Persisted provider selection, built-in keys and custom providers."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = PROVIDER_SETTINGS_VERSION
    selected_provider_id: str = Field(
        default=GEMINI_PROVIDER_ID, alias="selectedProviderId"
    )
    builtin_api_keys: dict[str, str] = Field(
        default_factory=dict, alias="builtinApiKeys"
    )
    custom_providers: list[CustomProvider] = Field(
        default_factory=list, alias="customProviders"
    )

    def find_custom(self, provider_id: str) -> CustomProvider | None:
        """Return the custom provider with the given id, if any."""
        for provider in self.custom_providers:
            if provider.id == provider_id:
                return provider
        return None


@dataclass(frozen=True)
class SchemaProviderTarget:
    """Provider that enforces a response schema server-side."""

    provider_id: str
    label: str
    api_key: str
    model: str
    endpoint: str
    kind: Literal["schema"] = "schema"


@dataclass(frozen=True)
class ChatProviderTarget:
    """OpenAI-compatible chat completions provider."""

    provider_id: str
    label: str
    api_key: str
    model: str
    endpoint: str
    kind: Literal["chat"] = "chat"


ProviderTarget = SchemaProviderTarget | ChatProviderTarget


@dataclass(frozen=True)
class PlanRequest:
    """Normalized request handed to every provider client."""

    prompt: str
    system_prompt: str
    response_schema: dict[str, object]
    temperature: float = 0.4
    max_output_tokens: int = 4096
