"""Provider resolution, failure classification and retry policy."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from diet_planner.domain.errors import (
    EmptyResponseError,
    ErrorCategory,
    PlanDecodeError,
    PlanGenerationError,
    ProviderHTTPError,
    ProviderNetworkError,
)
from diet_planner.domain.providers import (
    GEMINI_PROVIDER_ID,
    OPENAI_PROVIDER_ID,
    ChatProviderTarget,
    PlanRequest,
    ProviderSettings,
    ProviderTarget,
    SchemaProviderTarget,
)

_INVALID_KEY_MARKERS = ("api key not valid", "invalid api key", "api_key_invalid")
_QUOTA_MARKERS = ("quota", "billing", "resource_exhausted", "insufficient_quota")
_UNAVAILABLE_MARKERS = ("unavailable", "overloaded")

RETRYABLE_CATEGORIES = frozenset(
    {ErrorCategory.TRANSIENT_UNAVAILABLE, ErrorCategory.RESPONSE_DECODE_FAILURE}
)


class ProviderClient(Protocol):
    """Interface implemented once per provider request shape."""

    async def generate(self, target: ProviderTarget, request: PlanRequest) -> str:
        """Send a plan request and return the raw response text."""

    async def ping(self, target: ProviderTarget) -> None:
        """Send a minimal prompt and fail unless a non-empty answer arrives."""


@dataclass(frozen=True)
class BuiltinProvider:
    """Fixed endpoint and model for a built-in provider."""

    label: str
    endpoint: str
    model: str
    env_api_key: str | None = None


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded linear backoff for retryable failures."""

    max_retries: int = 2
    transient_backoff_seconds: float = 0.8
    decode_backoff_seconds: float = 0.6


def resolve_provider(
    settings: ProviderSettings, builtins: Mapping[str, BuiltinProvider]
) -> ProviderTarget:
    """Turn persisted provider settings into a validated request target."""
    selected = settings.selected_provider_id
    builtin = builtins.get(selected)
    if builtin is not None:
        api_key = (settings.builtin_api_keys.get(selected) or "").strip()
        api_key = api_key or (builtin.env_api_key or "").strip()
        if not api_key:
            raise PlanGenerationError(
                ErrorCategory.MISSING_CREDENTIAL,
                user_message(ErrorCategory.MISSING_CREDENTIAL, builtin.label),
            )
        target_type = (
            SchemaProviderTarget
            if selected == GEMINI_PROVIDER_ID
            else ChatProviderTarget
        )
        endpoint = builtin.endpoint
        if selected == OPENAI_PROVIDER_ID:
            endpoint = normalize_chat_endpoint(endpoint)
        return target_type(
            provider_id=selected,
            label=builtin.label,
            api_key=api_key,
            model=builtin.model,
            endpoint=endpoint,
        )

    custom = settings.find_custom(selected)
    if custom is None:
        raise PlanGenerationError(
            ErrorCategory.INCOMPLETE_CONFIGURATION,
            "No valid API provider is selected. Choose one in the provider settings.",
        )
    label = custom.name.strip() or "Custom API"
    if not custom.is_complete():
        raise PlanGenerationError(
            ErrorCategory.INCOMPLETE_CONFIGURATION,
            user_message(ErrorCategory.INCOMPLETE_CONFIGURATION, label),
        )
    base_url = custom.base_url.strip()
    if not base_url.startswith(("http://", "https://")):
        raise PlanGenerationError(
            ErrorCategory.MALFORMED_ENDPOINT,
            f"Base URL must start with http:// or https://. Current value: {base_url}",
        )
    return ChatProviderTarget(
        provider_id=custom.id,
        label=label,
        api_key=custom.api_key.strip(),
        model=custom.model.strip(),
        endpoint=normalize_chat_endpoint(base_url),
    )


def normalize_chat_endpoint(url: str) -> str:
    """Expand a bare base URL into a full chat completions URL."""
    endpoint = url.strip()
    if "/chat/completions" in endpoint:
        return endpoint
    endpoint = endpoint.rstrip("/")
    if "/v1" in endpoint:
        return f"{endpoint}/chat/completions"
    return f"{endpoint}/v1/chat/completions"


def classify_failure(exc: Exception) -> ErrorCategory:
    """Map a provider or decode failure onto a user-facing category."""
    if isinstance(exc, PlanDecodeError | EmptyResponseError):
        return ErrorCategory.RESPONSE_DECODE_FAILURE
    if isinstance(exc, ProviderNetworkError):
        return ErrorCategory.NETWORK_FAILURE
    if not isinstance(exc, ProviderHTTPError):
        return ErrorCategory.PROVIDER_ERROR

    status = exc.status_code
    message = exc.message.lower()
    invalid_key = any(marker in message for marker in _INVALID_KEY_MARKERS)
    if status in (401, 403) or invalid_key:
        return ErrorCategory.INVALID_CREDENTIAL
    if status == 404:
        return ErrorCategory.MALFORMED_ENDPOINT
    if status == 429 or any(marker in message for marker in _QUOTA_MARKERS):
        return ErrorCategory.QUOTA_EXHAUSTED
    if status == 503 or any(marker in message for marker in _UNAVAILABLE_MARKERS):
        return ErrorCategory.TRANSIENT_UNAVAILABLE
    return ErrorCategory.PROVIDER_ERROR


def is_retryable(category: ErrorCategory) -> bool:
    """Return True for failures a fresh attempt may avoid."""
    return category in RETRYABLE_CATEGORIES


def backoff_delay(category: ErrorCategory, attempt: int, policy: RetryPolicy) -> float:
    """Return the linear backoff before retry number ``attempt`` (1-based)."""
    if category == ErrorCategory.RESPONSE_DECODE_FAILURE:
        return policy.decode_backoff_seconds * attempt
    return policy.transient_backoff_seconds * attempt


def user_message(  # noqa: PLR0911
    category: ErrorCategory,
    label: str,
    *,
    detail: str | None = None,
    endpoint: str | None = None,
) -> str:
    """Return the human-readable message for a failure category."""
    if category == ErrorCategory.MISSING_CREDENTIAL:
        return f"No {label} API key is configured. Add one in the provider settings."
    if category == ErrorCategory.INVALID_CREDENTIAL:
        return (
            f"The {label} API key is invalid or lacks permission. Check that it was "
            "pasted correctly (without spaces) and that API access is enabled."
        )
    if category == ErrorCategory.QUOTA_EXHAUSTED:
        return (
            f"The {label} account is over its quota or out of credit. Check the "
            "platform billing page and try again."
        )
    if category == ErrorCategory.TRANSIENT_UNAVAILABLE:
        return (
            f"{label} is temporarily overloaded (503). Automatic retries also "
            "failed; please try again later."
        )
    if category == ErrorCategory.MALFORMED_ENDPOINT:
        return (
            f"The {label} endpoint was not found (404). Check the base URL; it should "
            "look like https://api.openai.com/v1/chat/completions. "
            f"Current URL: {endpoint or 'unknown'}"
        )
    if category == ErrorCategory.NETWORK_FAILURE:
        return (
            f"Could not connect to {label}. Check the network connection, the base "
            f"URL ({endpoint or 'unknown'}), and whether a proxy or firewall blocks "
            f"the request. Original error: {detail or 'network request failed'}"
        )
    if category == ErrorCategory.RESPONSE_DECODE_FAILURE:
        return (
            "The AI response was malformed (JSON parsing failed) even after "
            f"automatic retries. Please try again. Details: {detail or 'n/a'}"
        )
    if category == ErrorCategory.INCOMPLETE_CONFIGURATION:
        return (
            f"The {label} configuration is incomplete. Fill in the name, base URL, "
            "model and API key."
        )
    return detail or f"{label} request failed. Please try again."
