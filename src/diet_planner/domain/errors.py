"""Error taxonomy for plan generation."""

from enum import Enum


class ErrorCategory(str, Enum):
    """User-facing failure categories."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXHAUSTED = "quota_exhausted"
    TRANSIENT_UNAVAILABLE = "transient_unavailable"
    MALFORMED_ENDPOINT = "malformed_endpoint"
    NETWORK_FAILURE = "network_failure"
    RESPONSE_DECODE_FAILURE = "response_decode_failure"
    INCOMPLETE_CONFIGURATION = "incomplete_configuration"
    PROVIDER_ERROR = "provider_error"


class ProviderError(Exception):
    """Base class for failures raised by provider clients."""


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ProviderNetworkError(ProviderError):
    """The request never reached the provider or the connection broke."""


class EmptyResponseError(ProviderError):
    """Provider answered successfully but without usable text."""


class PlanDecodeError(ValueError):
    """Response text could not be recovered into a weekly plan."""


class PlanGenerationError(Exception):
    """Classified failure surfaced to callers of the planner."""

    def __init__(
        self, category: ErrorCategory, message: str, *, attempts: int = 0
    ) -> None:
        super().__init__(message)
        self.category = category
        self.message = message
        self.attempts = attempts
