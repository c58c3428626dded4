"""Weekly plan generation: prompt, provider call, retry and decoding."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeVar

from diet_planner.domain.diet import DietConfig
from diet_planner.domain.errors import (
    ErrorCategory,
    PlanDecodeError,
    PlanGenerationError,
    ProviderError,
)
from diet_planner.domain.plan import PlanResult, WeeklyPlan
from diet_planner.domain.profile import HealthMetrics, UserProfile
from diet_planner.domain.providers import PlanRequest, ProviderSettings, ProviderTarget
from diet_planner.services.plan_checks import plan_warnings
from diet_planner.services.plan_parser import parse_plan
from diet_planner.services.prompts import (
    PLAN_RESPONSE_SCHEMA,
    PLAN_SYSTEM_PROMPT,
    PromptOptions,
    build_weekly_plan_prompt,
)
from diet_planner.services.providers import (
    BuiltinProvider,
    ProviderClient,
    RetryPolicy,
    backoff_delay,
    classify_failure,
    is_retryable,
    resolve_provider,
    user_message,
)

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class PlannerService:
    """Caller-facing entry points for plan generation and connection tests."""

    clients: Mapping[str, ProviderClient]
    builtins: Mapping[str, BuiltinProvider]
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    prompt_options: PromptOptions = field(default_factory=PromptOptions)
    temperature: float = 0.4
    max_output_tokens: int = 4096
    timeout_seconds: float | None = None
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def generate_weekly_plan(
        self,
        profile: UserProfile,
        metrics: HealthMetrics,
        config: DietConfig,
        provider_settings: ProviderSettings,
    ) -> PlanResult:
        """Generate and decode a weekly plan; raises ``PlanGenerationError``."""
        target = resolve_provider(provider_settings, self.builtins)
        request = PlanRequest(
            prompt=build_weekly_plan_prompt(
                profile, metrics, config, self.prompt_options
            ),
            system_prompt=PLAN_SYSTEM_PROMPT,
            response_schema=PLAN_RESPONSE_SCHEMA,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        _logger.info(
            "Generating weekly plan: provider=%s model=%s mode=%s prompt_chars=%s",
            target.provider_id,
            target.model,
            target.kind,
            len(request.prompt),
        )
        plan, attempts = await self._with_timeout(
            self._generate_with_retry(target, request), target
        )
        warnings = plan_warnings(plan, config)
        for warning in warnings:
            _logger.warning("Plan check: %s", warning)
        _logger.info(
            "Weekly plan ready: days=%s shopping_items=%s attempts=%s",
            len(plan.daily_plans),
            len(plan.shopping_list),
            attempts,
        )
        return PlanResult(plan=plan, warnings=warnings, attempts=attempts)

    async def test_connection(self, provider_settings: ProviderSettings) -> None:
        """Check that the selected provider answers; raises on failure."""
        target = resolve_provider(provider_settings, self.builtins)
        client = self._client_for(target)
        try:
            await self._with_timeout(client.ping(target), target)
        except ProviderError as exc:
            raise _generation_error(classify_failure(exc), target, exc, 1) from exc
        _logger.info("Connection test succeeded: provider=%s", target.provider_id)

    async def _generate_with_retry(
        self, target: ProviderTarget, request: PlanRequest
    ) -> tuple[WeeklyPlan, int]:
        client = self._client_for(target)
        attempt = 0
        while True:
            attempt += 1
            try:
                raw = await client.generate(target, request)
                return parse_plan(raw), attempt
            except (ProviderError, PlanDecodeError) as exc:
                category = classify_failure(exc)
                exhausted = attempt > self.retry_policy.max_retries
                if not is_retryable(category) or exhausted:
                    raise _generation_error(category, target, exc, attempt) from exc
                delay = backoff_delay(category, attempt, self.retry_policy)
                _logger.warning(
                    "Plan generation failed (attempt %s/%s, category=%s): %s; "
                    "retrying in %.1fs",
                    attempt,
                    self.retry_policy.max_retries + 1,
                    category.value,
                    exc,
                    delay,
                )
                await self.sleep(delay)

    async def _with_timeout(self, awaitable: Awaitable[T], target: ProviderTarget) -> T:
        if self.timeout_seconds is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, self.timeout_seconds)
        except TimeoutError as exc:
            detail = f"no response within {self.timeout_seconds:g} seconds"
            raise PlanGenerationError(
                ErrorCategory.NETWORK_FAILURE,
                user_message(
                    ErrorCategory.NETWORK_FAILURE,
                    target.label,
                    detail=detail,
                    endpoint=target.endpoint,
                ),
            ) from exc

    def _client_for(self, target: ProviderTarget) -> ProviderClient:
        client = self.clients.get(target.kind)
        if client is None:
            raise PlanGenerationError(
                ErrorCategory.PROVIDER_ERROR,
                f"No client is registered for {target.kind} providers.",
            )
        return client


def _generation_error(
    category: ErrorCategory, target: ProviderTarget, exc: Exception, attempts: int
) -> PlanGenerationError:
    _logger.error(
        "Provider %s failed after %s attempt(s): category=%s error=%s",
        target.provider_id,
        attempts,
        category.value,
        exc,
    )
    message = user_message(
        category, target.label, detail=str(exc), endpoint=target.endpoint
    )
    return PlanGenerationError(category, message, attempts=attempts)
