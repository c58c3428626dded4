"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from diet_planner.adapters.file_settings_repository import JsonFileSettingsRepository
from diet_planner.adapters.gemini_client import HttpxGeminiClient
from diet_planner.adapters.openai_chat_client import OpenAIChatClient
from diet_planner.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from diet_planner.config import Settings
from diet_planner.domain.providers import GEMINI_PROVIDER_ID, OPENAI_PROVIDER_ID
from diet_planner.services.planner import PlannerService
from diet_planner.services.prompts import PromptOptions
from diet_planner.services.providers import BuiltinProvider, RetryPolicy
from diet_planner.services.settings_store import SettingsRepository, SettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    settings_service: SettingsService
    planner_service: PlannerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gemini_client = HttpxGeminiClient.create(resolved_settings.request_timeout_seconds)
    chat_client = OpenAIChatClient.create(resolved_settings.request_timeout_seconds)
    planner_service = PlannerService(
        clients={"schema": gemini_client, "chat": chat_client},
        builtins=builtin_providers(resolved_settings),
        retry_policy=RetryPolicy(
            max_retries=resolved_settings.max_retries,
            transient_backoff_seconds=resolved_settings.transient_backoff_seconds,
            decode_backoff_seconds=resolved_settings.decode_backoff_seconds,
        ),
        prompt_options=PromptOptions(
            reference_max_entries=resolved_settings.reference_max_entries,
            reference_char_limit=resolved_settings.reference_char_limit,
        ),
        temperature=resolved_settings.temperature,
        max_output_tokens=resolved_settings.max_output_tokens,
        timeout_seconds=resolved_settings.generation_timeout_seconds,
    )
    settings_service = SettingsService(_settings_repository(resolved_settings))

    async def close_resources() -> None:
        await gemini_client.close()
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        settings_service=settings_service,
        planner_service=planner_service,
        close_resources=close_resources,
    )


def builtin_providers(settings: Settings) -> dict[str, BuiltinProvider]:
    """Return the built-in providers with their endpoints and env keys."""
    return {
        GEMINI_PROVIDER_ID: BuiltinProvider(
            label="Gemini",
            endpoint=settings.gemini_base_url,
            model=settings.gemini_model,
            env_api_key=settings.gemini_api_key,
        ),
        OPENAI_PROVIDER_ID: BuiltinProvider(
            label="OpenAI",
            endpoint=settings.openai_endpoint,
            model=settings.openai_model,
            env_api_key=settings.openai_api_key,
        ),
    }


def _settings_repository(settings: Settings) -> SettingsRepository:
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseSettingsRepository(client)
    return JsonFileSettingsRepository(Path(settings.settings_path).expanduser())
