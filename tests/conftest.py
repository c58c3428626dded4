"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import pytest

from diet_planner.config import Settings
from diet_planner.domain.diet import DietConfig
from diet_planner.domain.errors import EmptyResponseError
from diet_planner.domain.profile import ActivityLevel, DietGoal, Gender, UserProfile
from diet_planner.domain.providers import (
    PlanRequest,
    ProviderSettings,
    ProviderTarget,
)
from diet_planner.services.planner import PlannerService
from diet_planner.services.prompts import DAYS_OF_WEEK
from diet_planner.services.providers import BuiltinProvider, ProviderClient
from diet_planner.services.settings_store import SettingsRepository, SettingsService

_BREAKFASTS = ("Boiled egg + milk + oats", "Tofu pudding + whole wheat toast")
_LUNCHES = (
    "Rice + pan-seared chicken breast + broccoli",
    "Rice + tomato beef brisket + spinach",
    "Rice + potato stewed chicken + cucumber salad",
    "Noodles + beef with onion + greens",
)
_DINNERS = (
    "Rice + steamed tofu + tomato egg",
    "Rice + radish rib soup + spinach",
    "Chicken salad + corn",
)


def plan_payload(days: int = 7, shopping_items: int = 8) -> dict[str, object]:
    """Build a weekly plan document with distinct daily combinations."""
    daily_plans = []
    for index in range(days):
        breakfast = _BREAKFASTS[index % len(_BREAKFASTS)]
        lunch = _LUNCHES[index % len(_LUNCHES)]
        dinner = _DINNERS[index % len(_DINNERS)]
        daily_plans.append(
            {
                "day": DAYS_OF_WEEK[index % len(DAYS_OF_WEEK)],
                "breakfast": {
                    "name": breakfast,
                    "calories": 400,
                    "portion": "egg 50g + milk 250ml + oats 40g",
                },
                "lunch": {
                    "name": lunch,
                    "calories": 600,
                    "portion": "rice 150g + chicken breast 120g + broccoli 150g",
                },
                "dinner": {
                    "name": dinner,
                    "calories": 550,
                    "portion": "rice 120g + tofu 150g + tomato 150g",
                },
            }
        )
    return {
        "dailyPlans": daily_plans,
        "shoppingList": [
            {"name": f"ingredient {index}", "amount": f"{(index + 1) * 100}g"}
            for index in range(shopping_items)
        ],
        "seasonings": ["salt", "soy sauce"],
        "recipes": [
            {
                "dishName": "Pan-seared chicken breast",
                "ingredients": "chicken breast 240g, salt to taste",
                "steps": ["Slice the chicken.", "Sear 4 minutes per side."],
            }
        ],
    }


def plan_json(days: int = 7, shopping_items: int = 8) -> str:
    """Serialize ``plan_payload`` the way a provider would return it."""
    return json.dumps(plan_payload(days, shopping_items))


@dataclass
class FakeProviderClient(ProviderClient):
    """Provider client replaying scripted responses or exceptions in order."""

    responses: list[str | Exception] = field(default_factory=list)
    calls: list[tuple[ProviderTarget, PlanRequest]] = field(default_factory=list)
    pings: list[ProviderTarget] = field(default_factory=list)
    ping_error: Exception | None = None

    async def generate(self, target: ProviderTarget, request: PlanRequest) -> str:
        self.calls.append((target, request))
        if not self.responses:
            raise EmptyResponseError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def ping(self, target: ProviderTarget) -> None:
        self.pings.append(target)
        if self.ping_error is not None:
            raise self.ping_error

    async def close(self) -> None:
        return None


@dataclass
class InMemorySettingsRepository(SettingsRepository):
    """Dictionary-backed settings repository for tests."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)
    saves: list[str] = field(default_factory=list)

    def load(self, key: str) -> dict[str, object] | None:
        return self.documents.get(key)

    def save(self, key: str, value: dict[str, object]) -> None:
        self.saves.append(key)
        self.documents[key] = value


@dataclass
class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key=None,
        openai_api_key=None,
        supabase_url=None,
        supabase_service_key=None,
        settings_path=str(tmp_path / "settings.json"),
        generation_timeout_seconds=None,
    )


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        age=30,
        weight=70,
        height=175,
        gender=Gender.MALE,
        activity_level=ActivityLevel.SEDENTARY,
        goal=DietGoal.LOSE_WEIGHT,
    )


@pytest.fixture
def diet_config() -> DietConfig:
    return DietConfig(wanted_ingredients="chicken breast, broccoli")


@pytest.fixture
def builtins() -> dict[str, BuiltinProvider]:
    return {
        "gemini": BuiltinProvider(
            label="Gemini",
            endpoint="https://generativelanguage.googleapis.com/v1beta",
            model="gemini-2.5-flash",
        ),
        "openai": BuiltinProvider(
            label="OpenAI",
            endpoint="https://api.openai.com/v1/chat/completions",
            model="gpt-4o-mini",
        ),
    }


@pytest.fixture
def gemini_settings() -> ProviderSettings:
    return ProviderSettings(
        selected_provider_id="gemini", builtin_api_keys={"gemini": "gemini-key"}
    )


@pytest.fixture
def schema_client() -> FakeProviderClient:
    return FakeProviderClient()


@pytest.fixture
def chat_client() -> FakeProviderClient:
    return FakeProviderClient()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def planner_service(
    schema_client: FakeProviderClient,
    chat_client: FakeProviderClient,
    builtins: dict[str, BuiltinProvider],
    recording_sleep: RecordingSleep,
) -> PlannerService:
    return PlannerService(
        clients={"schema": schema_client, "chat": chat_client},
        builtins=builtins,
        sleep=recording_sleep,
    )


@pytest.fixture
def settings_repository() -> InMemorySettingsRepository:
    return InMemorySettingsRepository()


@pytest.fixture
def settings_service(
    settings_repository: InMemorySettingsRepository,
) -> SettingsService:
    return SettingsService(settings_repository)
