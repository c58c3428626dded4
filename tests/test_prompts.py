"""Tests for weekly plan prompt construction."""

from diet_planner.domain.diet import DietConfig, DietMode
from diet_planner.services.metrics import compute_health_metrics
from diet_planner.services.prompts import (
    OWNED_INGREDIENT_MARKER,
    PLAN_RESPONSE_SCHEMA,
    TRUNCATION_MARKER,
    PromptOptions,
    build_weekly_plan_prompt,
    calorie_band,
    truncate_reference,
)


def test_prompt_is_deterministic(profile, diet_config) -> None:
    metrics = compute_health_metrics(profile)

    first = build_weekly_plan_prompt(profile, metrics, diet_config)
    second = build_weekly_plan_prompt(profile, metrics, diet_config)

    assert first == second


def test_prompt_contains_mandatory_rules(profile, diet_config) -> None:
    metrics = compute_health_metrics(profile)

    prompt = build_weekly_plan_prompt(profile, metrics, diet_config)

    assert "<Constraints>" in prompt
    assert "<OutputSpecs>" in prompt
    assert "dairy with citrus" in prompt
    assert "every pair of days" in prompt
    assert "+/-5%" in prompt
    assert "at most 3 steps per recipe" in prompt
    assert f"{metrics.target_calories} kcal per day" in prompt
    assert "wants to eat: chicken breast, broccoli" in prompt


def test_prompt_states_ingredient_cap(profile) -> None:
    metrics = compute_health_metrics(profile)
    config = DietConfig(max_ingredients=10)

    prompt = build_weekly_plan_prompt(profile, metrics, config)

    assert "MANDATORY: shoppingList must contain at most 10 entries" in prompt
    assert "hard numeric ceiling" in prompt


def test_prompt_without_cap_has_no_limit(profile) -> None:
    metrics = compute_health_metrics(profile)

    prompt = build_weekly_plan_prompt(profile, metrics, DietConfig())

    assert "No limit on the number of entries" in prompt
    assert "MANDATORY: shoppingList" not in prompt


def test_fridge_mode_marks_owned_ingredients(profile) -> None:
    metrics = compute_health_metrics(profile)
    config = DietConfig(mode=DietMode.FRIDGE, existing_ingredients="egg, tomato")

    prompt = build_weekly_plan_prompt(profile, metrics, config)

    assert OWNED_INGREDIENT_MARKER in prompt
    assert "already has: egg, tomato" in prompt


def test_buying_mode_omits_owned_marker(profile, diet_config) -> None:
    metrics = compute_health_metrics(profile)

    prompt = build_weekly_plan_prompt(profile, metrics, diet_config)

    assert OWNED_INGREDIENT_MARKER not in prompt


def test_calorie_band_uses_ten_percent_tolerance(profile) -> None:
    metrics = compute_health_metrics(profile)

    low, high = calorie_band(metrics, 0.1)

    assert metrics.target_calories == 1479
    assert (low, high) == (1331, 1627)


def test_prompt_includes_nutrition_reference(profile, diet_config) -> None:
    metrics = compute_health_metrics(profile)

    prompt = build_weekly_plan_prompt(profile, metrics, diet_config)

    assert "[Nutrition reference: per 100 g" in prompt
    assert "- chicken breast (cooked): 133 kcal" in prompt


def test_reference_truncated_with_marker(profile, diet_config) -> None:
    metrics = compute_health_metrics(profile)
    options = PromptOptions(reference_char_limit=120)

    prompt = build_weekly_plan_prompt(profile, metrics, diet_config, options)

    assert prompt.endswith(TRUNCATION_MARKER)


def test_truncate_reference_keeps_short_text() -> None:
    assert truncate_reference("short", 10) == "short"
    assert truncate_reference("abcdef", 3) == f"abc\n{TRUNCATION_MARKER}"


def test_response_schema_requires_plan_fields() -> None:
    assert PLAN_RESPONSE_SCHEMA["required"] == [
        "dailyPlans",
        "shoppingList",
        "seasonings",
        "recipes",
    ]
