"""Plain-text rendering of a weekly plan for sharing."""

import re

from diet_planner.domain.plan import Meal, WeeklyPlan
from diet_planner.domain.profile import GOAL_LABELS, HealthMetrics, UserProfile

_VAGUE_QUALIFIER = re.compile(
    r"(?:\babout\b|\bapproximately\b|\bapprox\.|~)\s*", re.IGNORECASE
)


def format_plan_text(
    plan: WeeklyPlan, profile: UserProfile, metrics: HealthMetrics
) -> str:
    """Render the plan as shareable text: meals, shopping list, seasonings."""
    lines = [
        "My healthy meal plan for this week",
        "",
        f"Goal: {GOAL_LABELS[profile.goal]} "
        f"(target intake {metrics.target_calories} kcal/day)",
        "",
        "Meals:",
    ]
    for daily in plan.daily_plans:
        lines.append(f"{daily.day}:")
        lines.append(f"  - Breakfast: {meal_line(daily.breakfast)}")
        lines.append(f"  - Lunch: {meal_line(daily.lunch)}")
        lines.append(f"  - Dinner: {meal_line(daily.dinner)}")

    lines.extend(["", "Shopping list:"])
    lines.extend(f"- {item.name}: {item.amount}" for item in plan.shopping_list)

    if plan.seasonings:
        lines.extend(["", "Seasonings:", ", ".join(plan.seasonings)])

    lines.extend(["", "---", "Generated by Diet Planner"])
    return "\n".join(lines)


def format_recipes_text(plan: WeeklyPlan) -> str:
    """Render every recipe with its ingredients and numbered steps."""
    blocks: list[str] = []
    for recipe in plan.recipes:
        lines = [recipe.dish_name]
        if recipe.ingredients:
            lines.append(f"  Ingredients: {recipe.ingredients}")
        lines.extend(f"  {index}. {step}" for index, step in enumerate(recipe.steps, 1))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def meal_line(meal: Meal | None) -> str:
    """Prefer the portion text, fall back to the name, drop vague qualifiers."""
    if meal is None:
        return "TBD"
    text = meal.portion.strip() or meal.name.strip() or "TBD"
    return _VAGUE_QUALIFIER.sub("", text)
