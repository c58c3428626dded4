"""Non-fatal checks run on a successfully decoded plan."""

from diet_planner.domain.diet import DietConfig
from diet_planner.domain.plan import WeeklyPlan


def plan_warnings(plan: WeeklyPlan, config: DietConfig) -> list[str]:
    """Return human-readable warnings; an empty list means nothing to report."""
    warnings: list[str] = []
    limit_warning = shopping_list_warning(plan, config.max_ingredients)
    if limit_warning:
        warnings.append(limit_warning)
    warnings.extend(duplicate_day_warnings(plan))
    return warnings


def shopping_list_warning(plan: WeeklyPlan, max_ingredients: int | None) -> str | None:
    """Warn when the shopping list has more entries than the configured cap."""
    count = len(plan.shopping_list)
    if not max_ingredients or count <= max_ingredients:
        return None
    return (
        f"The shopping list has {count} ingredients, more than the configured "
        f"limit of {max_ingredients}."
    )


def duplicate_day_warnings(plan: WeeklyPlan) -> list[str]:
    """Warn for every day that repeats an earlier day's three-meal combination."""
    first_seen: dict[str, str] = {}
    warnings: list[str] = []
    for daily in plan.daily_plans:
        combination = daily.combination()
        if combination in first_seen:
            warnings.append(
                f"{daily.day} repeats the meals of {first_seen[combination]}: "
                f"{combination}"
            )
            continue
        first_seen[combination] = daily.day
    return warnings
