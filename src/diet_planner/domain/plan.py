"""Weekly plan models returned by the LLM."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Meal(_WireModel):
    """One meal: composed dish names, calories and per-dish portions."""

    name: str
    calories: float
    portion: str = ""


class DailyPlan(_WireModel):
    """Three meals for a single day."""

    day: str
    breakfast: Meal
    lunch: Meal
    dinner: Meal

    def combination(self) -> str:
        """Return the three meal names joined, used for duplicate-day checks."""
        return " / ".join(
            meal.name.strip() for meal in (self.breakfast, self.lunch, self.dinner)
        )


class ShoppingItem(_WireModel):
    """Aggregated weekly amount of one ingredient."""

    name: str
    amount: str


class Recipe(_WireModel):
    """Cooking instructions for one dish."""

    dish_name: str = Field(alias="dishName")
    ingredients: str | None = None
    steps: list[str] = Field(default_factory=list)


class WeeklyPlan(_WireModel):
    """Structured plan decoded from the provider response."""

    daily_plans: list[DailyPlan] = Field(alias="dailyPlans")
    shopping_list: list[ShoppingItem] = Field(alias="shoppingList")
    seasonings: list[str] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)


@dataclass(frozen=True)
class PlanResult:
    """A decoded plan together with non-fatal warnings."""

    plan: WeeklyPlan
    warnings: list[str] = field(default_factory=list)
    attempts: int = 1
