"""Per-request diet configuration."""

from enum import Enum

from pydantic import BaseModel, Field


class DietMode(str, Enum):
    """How the shopping list relates to the user's kitchen."""

    BUYING = "BUYING"
    FRIDGE = "FRIDGE"


class DietConfig(BaseModel):
    """Preferences for a single plan generation."""

    mode: DietMode = DietMode.BUYING
    flavor_preferences: list[str] = Field(default_factory=lambda: ["light"])
    staple_preference: str = "rice"
    wanted_ingredients: str = ""
    existing_ingredients: str = ""
    meal_prep_repetition: bool = True
    max_ingredients: int | None = Field(default=None, ge=1, le=99)
