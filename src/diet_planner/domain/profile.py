"""Profile and derived health metric models."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class Gender(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "MALE"
    FEMALE = "FEMALE"


class ActivityLevel(str, Enum):
    """Weekly exercise frequency."""

    SEDENTARY = "SEDENTARY"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class DietGoal(str, Enum):
    """Body composition goal."""

    LOSE_WEIGHT = "LOSE_WEIGHT"
    FAT_LOSS = "FAT_LOSS"
    MUSCLE_GAIN = "MUSCLE_GAIN"


GOAL_LABELS: dict[DietGoal, str] = {
    DietGoal.LOSE_WEIGHT: "lose weight",
    DietGoal.FAT_LOSS: "fat loss",
    DietGoal.MUSCLE_GAIN: "muscle gain",
}


class UserProfile(BaseModel):
    """Long-lived body data collected at onboarding."""

    age: int = Field(ge=1, le=120)
    weight: float = Field(gt=0, description="Body weight in kilograms")
    height: float = Field(gt=0, description="Height in centimeters")
    gender: Gender
    activity_level: ActivityLevel
    goal: DietGoal
    dislikes: str = ""

    @classmethod
    def default(cls) -> "UserProfile":
        """Return the profile used before onboarding has been completed."""
        return cls(
            age=25,
            weight=65.0,
            height=170,
            gender=Gender.MALE,
            activity_level=ActivityLevel.SEDENTARY,
            goal=DietGoal.FAT_LOSS,
        )


@dataclass(frozen=True)
class HealthMetrics:
    """Energy targets derived from a profile."""

    bmi: float
    bmr: float
    tdee: float
    target_calories: int
    bmi_category: str
