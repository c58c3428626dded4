"""Health metric calculations (BMI, BMR, TDEE, target calories)."""

import math

from diet_planner.domain.profile import (
    ActivityLevel,
    DietGoal,
    Gender,
    HealthMetrics,
    UserProfile,
)

ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LOW: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
}

GOAL_CALORIE_ADJUSTMENTS: dict[DietGoal, int] = {
    DietGoal.LOSE_WEIGHT: -500,
    DietGoal.FAT_LOSS: -300,
    DietGoal.MUSCLE_GAIN: 300,
}

UNDERWEIGHT_BMI = 18.5
OVERWEIGHT_BMI = 24.0
OBESE_BMI = 28.0


def compute_health_metrics(profile: UserProfile) -> HealthMetrics:
    """Derive energy targets from a profile using Mifflin-St Jeor."""
    bmi = round(profile.weight / (profile.height / 100) ** 2, 1)

    bmr = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    bmr += 5 if profile.gender == Gender.MALE else -161

    tdee = bmr * ACTIVITY_FACTORS[profile.activity_level]
    target = _round_half_up(tdee + GOAL_CALORIE_ADJUSTMENTS[profile.goal])

    return HealthMetrics(
        bmi=bmi,
        bmr=bmr,
        tdee=tdee,
        target_calories=target,
        bmi_category=bmi_category(bmi),
    )


def bmi_category(bmi: float) -> str:
    """Map a BMI value onto its category label."""
    if bmi < UNDERWEIGHT_BMI:
        return "underweight"
    if bmi < OVERWEIGHT_BMI:
        return "normal"
    if bmi < OBESE_BMI:
        return "overweight"
    return "obese"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
