"""Prompt construction for weekly plan generation.

The LLM, not this package, enforces the plan invariants, so the prompt has to
spell every rule out as an absolute requirement together with a concrete
self-check the model can run before answering.
"""

from dataclasses import dataclass

from diet_planner.domain.diet import DietConfig, DietMode
from diet_planner.domain.profile import GOAL_LABELS, Gender, HealthMetrics, UserProfile
from diet_planner.services.retrieval import nutrition_reference

DISH_SEPARATOR = " + "
DAYS_OF_WEEK: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
TRUNCATION_MARKER = "(nutrition reference truncated)"
OWNED_INGREDIENT_MARKER = "(optional/already owned)"
CONNECTION_TEST_PROMPT = "reply ok"


@dataclass(frozen=True)
class PromptOptions:
    """Numeric knobs interpolated into the prompt."""

    reference_max_entries: int = 20
    reference_char_limit: int = 1800
    calorie_tolerance: float = 0.1
    mass_tolerance_percent: int = 5
    max_recipe_steps: int = 3


_MEAL_SHAPE = '{"name": "...", "calories": <number>, "portion": "..."}'

PLAN_SYSTEM_PROMPT = (
    "You are a professional minimalist nutritionist. Output JSON only, with no "
    "other text. Return exactly this structure: "
    '{"dailyPlans": [{"day": "Monday", "breakfast": ' + _MEAL_SHAPE + ", "
    '"lunch": {...}, "dinner": {...}}, ...], '
    '"shoppingList": [{"name": "...", "amount": "..."}, ...], '
    '"seasonings": ["...", ...], '
    '"recipes": [{"dishName": "...", "ingredients": "...", '
    '"steps": ["...", ...]}, ...]}. '
    "Every recipe must include an ingredients field listing the ingredients and "
    "amounts the dish needs; seasonings are written as 'to taste'."
)

_MEAL_SCHEMA: dict[str, object] = {
    "type": "OBJECT",
    "required": ["name", "calories", "portion"],
    "properties": {
        "name": {"type": "STRING"},
        "calories": {"type": "NUMBER"},
        "portion": {"type": "STRING"},
    },
}

PLAN_RESPONSE_SCHEMA: dict[str, object] = {
    "type": "OBJECT",
    "required": ["dailyPlans", "shoppingList", "seasonings", "recipes"],
    "properties": {
        "dailyPlans": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "required": ["day", "breakfast", "lunch", "dinner"],
                "properties": {
                    "day": {"type": "STRING"},
                    "breakfast": _MEAL_SCHEMA,
                    "lunch": _MEAL_SCHEMA,
                    "dinner": _MEAL_SCHEMA,
                },
            },
        },
        "shoppingList": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "required": ["name", "amount"],
                "properties": {
                    "name": {"type": "STRING"},
                    "amount": {"type": "STRING"},
                },
            },
        },
        "seasonings": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recipes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "required": ["dishName", "ingredients", "steps"],
                "properties": {
                    "dishName": {"type": "STRING"},
                    "ingredients": {"type": "STRING"},
                    "steps": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
            },
        },
    },
}


def build_weekly_plan_prompt(
    profile: UserProfile,
    metrics: HealthMetrics,
    config: DietConfig,
    options: PromptOptions | None = None,
) -> str:
    """Render the full instruction document for one weekly plan request."""
    opts = options or PromptOptions()
    sections = [
        _role_section(),
        _profile_section(profile, metrics, config),
        _constraints_section(config, opts),
        _output_specs_section(metrics, opts),
        "Using the settings above, generate the weekly menu and the shopping list.",
    ]
    prompt = "\n\n".join(sections)
    reference = truncate_reference(
        nutrition_reference(config, opts.reference_max_entries),
        opts.reference_char_limit,
    )
    if reference:
        return f"{prompt}\n\n{reference}"
    return prompt


def truncate_reference(reference: str, limit: int) -> str:
    """Cap the reference block at ``limit`` characters with a marker."""
    if len(reference) <= limit:
        return reference
    return f"{reference[:limit]}\n{TRUNCATION_MARKER}"


def calorie_band(metrics: HealthMetrics, tolerance: float) -> tuple[int, int]:
    """Return the accepted daily calorie range around the target."""
    low = round(metrics.target_calories * (1 - tolerance))
    high = round(metrics.target_calories * (1 + tolerance))
    return low, high


def _role_section() -> str:
    return (
        "# Role: minimalist all-round nutritionist and five-star chef\n"
        "You plan practical, healthy home cooking for one person for a full week."
    )


def _profile_section(
    profile: UserProfile, metrics: HealthMetrics, config: DietConfig
) -> str:
    gender = "male" if profile.gender == Gender.MALE else "female"
    flavors = ", ".join(config.flavor_preferences) or "no preference"
    dislikes = profile.dislikes.strip() or "none"
    if config.mode == DietMode.BUYING:
        mode = "shopping (buy fresh ingredients)"
        wanted = config.wanted_ingredients.strip() or "anything"
        ingredients = f"wants to eat: {wanted}"
    else:
        mode = "use what you have (clear out the fridge)"
        existing = config.existing_ingredients.strip() or "nothing listed"
        ingredients = f"already has: {existing}"
    if config.meal_prep_repetition:
        repetition = (
            "[meal-prep repetition ON] each meal may rotate among 3-4 "
            "combinations that are mixed and matched across the week."
        )
    else:
        repetition = "[repetition OFF] dishes should differ from day to day."
    return "\n".join(
        [
            "## UserProfile",
            f"- Basics: {gender}, {profile.age} years old, "
            f"goal: {GOAL_LABELS[profile.goal]}",
            f"- Energy: {metrics.target_calories} kcal per day "
            f"(BMI {metrics.bmi}, {metrics.bmi_category})",
            f"- Mode: {mode}",
            f"- Staple: {config.staple_preference or 'no preference'}",
            f"- Flavor: {flavors}",
            f"- Ingredients: {ingredients} / dislikes: {dislikes}",
            f"- Logic: {repetition}",
        ]
    )


def _constraints_section(config: DietConfig, opts: PromptOptions) -> str:
    days = " != ".join(DAYS_OF_WEEK)
    if config.max_ingredients:
        cap = config.max_ingredients
        ingredient_cap = (
            "   - [Ingredient variety cap] MANDATORY: shoppingList must contain "
            f"at most {cap} entries. If the design would exceed {cap}, merge "
            "ingredients, drop varieties or cook one ingredient several ways until "
            f"the count is <= {cap}. This is a hard numeric ceiling, not a "
            "suggestion."
        )
    else:
        ingredient_cap = (
            "   - [Ingredient variety cap] No limit on the number of entries."
        )
    lines = [
        "<Constraints>",
        "1. **Staple balance**: unless rice is explicitly excluded, at least 50% of "
        "the week's lunches and dinners include rice or whole-grain rice; noodles "
        "and bread are secondary.",
        "2. **Dish variety (absolute rule)**:",
        "   - No two days, adjacent or not, may share the same breakfast + lunch + "
        f"dinner combination. {days}; every day has its own unique combination.",
        "   - Wrong (forbidden): Monday and Wednesday both serve fried egg + milk + "
        "oats, rice + pepper pork + tomato egg, rice + steamed fish + greens.",
        "   - Right: buy few ingredients but vary the week through cooking methods "
        "(chicken breast -> pan-seared, salad, tomato stew), pairings (beef + "
        "potato, beef + onion, beef + broccoli) and by moving a dish to a "
        "different day or meal.",
        "   - Self-check: after generating, compare the three-meal string "
        "(breakfast.name + lunch.name + dinner.name) across every pair of days in "
        "dailyPlans and make sure no two strings are identical.",
        "3. **Meal-prep consistency**: when repetition is on, pick dishes that "
        "cook well in large batches and store well.",
        "4. **Shopping list rules**:",
        "   - [shoppingList] each ingredient appears exactly once; amount is the total "
        "weekly quantity. The quantities of every dish that uses the ingredient add up "
        "to that amount.",
        ingredient_cap,
        "   - [recipes] each dish's ingredients field states the total quantity cooked "
        "for that dish over the whole week. The amounts of one ingredient across all "
        "recipes must add up to its shoppingList amount. Seasonings are written as "
        "'to taste'.",
    ]
    if config.mode == DietMode.FRIDGE:
        lines.append(
            "   - Use-what-you-have mode: every shoppingList entry for an "
            "ingredient the user already has must mark its amount with "
            f'"{OWNED_INGREDIENT_MARKER}".'
        )
    lines.extend(
        [
            "5. **Safety**: never combine conflicting foods (for example dairy with "
            "citrus such as milk + orange); cook with little oil and salt; at most "
            f"{opts.max_recipe_steps} steps per recipe.",
            "</Constraints>",
        ]
    )
    return "\n".join(lines)


def _output_specs_section(metrics: HealthMetrics, opts: PromptOptions) -> str:
    low, high = calorie_band(metrics, opts.calorie_tolerance)
    calorie_percent = round(opts.calorie_tolerance * 100)
    tolerance = opts.mass_tolerance_percent
    return "\n".join(
        [
            "<OutputSpecs>",
            "1. **name**: only composed dish names, several dishes joined with "
            f'"{DISH_SEPARATOR.strip()}". Never write "a plate combining X and Y" and '
            "never list raw ingredients.",
            "2. **portion**: mirrors name one-to-one, each entry is dish name + grams "
            "(g or ml). Never empty, never use vague words such as \"about\".",
            f"3. **Structure**: {DAYS_OF_WEEK[0]} to {DAYS_OF_WEEK[-1]}, breakfast, "
            "lunch and dinner. Every meal contains a protein source, a carbohydrate "
            "source and a fat source.",
            "4. **Eating habits**:",
            "   - Breakfast: milk, eggs, oats, buns, toast and similar; nothing greasy "
            "or spicy.",
            "   - Lunch and dinner: staple + vegetables + protein. Lunch is a full "
            "meal; dinner may be lighter but stays balanced.",
            "5. **Calories**:",
            "   - Compute each day's total (breakfast.calories + lunch.calories + "
            "dinner.calories) from the actual ingredients and portions.",
            "   - Different combinations must show their real calorie differences; do "
            "not repeat the same daily total unless the meals are identical.",
            f"   - Daily totals stay within +/-{calorie_percent}% of the target: "
            f"{low} - {high} kcal.",
            "6. **recipes**: every dish has dishName, ingredients (weekly total "
            'such as "potato 200g, beef brisket 500g, ginger to taste") and steps '
            f"(at most {opts.max_recipe_steps}).",
            "7. **Mass consistency check (mandatory)**:",
            "   - daily portion total = sum of the grams in every portion of the week",
            "   - shopping list total = sum of the grams in every shoppingList amount "
            "(excluding seasonings 'to taste')",
            "   - recipe total = sum of the grams in every recipe ingredients field "
            "(excluding seasonings 'to taste')",
            f"   - These three totals must agree within +/-{tolerance}%. If they do "
            "not, recalculate and adjust before answering.",
            "8. **Final duplicate check (mandatory)**:",
            "   - Check every day's combination (breakfast.name + lunch.name + "
            "dinner.name) from "
            f"{DAYS_OF_WEEK[0]} to {DAYS_OF_WEEK[-1]}.",
            "   - If any two days are identical, change one of them by switching the "
            "cooking method or the pairing.",
            "   - Criterion: compare the three-meal name strings of every day pair; no "
            "two may be exactly equal.",
            "</OutputSpecs>",
        ]
    )
