"""Keyword retrieval over the nutrition reference table."""

import logging
import re
from collections.abc import Iterable

from diet_planner.data.food_nutrition import BASELINE_FOOD_NAMES, FOOD_NUTRITION_DB
from diet_planner.domain.diet import DietConfig
from diet_planner.domain.nutrition import NutritionFact

DEFAULT_MAX_ENTRIES = 50

_TOKEN_SEPARATORS = re.compile(r"[,，、;；\s]+")

_logger = logging.getLogger(__name__)


def nutrition_reference(
    config: DietConfig,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    foods: Iterable[NutritionFact] = FOOD_NUTRITION_DB,
    baseline_names: frozenset[str] = BASELINE_FOOD_NAMES,
) -> str:
    """Return a prompt-ready nutrition reference block, or "" if empty."""
    entries = select_reference_foods(config, max_entries, foods, baseline_names)
    if not entries:
        return ""
    lines = [_format_fact(fact) for fact in entries]
    _logger.debug("Nutrition reference selected %s entries", len(lines))
    return "\n".join(
        [
            "[Nutrition reference: per 100 g edible portion, use it to size "
            "portions and balance meals]",
            *lines,
            "Use the data above when designing recipes and portions so that "
            "amounts and nutrition stay realistic.",
        ]
    )


def select_reference_foods(
    config: DietConfig,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    foods: Iterable[NutritionFact] = FOOD_NUTRITION_DB,
    baseline_names: frozenset[str] = BASELINE_FOOD_NAMES,
) -> list[NutritionFact]:
    """Return keyword matches first, then baseline foods, without duplicates."""
    if max_entries <= 0:
        return []
    keywords = extract_keywords(config)
    matched: list[NutritionFact] = []
    baseline: list[NutritionFact] = []
    for fact in foods:
        if matches_keywords(fact, keywords):
            matched.append(fact)
        if fact.name in baseline_names:
            baseline.append(fact)

    seen: set[str] = set()
    selected: list[NutritionFact] = []
    for fact in [*matched, *baseline]:
        if len(selected) >= max_entries:
            break
        if fact.name in seen:
            continue
        seen.add(fact.name)
        selected.append(fact)
    return selected


def extract_keywords(config: DietConfig) -> list[str]:
    """Split wanted and existing ingredient text into unique keywords."""
    keywords: list[str] = []
    seen: set[str] = set()
    for text in (config.wanted_ingredients, config.existing_ingredients):
        for token in _TOKEN_SEPARATORS.split(text or ""):
            token = token.strip()
            if not token or token.lower() in seen:
                continue
            seen.add(token.lower())
            keywords.append(token)
    return keywords


def matches_keywords(fact: NutritionFact, keywords: list[str]) -> bool:
    """Bidirectional case-insensitive substring match on name and aliases."""
    terms = fact.search_terms()
    for keyword in keywords:
        lowered = keyword.lower()
        if any(lowered in term or term in lowered for term in terms):
            return True
    return False


def _format_fact(fact: NutritionFact) -> str:
    note = f" ({fact.note})" if fact.note else ""
    return (
        f"- {fact.name}{note}: {fact.calories:g} kcal, protein {fact.protein_g:g} g, "
        f"fat {fact.fat_g:g} g, carbs {fact.carbs_g:g} g"
    )
