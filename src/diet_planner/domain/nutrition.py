"""Nutrition reference domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionFact:
    """Per-100g nutrition facts for a reference food."""

    name: str
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    aliases: tuple[str, ...] = ()
    note: str | None = None

    def search_terms(self) -> tuple[str, ...]:
        """Return lowercase name and aliases used for keyword matching."""
        return tuple(term.lower() for term in (self.name, *self.aliases))
