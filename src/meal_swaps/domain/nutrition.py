"""Nutrition domain models."""

from dataclasses import dataclass, fields
from enum import StrEnum

from meal_swaps.domain.errors import InvalidGoalError


class Nutrient(StrEnum):
    """Nutrients a swap goal can target."""

    CALORIES = "calories"
    PROTEIN = "protein"
    CARBS = "carbs"
    FAT = "fat"
    FIBER = "fiber"

    @classmethod
    def parse(cls, raw: "str | Nutrient") -> "Nutrient":
        """Parse a nutrient name, accepting common aliases."""
        if isinstance(raw, Nutrient):
            return raw
        key = str(raw).strip().lower()
        key = _NUTRIENT_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError as exc:
            raise InvalidGoalError(f"Unknown nutrient: {raw!r}") from exc


_NUTRIENT_ALIASES = {
    "kcal": "calories",
    "energy": "calories",
    "carbohydrates": "carbs",
    "carbohydrate": "carbs",
    "fibre": "fiber",
}

# Maps each goal nutrient onto the profile field that carries it.
_PROFILE_FIELDS: dict[Nutrient, str] = {
    Nutrient.CALORIES: "calories",
    Nutrient.PROTEIN: "protein_g",
    Nutrient.CARBS: "carbs_g",
    Nutrient.FAT: "fat_g",
    Nutrient.FIBER: "fiber_g",
}


@dataclass(frozen=True)
class NutrientProfile:
    """Macronutrient profile, per 100 g or as absolute totals."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float | None = None

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if value is not None and value < 0:
                raise ValueError(f"{field.name} cannot be negative, got {value}")

    def amount(self, nutrient: Nutrient) -> float:
        """Return the amount of a goal nutrient."""
        return float(getattr(self, _PROFILE_FIELDS[nutrient]))

    def scale(self, factor: float) -> "NutrientProfile":
        """Return the profile multiplied by a non-negative factor."""
        if factor < 0:
            raise ValueError(f"Scale factor cannot be negative, got {factor}")
        return NutrientProfile(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
            fiber_g=self.fiber_g * factor,
            sugar_g=None if self.sugar_g is None else self.sugar_g * factor,
        )

    def for_grams(self, grams: float) -> "NutrientProfile":
        """Scale a per-100g profile to an absolute portion."""
        return self.scale(grams / 100.0)

    def __add__(self, other: "NutrientProfile") -> "NutrientProfile":
        if not isinstance(other, NutrientProfile):
            return NotImplemented
        sugar = (
            None
            if self.sugar_g is None or other.sugar_g is None
            else self.sugar_g + other.sugar_g
        )
        return NutrientProfile(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
            sugar_g=sugar,
        )

    def delta_to(self, other: "NutrientProfile") -> dict[Nutrient, float]:
        """Return the signed change per nutrient going from self to other."""
        return {
            nutrient: other.amount(nutrient) - self.amount(nutrient)
            for nutrient in Nutrient
        }

    def apply_delta(self, delta: dict[Nutrient, float]) -> "NutrientProfile":
        """Return totals after a signed delta, floored at zero."""
        values = {
            _PROFILE_FIELDS[nutrient]: max(
                0.0, self.amount(nutrient) + delta.get(nutrient, 0.0)
            )
            for nutrient in Nutrient
        }
        return NutrientProfile(**values)

    def as_dict(self) -> dict[str, float]:
        """Return goal nutrient amounts keyed by nutrient name."""
        return {str(nutrient): self.amount(nutrient) for nutrient in Nutrient}


ZERO_PROFILE = NutrientProfile(sugar_g=0.0)


def sum_profiles(profiles: "list[NutrientProfile]") -> NutrientProfile:
    """Add up absolute profiles."""
    total = ZERO_PROFILE
    for profile in profiles:
        total = total + profile
    return total
