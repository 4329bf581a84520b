"""Domain models for meals."""

from dataclasses import dataclass

from meal_swaps.domain.nutrition import NutrientProfile


@dataclass(frozen=True)
class Ingredient:
    """One logged ingredient: a catalog food with a quantity and unit."""

    name: str
    quantity: float
    unit: str = "g"

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Ingredient name cannot be empty")
        if self.quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")


@dataclass(frozen=True)
class Meal:
    """Ordered ingredients of a logged meal."""

    ingredients: tuple[Ingredient, ...] = ()

    @classmethod
    def of(cls, *ingredients: Ingredient) -> "Meal":
        """Build a meal from ingredients in entry order."""
        return cls(tuple(ingredients))

    def replace_ingredient(self, index: int, ingredient: Ingredient) -> "Meal":
        """Return a new meal with one slot replaced."""
        if not 0 <= index < len(self.ingredients):
            raise IndexError(f"No ingredient slot {index}")
        items = list(self.ingredients)
        items[index] = ingredient
        return Meal(tuple(items))

    def __len__(self) -> int:
        return len(self.ingredients)


@dataclass(frozen=True)
class ResolvedIngredient:
    """Ingredient slot with its weight and nutrient contribution."""

    slot_index: int
    ingredient: Ingredient
    grams: float
    per_100g: NutrientProfile
    contribution: NutrientProfile


@dataclass(frozen=True)
class SkippedIngredient:
    """Ingredient slot left out of a computation, with the reason."""

    slot_index: int
    food_name: str
    reason: str


@dataclass(frozen=True)
class MealNutrition:
    """Resolved slots and totals of a meal snapshot."""

    resolved: list[ResolvedIngredient]
    totals: NutrientProfile
    skipped: list[SkippedIngredient]
