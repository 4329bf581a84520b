"""Pydantic models for the swap API."""

from pydantic import BaseModel, Field

from meal_swaps.domain.meals import Ingredient, Meal, SkippedIngredient
from meal_swaps.domain.nutrition import Nutrient
from meal_swaps.domain.swaps import SwapPreview, SwapSuggestion


class IngredientPayload(BaseModel):
    """Logged ingredient payload."""

    name: str
    quantity: float
    unit: str = "g"


class MealPayload(BaseModel):
    """Meal payload in entry order."""

    ingredients: list[IngredientPayload] = Field(default_factory=list)

    def to_domain(self) -> Meal:
        """Convert to a domain meal."""
        return Meal(
            tuple(
                Ingredient(name=item.name, quantity=item.quantity, unit=item.unit)
                for item in self.ingredients
            )
        )

    @classmethod
    def from_domain(cls, meal: Meal) -> "MealPayload":
        """Build a payload from a domain meal."""
        return cls(
            ingredients=[
                IngredientPayload(
                    name=item.name, quantity=item.quantity, unit=item.unit
                )
                for item in meal.ingredients
            ]
        )


class GoalPayload(BaseModel):
    """Goal as selected in the UI."""

    nutrient: str
    direction: str
    intensity: str = "normal"
    percent: float | None = None


class SuggestRequest(BaseModel):
    """Request for swap suggestions."""

    meal: MealPayload
    goals: list[GoalPayload]
    max_results: int = Field(default=4, ge=1)


class SuggestionPayload(BaseModel):
    """Swap suggestion payload."""

    original_food: str
    replacement_food: str
    per_nutrient_delta: dict[str, float]
    per_goal_satisfaction: dict[int, float]
    combined_score: float
    slot_index: int
    grams: float = Field(gt=0)

    @classmethod
    def from_domain(cls, suggestion: SwapSuggestion) -> "SuggestionPayload":
        """Build a payload from a domain suggestion."""
        return cls(
            original_food=suggestion.original_food,
            replacement_food=suggestion.replacement_food,
            per_nutrient_delta={
                str(nutrient): value
                for nutrient, value in suggestion.per_nutrient_delta.items()
            },
            per_goal_satisfaction=dict(suggestion.per_goal_satisfaction),
            combined_score=suggestion.combined_score,
            slot_index=suggestion.slot_index,
            grams=suggestion.grams,
        )

    def to_domain(self) -> SwapSuggestion:
        """Convert to a domain suggestion."""
        return SwapSuggestion(
            original_food=self.original_food,
            replacement_food=self.replacement_food,
            per_nutrient_delta={
                Nutrient.parse(name): value
                for name, value in self.per_nutrient_delta.items()
            },
            per_goal_satisfaction=dict(self.per_goal_satisfaction),
            combined_score=self.combined_score,
            slot_index=self.slot_index,
            grams=self.grams,
        )


class SkippedPayload(BaseModel):
    """Ingredient that could not be evaluated."""

    slot_index: int
    food_name: str
    reason: str

    @classmethod
    def from_domain(cls, skipped: SkippedIngredient) -> "SkippedPayload":
        """Build a payload from a skipped slot."""
        return cls(
            slot_index=skipped.slot_index,
            food_name=skipped.food_name,
            reason=skipped.reason,
        )


class SuggestResponse(BaseModel):
    """Ranked suggestions; an empty list is a valid answer."""

    suggestions: list[SuggestionPayload]
    skipped: list[SkippedPayload]
    timed_out: bool


class SwapRequest(BaseModel):
    """A meal together with one chosen suggestion."""

    meal: MealPayload
    suggestion: SuggestionPayload


class ApplyResponse(BaseModel):
    """Meal after applying a suggestion."""

    meal: MealPayload


class PreviewResponse(BaseModel):
    """Meal totals before and after a suggestion."""

    before: dict[str, float]
    after: dict[str, float]
    delta: dict[str, float]

    @classmethod
    def from_domain(cls, preview: SwapPreview) -> "PreviewResponse":
        """Build a payload from a domain preview."""
        return cls(
            before=preview.before.as_dict(),
            after=preview.after.as_dict(),
            delta={str(nutrient): value for nutrient, value in preview.delta.items()},
        )
