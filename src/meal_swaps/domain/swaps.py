"""Domain models for swap goals and suggestions."""

from dataclasses import dataclass, field
from enum import StrEnum

from meal_swaps.domain.errors import InvalidGoalError
from meal_swaps.domain.meals import SkippedIngredient
from meal_swaps.domain.nutrition import Nutrient, NutrientProfile


class GoalDirection(StrEnum):
    """Which way a goal wants a nutrient to move."""

    INCREASE = "increase"
    DECREASE = "decrease"

    @property
    def sign(self) -> int:
        """Sign of a delta that moves the nutrient the right way."""
        return 1 if self is GoalDirection.INCREASE else -1

    @classmethod
    def parse(cls, raw: "str | GoalDirection") -> "GoalDirection":
        """Parse a direction name."""
        if isinstance(raw, GoalDirection):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError as exc:
            raise InvalidGoalError(f"Unknown goal direction: {raw!r}") from exc


class Intensity(StrEnum):
    """Goal intensity tiers offered to the user."""

    HIGH = "high"
    NORMAL = "normal"
    PRECISE = "precise"

    @classmethod
    def parse(cls, raw: "str | Intensity") -> "Intensity":
        """Parse an intensity tier name."""
        if isinstance(raw, Intensity):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError as exc:
            raise InvalidGoalError(f"Unknown goal intensity: {raw!r}") from exc


@dataclass(frozen=True)
class GoalSpec:
    """A single nutrient goal, e.g. decrease calories by 20%."""

    nutrient: Nutrient
    direction: GoalDirection
    target_percent: float

    def __post_init__(self) -> None:
        if not isinstance(self.nutrient, Nutrient):
            raise InvalidGoalError(f"Unknown nutrient: {self.nutrient!r}")
        if not isinstance(self.direction, GoalDirection):
            raise InvalidGoalError(f"Unknown goal direction: {self.direction!r}")
        if not 0 < self.target_percent <= 100:  # noqa: PLR2004
            raise InvalidGoalError(
                f"Target percent must be in (0, 100], got {self.target_percent}"
            )

    def improvement(self, delta: dict[Nutrient, float]) -> float:
        """Signed change of the target nutrient, positive when it helps."""
        return delta.get(self.nutrient, 0.0) * self.direction.sign

    def describe(self) -> str:
        """Human readable goal label."""
        return f"{self.direction} {self.nutrient} by {self.target_percent:g}%"


@dataclass(frozen=True)
class SwapCandidate:
    """A replacement hypothesis for one ingredient slot."""

    slot_index: int
    original_food: str
    replacement_food: str


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its meal-level delta and per-goal satisfaction."""

    candidate: SwapCandidate
    grams: float
    delta: dict[Nutrient, float]
    satisfactions: tuple[float, ...]


@dataclass(frozen=True)
class SwapSuggestion:
    """Ranked swap suggestion returned to callers."""

    original_food: str
    replacement_food: str
    per_nutrient_delta: dict[Nutrient, float]
    per_goal_satisfaction: dict[int, float]
    combined_score: float
    slot_index: int
    grams: float


@dataclass(frozen=True)
class SuggestionReport:
    """Suggestions plus the slots that could not be evaluated."""

    suggestions: list[SwapSuggestion]
    skipped: list[SkippedIngredient] = field(default_factory=list)
    timed_out: bool = False


@dataclass(frozen=True)
class SwapPreview:
    """Meal totals before and after applying a suggestion."""

    before: NutrientProfile
    after: NutrientProfile
    delta: dict[Nutrient, float]
