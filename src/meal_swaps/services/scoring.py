"""Goal satisfaction scoring for candidate swaps."""

from collections.abc import Sequence
from dataclasses import dataclass

from meal_swaps.domain.nutrition import Nutrient, NutrientProfile
from meal_swaps.domain.swaps import GoalSpec, ScoredCandidate, SwapCandidate

MAX_SATISFACTION = 100.0


def meal_level_delta(
    original: NutrientProfile, replacement: NutrientProfile, grams: float
) -> dict[Nutrient, float]:
    """Change to meal totals when a slot's food is replaced at equal weight."""
    return original.for_grams(grams).delta_to(replacement.for_grams(grams))


def goal_satisfaction(
    goal: GoalSpec, delta: dict[Nutrient, float], meal_totals: NutrientProfile
) -> float:
    """Score in [0, 100] for how far a delta gets towards a goal.

    Movement in the wrong direction, or no movement, scores 0. Overshooting
    the target is capped at 100. When the meal has none of the nutrient any
    movement in the right direction fully satisfies the goal.
    """
    improvement = goal.improvement(delta)
    if improvement <= 0:
        return 0.0
    total = meal_totals.amount(goal.nutrient)
    if total <= 0:
        return MAX_SATISFACTION
    required = goal.target_percent * total / 100.0
    return min(MAX_SATISFACTION, improvement / required * 100.0)


@dataclass
class SwapScorer:
    """Scores candidate swaps against every active goal."""

    def score(  # noqa: PLR0913
        self,
        candidate: SwapCandidate,
        original_profile: NutrientProfile,
        replacement_profile: NutrientProfile,
        grams: float,
        goals: Sequence[GoalSpec],
        meal_totals: NutrientProfile,
    ) -> ScoredCandidate:
        """Compute the meal-level delta and per-goal satisfaction."""
        delta = meal_level_delta(original_profile, replacement_profile, grams)
        satisfactions = tuple(
            goal_satisfaction(goal, delta, meal_totals) for goal in goals
        )
        return ScoredCandidate(
            candidate=candidate,
            grams=grams,
            delta=delta,
            satisfactions=satisfactions,
        )
