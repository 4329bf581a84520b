"""Goal normalization from user-facing intensity tiers."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from meal_swaps.domain.errors import InvalidGoalError
from meal_swaps.domain.nutrition import Nutrient
from meal_swaps.domain.swaps import GoalDirection, GoalSpec, Intensity

MAX_GOALS = 2


def _default_precise_choices() -> tuple[float, ...]:
    return tuple(float(value) for value in range(5, 55, 5))


@dataclass(frozen=True)
class GoalPolicy:
    """Product constants for turning intensity tiers into target percents."""

    high_percent: float = 30.0
    normal_percent: float = 20.0
    precise_choices: tuple[float, ...] = field(
        default_factory=_default_precise_choices
    )

    def target_percent(self, intensity: Intensity, percent: float | None) -> float:
        """Resolve the target percent for an intensity tier."""
        if intensity is Intensity.HIGH:
            return self.high_percent
        if intensity is Intensity.NORMAL:
            return self.normal_percent
        if percent is None:
            raise InvalidGoalError("Precise intensity requires a percentage")
        value = float(percent)
        if self.precise_choices and value not in self.precise_choices:
            allowed = ", ".join(f"{choice:g}" for choice in self.precise_choices)
            raise InvalidGoalError(
                f"Precise percentage {value:g} is not one of: {allowed}"
            )
        return value


DEFAULT_POLICY = GoalPolicy()


def build_goal(
    nutrient: str | Nutrient,
    direction: str | GoalDirection,
    intensity: str | Intensity = Intensity.NORMAL,
    percent: float | None = None,
    policy: GoalPolicy = DEFAULT_POLICY,
) -> GoalSpec:
    """Build a normalized goal from UI-level selections."""
    tier = Intensity.parse(intensity)
    return GoalSpec(
        nutrient=Nutrient.parse(nutrient),
        direction=GoalDirection.parse(direction),
        target_percent=policy.target_percent(tier, percent),
    )


def validate_goals(goals: Sequence[GoalSpec]) -> tuple[GoalSpec, ...]:
    """Check that a request carries one or two goals."""
    resolved = tuple(goals or ())
    if not 1 <= len(resolved) <= MAX_GOALS:
        raise InvalidGoalError(
            f"Expected 1 to {MAX_GOALS} goals, got {len(resolved)}"
        )
    for goal in resolved:
        if not isinstance(goal, GoalSpec):
            raise InvalidGoalError(f"Not a goal: {goal!r}")
    return resolved
