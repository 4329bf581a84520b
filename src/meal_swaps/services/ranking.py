"""Ranking of scored swap candidates."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from meal_swaps.domain.swaps import GoalSpec, ScoredCandidate, SwapSuggestion

MAX_SUGGESTIONS = 4


def combined_score(satisfactions: Sequence[float]) -> float:
    """Mean satisfaction across goals."""
    if not satisfactions:
        return 0.0
    if len(satisfactions) == 1:
        return satisfactions[0]
    return sum(satisfactions) / len(satisfactions)


@dataclass
class SwapRanker:
    """Merges per-goal scores, deduplicates, and keeps the best suggestions."""

    max_results: int = MAX_SUGGESTIONS

    def rank(
        self,
        scored: Iterable[ScoredCandidate],
        goals: Sequence[GoalSpec],
        max_results: int | None = None,
    ) -> list[SwapSuggestion]:
        """Return suggestions sorted by combined score, best first."""
        limit = min(
            MAX_SUGGESTIONS,
            self.max_results if max_results is None else max_results,
        )
        if limit < 1:
            raise ValueError(f"max_results must be at least 1, got {limit}")

        best: dict[tuple[str, str], tuple[tuple, SwapSuggestion]] = {}
        for item in scored:
            suggestion = _to_suggestion(item)
            if suggestion.combined_score <= 0:
                continue
            key = (suggestion.original_food, suggestion.replacement_food)
            sort_key = _sort_key(suggestion, goals)
            current = best.get(key)
            if current is None or sort_key < current[0]:
                best[key] = (sort_key, suggestion)

        ordered = sorted(best.values(), key=lambda entry: entry[0])
        return [suggestion for _, suggestion in ordered[:limit]]


def _to_suggestion(item: ScoredCandidate) -> SwapSuggestion:
    return SwapSuggestion(
        original_food=item.candidate.original_food,
        replacement_food=item.candidate.replacement_food,
        per_nutrient_delta=dict(item.delta),
        per_goal_satisfaction=dict(enumerate(item.satisfactions)),
        combined_score=combined_score(item.satisfactions),
        slot_index=item.candidate.slot_index,
        grams=item.grams,
    )


def _sort_key(suggestion: SwapSuggestion, goals: Sequence[GoalSpec]) -> tuple:
    """Higher score, then larger primary-goal improvement, then name."""
    primary_improvement = (
        goals[0].improvement(suggestion.per_nutrient_delta) if goals else 0.0
    )
    return (
        -suggestion.combined_score,
        -primary_improvement,
        suggestion.replacement_food,
        suggestion.original_food,
        suggestion.slot_index,
    )
