"""Swap suggestion engine facade."""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from meal_swaps.domain.errors import (
    EmptyMealError,
    LookupFailure,
    SwapNotApplicableError,
    SwapTimeoutError,
)
from meal_swaps.domain.meals import (
    Ingredient,
    Meal,
    MealNutrition,
    ResolvedIngredient,
    SkippedIngredient,
)
from meal_swaps.domain.nutrition import sum_profiles
from meal_swaps.domain.swaps import (
    GoalSpec,
    ScoredCandidate,
    SuggestionReport,
    SwapCandidate,
    SwapPreview,
    SwapSuggestion,
)
from meal_swaps.services.candidates import CandidateGenerator
from meal_swaps.services.catalog import NutrientCatalog
from meal_swaps.services.goals import validate_goals
from meal_swaps.services.ranking import MAX_SUGGESTIONS, SwapRanker
from meal_swaps.services.scoring import SwapScorer
from meal_swaps.services.units import UnitConverter

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _SlotOutcome:
    scored: list[ScoredCandidate] = field(default_factory=list)
    skipped: SkippedIngredient | None = None


@dataclass
class SwapEngine:
    """Suggests ingredient swaps that move a meal towards nutrient goals.

    The engine is stateless between calls and never mutates the meal it is
    given. Lookup failures for a single ingredient only remove that
    ingredient from consideration; ``ServiceUnavailableError`` from the
    catalog propagates.
    """

    catalog: NutrientCatalog
    converter: UnitConverter
    candidate_generator: CandidateGenerator
    scorer: SwapScorer = field(default_factory=SwapScorer)
    ranker: SwapRanker = field(default_factory=SwapRanker)
    timeout_seconds: float | None = None

    @classmethod
    def create(
        cls,
        catalog: NutrientCatalog,
        converter: UnitConverter,
        *,
        candidate_limit: int = 50,
        max_results: int = MAX_SUGGESTIONS,
        timeout_seconds: float | None = None,
    ) -> "SwapEngine":
        """Create an engine with default scorer and ranker."""
        return cls(
            catalog=catalog,
            converter=converter,
            candidate_generator=CandidateGenerator(catalog, limit=candidate_limit),
            ranker=SwapRanker(max_results=max_results),
            timeout_seconds=timeout_seconds,
        )

    async def suggest(
        self,
        meal: Meal,
        goals: Sequence[GoalSpec],
        max_results: int | None = None,
        timeout_seconds: float | None = None,
    ) -> list[SwapSuggestion]:
        """Return up to four ranked swap suggestions for a meal."""
        report = await self.suggest_with_report(
            meal, goals, max_results=max_results, timeout_seconds=timeout_seconds
        )
        return report.suggestions

    async def suggest_with_report(
        self,
        meal: Meal,
        goals: Sequence[GoalSpec],
        max_results: int | None = None,
        timeout_seconds: float | None = None,
    ) -> SuggestionReport:
        """Return ranked suggestions together with skipped ingredients."""
        active_goals = validate_goals(goals)
        _ensure_not_empty(meal)
        if max_results is not None and max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {max_results}")

        budget = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        loop = asyncio.get_running_loop()
        deadline = None if budget is None else loop.time() + budget

        resolutions, timed_out = await _run_until(
            [
                self._resolve(index, ingredient)
                for index, ingredient in enumerate(meal.ingredients)
            ],
            deadline,
        )
        if timed_out:
            _logger.warning("Suggest timed out while resolving %s slots", len(meal))
            raise SwapTimeoutError("Time budget exhausted before scoring started")
        nutrition = _summarize(resolutions)

        outcomes = [_SlotOutcome() for _ in nutrition.resolved]
        finished, timed_out = await _run_until(
            [
                self._score_slot(slot, active_goals, nutrition, outcome)
                for slot, outcome in zip(nutrition.resolved, outcomes, strict=True)
            ],
            deadline,
        )
        skipped = list(nutrition.skipped)
        scored: list[ScoredCandidate] = []
        for outcome in outcomes:
            scored.extend(outcome.scored)
            if outcome.skipped is not None:
                skipped.append(outcome.skipped)
        skipped.sort(key=lambda item: item.slot_index)

        suggestions = self.ranker.rank(scored, active_goals, max_results)
        if timed_out:
            _logger.warning(
                "Suggest timed out: finished %s of %s slots",
                len(finished),
                len(nutrition.resolved),
            )
            if not suggestions:
                raise SwapTimeoutError("Time budget exhausted before any suggestion")
        _logger.info(
            "Suggested %s swaps for %s goal(s) from %s candidates, skipped=%s",
            len(suggestions),
            len(active_goals),
            len(scored),
            len(skipped),
        )
        return SuggestionReport(
            suggestions=suggestions, skipped=skipped, timed_out=timed_out
        )

    async def meal_nutrition(self, meal: Meal) -> MealNutrition:
        """Resolve every slot of a meal and total its nutrients."""
        resolutions = await asyncio.gather(
            *(
                self._resolve(index, ingredient)
                for index, ingredient in enumerate(meal.ingredients)
            )
        )
        return _summarize(list(resolutions))

    async def preview_swap(self, meal: Meal, suggestion: SwapSuggestion) -> SwapPreview:
        """Return meal totals before and after a suggestion."""
        _ensure_not_empty(meal)
        nutrition = await self.meal_nutrition(meal)
        before = nutrition.totals
        return SwapPreview(
            before=before,
            after=before.apply_delta(suggestion.per_nutrient_delta),
            delta=dict(suggestion.per_nutrient_delta),
        )

    def apply_swap(self, meal: Meal, suggestion: SwapSuggestion) -> Meal:
        """Return a new meal with the suggestion's slot replaced."""
        index = _find_slot(meal, suggestion)
        replacement = Ingredient(
            name=suggestion.replacement_food,
            quantity=suggestion.grams,
            unit="g",
        )
        _logger.info(
            "Applied swap %s -> %s at slot %s",
            suggestion.original_food,
            suggestion.replacement_food,
            index,
        )
        return meal.replace_ingredient(index, replacement)

    async def _resolve(
        self, index: int, ingredient: Ingredient
    ) -> ResolvedIngredient | SkippedIngredient:
        try:
            grams = self.converter.to_grams(
                ingredient.name, ingredient.quantity, ingredient.unit
            )
            profile = await self.catalog.lookup(ingredient.name)
        except (LookupFailure, ValueError) as exc:
            _logger.warning("Skipping ingredient %s: %s", ingredient.name, exc)
            return SkippedIngredient(index, ingredient.name, str(exc))
        if profile is None:
            _logger.warning("Skipping ingredient %s: not in catalog", ingredient.name)
            return SkippedIngredient(index, ingredient.name, "not found in catalog")
        return ResolvedIngredient(
            slot_index=index,
            ingredient=ingredient,
            grams=grams,
            per_100g=profile,
            contribution=profile.for_grams(grams),
        )

    async def _score_slot(
        self,
        slot: ResolvedIngredient,
        goals: Sequence[GoalSpec],
        nutrition: MealNutrition,
        outcome: _SlotOutcome,
    ) -> _SlotOutcome:
        """Score candidates for one slot, appending each to ``outcome``.

        Candidates land in ``outcome`` as soon as they are scored, so a slot
        cancelled at the deadline still contributes what it finished.
        """
        name = slot.ingredient.name
        try:
            candidates = await self.candidate_generator.generate(
                name, slot.per_100g, goals
            )
        except (LookupFailure, ValueError) as exc:
            _logger.warning("Skipping candidates for %s: %s", name, exc)
            outcome.skipped = SkippedIngredient(slot.slot_index, name, str(exc))
            return outcome
        if not candidates:
            _logger.info("No candidates for %s", name)
        for replacement in candidates:
            try:
                profile = await self.catalog.lookup(replacement)
                if profile is None:
                    _logger.debug("Skipping candidate %s: not in catalog", replacement)
                    continue
                scored = self.scorer.score(
                    SwapCandidate(slot.slot_index, name, replacement),
                    slot.per_100g,
                    profile,
                    slot.grams,
                    goals,
                    nutrition.totals,
                )
            except (LookupFailure, ValueError) as exc:
                _logger.debug("Skipping candidate %s: %s", replacement, exc)
                continue
            outcome.scored.append(scored)
        return outcome


async def _run_until(
    coros: list[Awaitable[T]], deadline: float | None
) -> tuple[list[T], bool]:
    """Run coroutines concurrently until done or the deadline passes.

    Returns results of finished coroutines in submission order and whether
    the deadline cut the run short. The first exception raised by any
    coroutine cancels the rest and propagates.
    """
    if not coros:
        return [], False
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    timeout = None
    if deadline is not None:
        timeout = max(0.0, deadline - asyncio.get_running_loop().time())
    try:
        done, pending = await asyncio.wait(
            tasks, timeout=timeout, return_when=asyncio.FIRST_EXCEPTION
        )
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise
    failed = [task for task in tasks if task in done and task.exception()]
    if failed or pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
    if failed:
        raise failed[0].exception()  # type: ignore[misc]
    results = [task.result() for task in tasks if task in done]
    return results, bool(pending)


def _summarize(
    resolutions: list[ResolvedIngredient | SkippedIngredient],
) -> MealNutrition:
    resolved = [item for item in resolutions if isinstance(item, ResolvedIngredient)]
    skipped = [item for item in resolutions if isinstance(item, SkippedIngredient)]
    return MealNutrition(
        resolved=resolved,
        totals=sum_profiles([item.contribution for item in resolved]),
        skipped=skipped,
    )


def _ensure_not_empty(meal: Meal) -> None:
    if meal is None or not meal.ingredients:
        raise EmptyMealError("Meal has no ingredients")


def _find_slot(meal: Meal, suggestion: SwapSuggestion) -> int:
    index = suggestion.slot_index
    if 0 <= index < len(meal) and meal.ingredients[index].name == (
        suggestion.original_food
    ):
        return index
    wanted = suggestion.original_food.strip().lower()
    for position, ingredient in enumerate(meal.ingredients):
        if ingredient.name.strip().lower() == wanted:
            return position
    raise SwapNotApplicableError(
        f"Meal has no ingredient {suggestion.original_food!r}"
    )
