"""Candidate generation for ingredient substitutions."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from meal_swaps.domain.errors import LookupFailure
from meal_swaps.domain.nutrition import NutrientProfile
from meal_swaps.domain.swaps import GoalSpec
from meal_swaps.services.catalog import NutrientCatalog

_logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z]+")
_MIN_TOKEN_LENGTH = 3


@dataclass
class CandidateGenerator:
    """Proposes plausible replacement foods for one ingredient.

    Candidates come from the ingredient's food group when the catalog knows
    it. Otherwise the whole catalog is searched by the words of the food name
    and the hits are ordered by how favourably they differ on the primary
    goal nutrient. Either way the list is capped at ``limit`` so scoring cost
    does not grow with catalog size.
    """

    catalog: NutrientCatalog
    limit: int = 50
    search_pool_limit: int = 200

    async def generate(
        self,
        food_name: str,
        original_profile: NutrientProfile,
        goals: Sequence[GoalSpec],
    ) -> list[str]:
        """Return up to ``limit`` replacement food names, never the original."""
        group = await self.catalog.food_group_of(food_name)
        if group:
            members = await self.catalog.search_by_group(group)
            candidates = _order_by_name_affinity(
                food_name, _exclude(food_name, members)
            )
            _logger.debug(
                "Group candidates for %s: group=%s count=%s",
                food_name,
                group,
                len(candidates),
            )
            return candidates[: self.limit]
        return await self._search_catalog(food_name, original_profile, goals)

    async def _search_catalog(
        self,
        food_name: str,
        original_profile: NutrientProfile,
        goals: Sequence[GoalSpec],
    ) -> list[str]:
        pool: list[str] = []
        seen: set[str] = set()
        for token in _search_terms(food_name):
            hits = await self.catalog.search_by_text(token)
            for name in _exclude(food_name, hits):
                key = name.lower()
                if key not in seen:
                    seen.add(key)
                    pool.append(name)
            if len(pool) >= self.search_pool_limit:
                break
        pool = pool[: self.search_pool_limit]
        if not pool:
            _logger.debug("No catalog-wide candidates for %s", food_name)
            return []
        if not goals:
            return sorted(pool)[: self.limit]

        primary = goals[0]
        ranked: list[tuple[float, str]] = []
        for name in pool:
            try:
                profile = await self.catalog.lookup(name)
            except LookupFailure as exc:
                _logger.debug("Dropping search hit %s: %s", name, exc)
                continue
            if profile is None:
                continue
            improvement = primary.improvement(original_profile.delta_to(profile))
            ranked.append((improvement, name))
        ranked.sort(key=lambda item: (-item[0], item[1]))
        return [name for _, name in ranked[: self.limit]]


def _exclude(food_name: str, names: Sequence[str]) -> list[str]:
    own = food_name.strip().lower()
    return [name for name in names if name.strip().lower() != own]


def _tokens(name: str) -> set[str]:
    return {
        token
        for token in _TOKEN.findall(name.lower())
        if len(token) >= _MIN_TOKEN_LENGTH
    }


def _search_terms(food_name: str) -> list[str]:
    """Words of a food name, longest first, as catalog search seeds."""
    return sorted(_tokens(food_name), key=lambda token: (-len(token), token))


def _order_by_name_affinity(food_name: str, names: list[str]) -> list[str]:
    """Order names by shared words with the original, then alphabetically."""
    own = _tokens(food_name)
    return sorted(names, key=lambda name: (-len(own & _tokens(name)), name))
