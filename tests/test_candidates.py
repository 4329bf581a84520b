"""Tests for candidate generation."""

import asyncio

from meal_swaps.services.candidates import CandidateGenerator
from meal_swaps.services.goals import build_goal
from tests.conftest import BrokenEntryCatalog


def _generate(generator, catalog, name, goals):
    profile = asyncio.run(catalog.lookup(name))
    return asyncio.run(generator.generate(name, profile, goals))


def test_group_candidates_exclude_original_and_stay_in_group(catalog) -> None:
    generator = CandidateGenerator(catalog)
    goals = [build_goal("calories", "decrease")]

    candidates = _generate(generator, catalog, "white bread", goals)

    assert "white bread" not in candidates
    assert set(candidates) == {
        "bagel",
        "light white bread",
        "rye bread",
        "whole wheat bread",
    }


def test_group_candidates_prefer_similar_names_and_respect_limit(catalog) -> None:
    generator = CandidateGenerator(catalog, limit=2)
    goals = [build_goal("calories", "decrease")]

    candidates = _generate(generator, catalog, "white bread", goals)

    assert candidates == ["light white bread", "rye bread"]


def test_unknown_group_falls_back_to_catalog_search(catalog) -> None:
    generator = CandidateGenerator(catalog)
    goals = [build_goal("fiber", "increase")]

    candidates = _generate(generator, catalog, "oat porridge", goals)

    assert candidates == ["oat bran", "oat milk"]


def test_fallback_orders_by_primary_goal(catalog) -> None:
    generator = CandidateGenerator(catalog)
    goals = [build_goal("calories", "decrease")]

    candidates = _generate(generator, catalog, "oat porridge", goals)

    assert candidates == ["oat milk", "oat bran"]


def test_no_group_and_no_search_hits_yields_nothing(catalog) -> None:
    generator = CandidateGenerator(catalog)
    goals = [build_goal("calories", "decrease")]

    assert _generate(generator, catalog, "mystery stew", goals) == []


def test_fallback_drops_hits_whose_lookup_fails(catalog) -> None:
    broken = BrokenEntryCatalog(inner=catalog, broken={"oat milk"})
    generator = CandidateGenerator(broken)
    goals = [build_goal("fiber", "increase")]

    candidates = _generate(generator, broken, "oat porridge", goals)

    assert candidates == ["oat bran"]
