"""Tests for nutrient profiles."""

import pytest

from meal_swaps.domain.errors import InvalidGoalError
from meal_swaps.domain.nutrition import Nutrient, NutrientProfile, sum_profiles


def test_profile_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        NutrientProfile(calories=-1.0)


def test_for_grams_scales_per_100g_values() -> None:
    profile = NutrientProfile(calories=200, protein_g=10, carbs_g=30, fat_g=5)

    portion = profile.for_grams(150)

    assert portion.calories == 300
    assert portion.protein_g == 15
    assert portion.carbs_g == 45
    assert portion.fat_g == 7.5


def test_scale_rejects_negative_factor() -> None:
    with pytest.raises(ValueError):
        NutrientProfile(calories=100).scale(-0.5)


def test_addition_keeps_sugar_only_when_both_know_it() -> None:
    known = NutrientProfile(calories=100, sugar_g=4.0)
    unknown = NutrientProfile(calories=50)

    assert (known + known).sugar_g == 8.0
    assert (known + unknown).sugar_g is None
    assert (known + unknown).calories == 150


def test_delta_to_is_signed() -> None:
    before = NutrientProfile(calories=265, fiber_g=2.7)
    after = NutrientProfile(calories=212, fiber_g=6.0)

    delta = before.delta_to(after)

    assert delta[Nutrient.CALORIES] == -53
    assert delta[Nutrient.FIBER] > 0
    assert delta[Nutrient.FAT] == 0


def test_apply_delta_floors_at_zero() -> None:
    totals = NutrientProfile(calories=100, fat_g=1.0)

    after = totals.apply_delta({Nutrient.CALORIES: -40, Nutrient.FAT: -5})

    assert after.calories == 60
    assert after.fat_g == 0.0


def test_sum_profiles_of_nothing_is_zero() -> None:
    assert sum_profiles([]).calories == 0.0


def test_nutrient_parse_accepts_aliases() -> None:
    assert Nutrient.parse("Carbohydrates") is Nutrient.CARBS
    assert Nutrient.parse(" FIBER ") is Nutrient.FIBER
    with pytest.raises(InvalidGoalError):
        Nutrient.parse("sodium")
