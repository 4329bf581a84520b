"""Tests for unit conversion."""

import pytest

from meal_swaps.domain.errors import ConversionError
from meal_swaps.services.units import MeasureTableConverter


def test_mass_units_convert_to_grams() -> None:
    converter = MeasureTableConverter()

    assert converter.to_grams("rice", 150, "g") == 150
    assert converter.to_grams("rice", 1.5, "kg") == 1500
    assert converter.to_grams("rice", 2, "1 g") == 2
    assert converter.to_grams("rice", 1, "lb") == pytest.approx(453.59237)


def test_food_specific_measures_take_precedence(converter) -> None:
    assert converter.to_grams("White Bread", 2, "slice") == 50
    assert converter.to_grams("white bread", 1, "2 slice") == 50


def test_volume_uses_food_density_or_default(converter) -> None:
    assert converter.to_grams("whole milk", 1, "cup") == pytest.approx(247.2)
    assert converter.to_grams("water", 2, "tbsp") == 30


def test_volume_without_density_fails_when_no_default() -> None:
    converter = MeasureTableConverter(default_density_g_per_ml=None)

    with pytest.raises(ConversionError):
        converter.to_grams("honey", 1, "tbsp")


def test_unknown_unit_or_bad_quantity_fails() -> None:
    converter = MeasureTableConverter()

    with pytest.raises(ConversionError):
        converter.to_grams("rice", 1, "handful")
    with pytest.raises(ConversionError):
        converter.to_grams("rice", 0, "g")
    with pytest.raises(ConversionError):
        converter.to_grams("rice", 1, "  ")


def test_measure_table_is_normalized_on_construction() -> None:
    converter = MeasureTableConverter(
        food_measures={"Bagel ": {"1 Piece": 95.0}},
        densities_g_per_ml={"Olive Oil": 0.91},
    )

    assert converter.to_grams("bagel", 2, "piece") == 190
    assert converter.to_grams("olive oil", 1, "tbsp") == pytest.approx(13.65)
