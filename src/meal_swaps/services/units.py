"""Unit conversion from household measures to grams."""

import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from meal_swaps.domain.errors import ConversionError

_logger = logging.getLogger(__name__)

_MASS_UNITS: dict[str, float] = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "mg": 0.001,
    "kg": 1000.0,
    "oz": 28.349523125,
    "ounce": 28.349523125,
    "ounces": 28.349523125,
    "lb": 453.59237,
    "lbs": 453.59237,
    "pound": 453.59237,
    "pounds": 453.59237,
}

_VOLUME_UNITS_ML: dict[str, float] = {
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "tsp": 5.0,
    "teaspoon": 5.0,
    "teaspoons": 5.0,
    "tbsp": 15.0,
    "tablespoon": 15.0,
    "tablespoons": 15.0,
    "cup": 240.0,
    "cups": 240.0,
    "fl oz": 29.5735,
}

# CNF measure names look like "1 cup" or "2 tbsp".
_MEASURE_PREFIX = re.compile(r"^(?P<count>\d+(?:\.\d+)?)\s+(?P<unit>.+)$")


class UnitConverter(Protocol):
    """Converts an ingredient quantity into grams."""

    def to_grams(self, food_name: str, quantity: float, unit: str) -> float:
        """Return grams for a quantity of a food, or raise ConversionError."""


@dataclass
class MeasureTableConverter(UnitConverter):
    """Table-driven converter with per-food measures and densities."""

    food_measures: dict[str, dict[str, float]] = field(default_factory=dict)
    densities_g_per_ml: dict[str, float] = field(default_factory=dict)
    default_density_g_per_ml: float | None = 1.0

    def __post_init__(self) -> None:
        self.food_measures = {
            _food_key(food): _normalize_measures(measures)
            for food, measures in self.food_measures.items()
        }
        self.densities_g_per_ml = {
            _food_key(food): density
            for food, density in self.densities_g_per_ml.items()
        }

    def add_measure(self, food_name: str, unit: str, grams_per_unit: float) -> None:
        """Register a food-specific measure such as one slice of bread."""
        if grams_per_unit <= 0:
            raise ValueError(f"Grams per unit must be positive, got {grams_per_unit}")
        count, unit_key = _split_measure(unit)
        measures = self.food_measures.setdefault(_food_key(food_name), {})
        measures[unit_key] = grams_per_unit / count

    def set_density(self, food_name: str, grams_per_ml: float) -> None:
        """Register the density used for volume measures of a food."""
        if grams_per_ml <= 0:
            raise ValueError(f"Density must be positive, got {grams_per_ml}")
        self.densities_g_per_ml[_food_key(food_name)] = grams_per_ml

    def to_grams(self, food_name: str, quantity: float, unit: str) -> float:
        """Convert a quantity of a food to grams."""
        if quantity <= 0:
            raise ConversionError(f"Quantity must be positive, got {quantity}")
        count, unit_key = _split_measure(unit)
        amount = quantity * count
        food_key = _food_key(food_name)

        food_specific = self.food_measures.get(food_key, {})
        if unit_key in food_specific:
            return amount * food_specific[unit_key]
        if unit_key in _MASS_UNITS:
            return amount * _MASS_UNITS[unit_key]
        if unit_key in _VOLUME_UNITS_ML:
            density = self.densities_g_per_ml.get(
                food_key, self.default_density_g_per_ml
            )
            if density is None:
                raise ConversionError(
                    f"No density known for {food_name!r}, cannot convert {unit!r}"
                )
            return amount * _VOLUME_UNITS_ML[unit_key] * density
        _logger.debug("Unknown unit %r for %s", unit, food_name)
        raise ConversionError(f"Unknown unit {unit!r} for {food_name!r}")


def _split_measure(unit: str) -> tuple[float, str]:
    """Split a measure like "2 tbsp" into its count and unit."""
    key = _unit_key(unit)
    if not key:
        raise ConversionError("Unit cannot be empty")
    match = _MEASURE_PREFIX.match(key)
    if match:
        count = float(match.group("count"))
        if count <= 0:
            raise ConversionError(f"Measure count must be positive in {unit!r}")
        return count, match.group("unit")
    return 1.0, key


def _normalize_measures(measures: dict[str, float]) -> dict[str, float]:
    normalized: dict[str, float] = {}
    for unit, grams in measures.items():
        count, unit_key = _split_measure(unit)
        normalized[unit_key] = grams / count
    return normalized


def _unit_key(unit: str) -> str:
    return " ".join(unit.lower().split()).rstrip(".")


def _food_key(name: str) -> str:
    return " ".join(name.lower().split())
