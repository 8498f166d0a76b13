"""Unit tests for quantity value objects and rep scheme classification."""
from decimal import Decimal

import pytest

from wod_parser_api.parsers.quantities import (
    Distance,
    DistanceUnit,
    IntervalConfig,
    LoadUnit,
    RepScheme,
    RepSchemeType,
    Weight,
    classify_reps,
)


class TestClassifyReps:
    """Rep sequences are classified with a single scan."""

    @pytest.mark.parametrize("reps,expected", [
        ([21, 15, 9], RepSchemeType.DESCENDING),
        ([3, 6, 9, 12], RepSchemeType.ASCENDING),
        ([10, 10, 10], RepSchemeType.FIXED),
        ([10, 20, 10], RepSchemeType.CUSTOM),
        ([5], RepSchemeType.FIXED),
        ([10, 10, 5], RepSchemeType.CUSTOM),
    ])
    def test_classify(self, reps, expected):
        assert classify_reps(reps) == expected


class TestRepScheme:

    def test_from_reps(self):
        scheme = RepScheme.from_reps([21, 15, 9], "21-15-9")
        assert scheme.scheme_type == RepSchemeType.DESCENDING
        assert scheme.total_reps == 45
        assert scheme.round_count == 3
        assert scheme.original_text == "21-15-9"

    @pytest.mark.parametrize("reps", [[], [5, 0], [-1, 3]])
    def test_from_reps_rejects_invalid(self, reps):
        assert RepScheme.from_reps(reps) is None

    def test_mismatched_classification_raises(self):
        with pytest.raises(ValueError):
            RepScheme((21, 15, 9), RepSchemeType.ASCENDING)

    def test_empty_scheme_raises(self):
        with pytest.raises(ValueError):
            RepScheme((), RepSchemeType.FIXED)


class TestUnitConversion:

    def test_pounds_to_kilograms(self):
        assert Weight(Decimal("100"), LoadUnit.LB).to_kg() == Decimal("45.36")

    def test_pood_to_kilograms(self):
        assert Weight(Decimal("1.5"), LoadUnit.POOD).to_kg() == Decimal("24.57")

    def test_kilograms_to_pounds(self):
        assert Weight(Decimal("60"), LoadUnit.KG).to_lb() == Decimal("132.28")

    @pytest.mark.parametrize("value,unit,meters", [
        ("400", DistanceUnit.M, Decimal("400.00")),
        ("5", DistanceUnit.KM, Decimal("5000.00")),
        ("1", DistanceUnit.MI, Decimal("1609.34")),
        ("100", DistanceUnit.FT, Decimal("30.48")),
    ])
    def test_distance_to_meters(self, value, unit, meters):
        assert Distance(Decimal(value), unit).to_meters() == meters


class TestIntervalConfig:

    def test_interval_totals(self):
        config = IntervalConfig(rounds=5, work_seconds=180, rest_seconds=60)
        assert config.interval_seconds == 240
        assert config.total_seconds == 1200
