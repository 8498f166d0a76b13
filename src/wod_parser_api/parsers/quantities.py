"""
Quantity value objects

Immutable values extracted from a single workout line. Every value keeps the
substring it was parsed from so the movement-line parser can strip it from
the movement name afterwards.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence, Tuple


class LoadUnit(str, Enum):
    """Units for prescribed loads"""
    KG = "kg"
    LB = "lb"
    POOD = "pood"


class DistanceUnit(str, Enum):
    """Units for prescribed distances"""
    M = "m"
    KM = "km"
    FT = "ft"
    MI = "mi"


class RepSchemeType(str, Enum):
    """Shape of a rep sequence"""
    FIXED = "fixed"            # 10-10-10
    ASCENDING = "ascending"    # 3-6-9-12
    DESCENDING = "descending"  # 21-15-9
    CUSTOM = "custom"          # 10-20-10


_TWO_PLACES = Decimal("0.01")

_TO_KG = {
    LoadUnit.KG: Decimal("1"),
    LoadUnit.LB: Decimal("0.453592"),
    LoadUnit.POOD: Decimal("16.38"),
}

_TO_LB = {
    LoadUnit.LB: Decimal("1"),
    LoadUnit.KG: Decimal("2.20462"),
    LoadUnit.POOD: Decimal("36.11"),
}

_TO_METERS = {
    DistanceUnit.M: Decimal("1"),
    DistanceUnit.KM: Decimal("1000"),
    DistanceUnit.FT: Decimal("0.3048"),
    DistanceUnit.MI: Decimal("1609.344"),
}


@dataclass(frozen=True)
class Weight:
    value: Decimal
    unit: LoadUnit
    original_text: str = ""

    def to_kg(self) -> Decimal:
        return (self.value * _TO_KG[self.unit]).quantize(_TWO_PLACES)

    def to_lb(self) -> Decimal:
        return (self.value * _TO_LB[self.unit]).quantize(_TWO_PLACES)


@dataclass(frozen=True)
class WeightPair:
    """Male/female prescription such as 95/65 lb."""
    male: Weight
    female: Weight
    original_text: str = ""


@dataclass(frozen=True)
class Distance:
    value: Decimal
    unit: DistanceUnit
    original_text: str = ""

    def to_meters(self) -> Decimal:
        return (self.value * _TO_METERS[self.unit]).quantize(_TWO_PLACES)


@dataclass(frozen=True)
class Calories:
    value: int
    original_text: str = ""


@dataclass(frozen=True)
class CaloriePair:
    male: int
    female: int
    original_text: str = ""


@dataclass(frozen=True)
class PercentageLoad:
    """Load expressed relative to a reference, e.g. 75% of 1RM or bodyweight."""
    percentage: Decimal
    reference: str
    original_text: str = ""


@dataclass(frozen=True)
class Duration:
    seconds: int
    original_text: str = ""


@dataclass(frozen=True)
class ClockTime:
    minutes: int
    seconds: int
    original_text: str = ""

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds


@dataclass(frozen=True)
class TimeCap:
    seconds: int
    original_text: str = ""


@dataclass(frozen=True)
class RoundCount:
    rounds: int
    original_text: str = ""


@dataclass(frozen=True)
class HeightMarker:
    """Box/target height (24\") or an isometric hold (hold 30 sec)."""
    kind: str
    value: int
    unit: str
    original_text: str = ""


@dataclass(frozen=True)
class IntervalConfig:
    rounds: int
    work_seconds: int
    rest_seconds: int
    original_text: str = ""

    @property
    def interval_seconds(self) -> int:
        return self.work_seconds + self.rest_seconds

    @property
    def total_seconds(self) -> int:
        return self.rounds * self.interval_seconds


def classify_reps(reps: Sequence[int]) -> RepSchemeType:
    """Classify a rep sequence with a single linear scan."""
    if len(reps) <= 1:
        return RepSchemeType.FIXED

    is_fixed = is_descending = is_ascending = True
    for previous, current in zip(reps, reps[1:]):
        if current >= previous:
            is_descending = False
        if current <= previous:
            is_ascending = False
        if current != reps[0]:
            is_fixed = False

    if is_fixed:
        return RepSchemeType.FIXED
    if is_descending:
        return RepSchemeType.DESCENDING
    if is_ascending:
        return RepSchemeType.ASCENDING
    return RepSchemeType.CUSTOM


@dataclass(frozen=True)
class RepScheme:
    reps: Tuple[int, ...]
    scheme_type: RepSchemeType
    original_text: str = ""

    def __post_init__(self):
        if not self.reps:
            raise ValueError("Rep scheme must contain at least one round")
        if any(r <= 0 for r in self.reps):
            raise ValueError(f"Rep scheme values must be positive: {self.reps}")
        expected = classify_reps(self.reps)
        if expected != self.scheme_type:
            raise ValueError(
                f"Rep scheme {self.reps} is {expected.value}, not {self.scheme_type.value}"
            )

    @classmethod
    def from_reps(cls, reps: Sequence[int], original_text: str = "") -> Optional["RepScheme"]:
        """Build a scheme, or None when the sequence is empty or non-positive."""
        values = tuple(reps)
        if not values or any(r <= 0 for r in values):
            return None
        return cls(values, classify_reps(values), original_text)

    @property
    def total_reps(self) -> int:
        return sum(self.reps)

    @property
    def round_count(self) -> int:
        return len(self.reps)
