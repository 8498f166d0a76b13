"""
Pattern Library

Compiled lexical matchers for workout text. Every matcher is a pure function
of a single line that returns a typed result or None; a malformed number
inside an otherwise matching span counts as no match.
"""

import re
from decimal import Decimal
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Pattern

from wod_parser_api.utils import to_decimal, to_int
from .quantities import (
    Calories,
    CaloriePair,
    ClockTime,
    Distance,
    DistanceUnit,
    Duration,
    HeightMarker,
    IntervalConfig,
    LoadUnit,
    PercentageLoad,
    RepScheme,
    RoundCount,
    TimeCap,
    Weight,
    WeightPair,
)


# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------

_LOAD_UNIT = r"(?:lbs?|pounds?|kilos?|kilograms?|kgs?|poods?|#)"
_MINUTES = r"(?:minutes?|mins?)"
_SECONDS = r"(?:seconds?|secs?|s)"
_CALS = r"cal(?:orie)?s?"
_AMRAP_WORD = r"(?:\bamrap\b|\bas\s+many\s+(?:rounds|reps)(?:\s+(?:and|&)\s+reps)?\s+as\s+possible\b)"

# Anything after an unlabelled x/y pair that makes it something other than a load
_NOT_ANOTHER_UNIT = (
    r'(?!\s*(?:cal|meters?\b|metres?\b|m\b|km\b|k\b|ft\b|feet\b|mi\b|miles?\b'
    r'|in\b|inch|"|%|reps?\b|s\b|sec|min))'
)


def _time_fragment(name: str) -> str:
    """Time literal (1:30, :20, 20s, 3 min, 3) with group names prefixed by name."""
    return (
        rf"(?:(?P<{name}_clock>\d{{1,2}}:[0-5]\d)"
        rf"|:(?P<{name}_colon>[0-5]\d)"
        rf"|(?P<{name}_num>\d+)\s*(?P<{name}_unit>{_MINUTES}|{_SECONDS})?)(?![a-z\d])"
    )


# ---------------------------------------------------------------------------
# Quantities
# ---------------------------------------------------------------------------

RE_WEIGHT = re.compile(
    rf"(?<![\d./])(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>{_LOAD_UNIT})(?![a-z])",
    re.I,
)
RE_WEIGHT_PAIR = re.compile(
    rf"(?<![\d./:])(?P<male>\d+(?:\.\d+)?)\s*(?P<male_unit>{_LOAD_UNIT})?\s*/\s*"
    rf"(?P<female>\d+(?:\.\d+)?)(?![\d./:])\s*"
    rf"(?:(?P<unit>{_LOAD_UNIT})(?![a-z])|{_NOT_ANOTHER_UNIT})",
    re.I,
)
RE_DISTANCE = re.compile(
    r"(?<![\d./])(?P<value>\d+(?:\.\d+)?)\s*"
    r"(?P<unit>meters?|metres?|miles?|mi|m|kilometers?|km|k|feet|foot|ft)\b",
    re.I,
)
RE_CALORIE_PAIR = re.compile(
    rf"(?<![\d./])(?P<male>\d+)\s*/\s*(?P<female>\d+)\s*{_CALS}\b",
    re.I,
)
RE_CALORIES = re.compile(rf"(?<![\d./])(?P<value>\d+)\s*{_CALS}\b", re.I)
RE_PERCENTAGE = re.compile(
    r"(?<![\d.])(?P<pct>\d+(?:\.\d+)?)\s*%"
    r"(?:\s*(?:of\s*)?(?:your\s*)?(?P<ref>1\s*RM|one\s*rep\s*max|bodyweight|body\s*weight|BW)\b)?",
    re.I,
)
RE_BODYWEIGHT = re.compile(r"\b(?:bodyweight|body\s*weight|BW)\b", re.I)
RE_CLOCK = re.compile(r"(?<![\d:])(?P<minutes>\d{1,2}):(?P<seconds>[0-5]\d)(?![\d:])")
RE_DURATION = re.compile(
    rf"(?:(?<![\d.:/])(?P<value>\d+)\s*(?P<unit>{_MINUTES}|{_SECONDS})\b"
    r"|(?<![\d:]):(?P<colon>[0-5]\d)\b)",
    re.I,
)
RE_HEIGHT = re.compile(
    r"(?<![\d.])(?P<value>\d+)(?:\s*/\s*\d+)?\s*(?P<unit>inches|inch|in\b|\"|''|cm\b)",
    re.I,
)
RE_HOLD = re.compile(
    rf"\bhold\s*(?:for\s*)?(?P<value>\d+)\s*(?P<unit>{_MINUTES}|{_SECONDS})\b"
    rf"|(?<![\d.])(?P<value_b>\d+)\s*(?P<unit_b>{_MINUTES}|{_SECONDS})\s*hold\b",
    re.I,
)

# ---------------------------------------------------------------------------
# Workout structure
# ---------------------------------------------------------------------------

RE_TIME_CAP = re.compile(
    r"\b(?:time\s*cap|cap|tc)\b\s*(?:of\s*)?[:=]?\s*(?P<minutes>\d+)(?::(?P<seconds>[0-5]\d))?"
    rf"|(?<![\d.])(?P<minutes_b>\d+)\s*-?\s*{_MINUTES}\s*(?:time\s*)?cap\b",
    re.I,
)
RE_ROUND_COUNT = re.compile(r"(?<![\d.])(?P<rounds>\d+)\s*(?:rounds?|rft|sets?)\b", re.I)
RE_ROUNDS_HEADER = re.compile(
    r"^(?P<rounds>\d+)\s*(?:rounds?|rft|sets?)\b(?:\s*(?:of|for\s+quality|each))?\s*:?$",
    re.I,
)
RE_INTERVAL = re.compile(
    r"(?<![\d.])(?P<rounds>\d+)\s*(?:x|×|rounds?(?:\s*of)?)\s*:?\s*"
    + _time_fragment("work")
    + r"\s*(?:on|work)?\s*[,/&]?\s*(?:and\s*)?"
    + r"(?:rest\s*" + _time_fragment("rest_a")
    + r"|" + _time_fragment("rest_b") + r"\s*(?:off|rest)\b)",
    re.I,
)
RE_DISTANCE_REPEAT = re.compile(
    r"(?<![\d.])(?P<rounds>\d+)\s*(?:x|×|rounds?\s*(?:of)?)\s*(?P<value>\d+(?:\.\d+)?)\s*"
    r"(?:meters?|metres?|m|km|k|miles?|mi|ft)\b",
    re.I,
)
RE_TABATA = re.compile(
    r"\btabata\b"
    r"|\b8\s*(?:x|rounds?\s*(?:of)?)\s*:?\s*:?20\s*(?:s|sec(?:ond)?s?)?\s*(?:on|work)?\s*[/,]?\s*"
    r":?10\s*(?:s|sec(?:ond)?s?)?\s*(?:off|rest)\b",
    re.I,
)
RE_AMRAP = re.compile(
    rf"(?:(?<![\d.])(?P<before>\d+)\s*(?:-\s*)?(?:{_MINUTES}|m|')?\s*{_AMRAP_WORD})"
    rf"|(?:{_AMRAP_WORD}(?:\s*[:(\-]?\s*(?:in|for|of)?\s*(?P<after>\d+)\s*"
    rf"(?:(?:{_MINUTES}|m)\b|(?=\s*(?:[):,.]|$))))?)",
    re.I,
)
RE_EMOM = re.compile(
    rf"(?:(?<![\d.])(?P<before>\d+)\s*(?:-\s*)?(?:{_MINUTES}|m|')?\s*)?"
    rf"(?:\be(?P<every_n>\d*)mom\b"
    rf"|\bevery\s+(?:(?P<every_min>\d+)\s*{_MINUTES}|(?P<every_sec>\d+)\s*{_SECONDS}|minute)"
    rf"(?:\s+on\s+the\s+minute)?\b)"
    rf"(?:\s*[:(\-]?\s*(?:x|for)?\s*(?P<after>\d+)\s*"
    rf"(?:(?P<after_unit>{_MINUTES}|m|rounds?)\b|(?=\s*(?:[):,.]|$))))?",
    re.I,
)
RE_FOR_TIME = re.compile(
    r"(?:(?<![\d.])(?P<rounds>\d+)\s*(?:rounds?|rds?)\s*(?:of\s*)?,?\s*for\s+time\b"
    r"|(?:(?<![\d.])(?P<rft>\d+))?\s*\brft\b"
    r"|\bfor\s+time\b"
    r"|\bcomplete\s+as\s+fast\s+as\s+possible\b)",
    re.I,
)
RE_REST_LINE = re.compile(rf"^rest\b|^\d+\s*{_MINUTES}?\s*rest$", re.I)
# Work/rest prescription on its own line: "20 sec on / 10 sec off"
RE_WORK_REST = re.compile(
    r"^(?:work\s*:?\s*)?" + _time_fragment("work")
    + r"\s*(?:on|work)?\s*[,/&]?\s*(?:and\s*)?"
    + r"(?:rest\s*:?\s*" + _time_fragment("rest_a")
    + r"|" + _time_fragment("rest_b") + r"\s*(?:off|rest)\b)\s*:?$",
    re.I,
)

# ---------------------------------------------------------------------------
# Rep schemes
# ---------------------------------------------------------------------------

_CHIPPER_REPS = r"\d+(?:\s*-\s*\d+)+"
_PER_ROUND_REPS = r"\d+(?:\s*/\s*\d+){2,}"

RE_CHIPPER = re.compile(
    rf"^(?P<reps>{_CHIPPER_REPS})\s*(?:reps?)?\s*(?:of)?\s*(?:,?\s*for\s+time)?\s*[:.]?$",
    re.I,
)
RE_PER_ROUND = re.compile(rf"^(?P<reps>{_PER_ROUND_REPS})\s*(?:reps?)?\s*:?$", re.I)
RE_FIXED_REPS = re.compile(
    r"^(?P<rounds>\d+)\s*(?:rounds?|sets?|x)\s*(?:of\s*)?(?P<reps>\d+)\s*(?:reps?)?\s*:?$",
    re.I,
)
RE_LEADING_SCHEME = re.compile(
    rf"^(?P<reps>{_CHIPPER_REPS}|{_PER_ROUND_REPS})\s*(?:reps?\s*(?:of\s*)?)?[:,]?\s+(?P<rest>[a-z].*)$",
    re.I,
)

# ---------------------------------------------------------------------------
# Movement lines
# ---------------------------------------------------------------------------

# A unit right after the number means the line leads with a quantity, not reps
_NOT_A_UNIT = (
    rf"(?!(?:{_MINUTES}|{_SECONDS}|{_CALS}|meters?|metres?|m|km|k|miles?|mi|ft|feet"
    rf"|{_LOAD_UNIT}|rounds?|sets?|rft)\b)"
)

RE_MOVEMENT_WITH_REPS = re.compile(
    r"^(?P<reps>\d+)(?:\s*x)?\s+(?:reps?\s+(?:of\s+)?)?" + _NOT_A_UNIT + r"(?!x\s*[\d:])(?P<movement>[a-z].*?)"
    r"(?:\s*\((?P<modifier>[^)]*)\))?\s*$",
    re.I,
)
RE_MOVEMENT_WITH_DURATION = re.compile(
    rf"^(?:(?P<clock>\d{{1,2}}:[0-5]\d)|:(?P<colon>[0-5]\d)|(?P<value>\d+)\s*(?P<unit>{_MINUTES}|{_SECONDS})\b)"
    r"\s*(?:of\s+)?(?P<movement>[a-z].*)$",
    re.I,
)
# Sets prefix: "3 x 10 Back Squats", "4 x 500m Row"
RE_SET_PREFIX = re.compile(r"^(?P<sets>\d+)\s*[x×]\s*(?P<rest>[\d:].*)$", re.I)
RE_EMPTY_PARENS = re.compile(r"\(\s*[,;/]*\s*\)")


PATTERNS: Mapping[str, Pattern] = MappingProxyType({
    "weight": RE_WEIGHT,
    "weight_pair": RE_WEIGHT_PAIR,
    "distance": RE_DISTANCE,
    "calories": RE_CALORIES,
    "calorie_pair": RE_CALORIE_PAIR,
    "percentage": RE_PERCENTAGE,
    "bodyweight": RE_BODYWEIGHT,
    "clock_time": RE_CLOCK,
    "duration": RE_DURATION,
    "height": RE_HEIGHT,
    "hold": RE_HOLD,
    "time_cap": RE_TIME_CAP,
    "round_count": RE_ROUND_COUNT,
    "rounds_header": RE_ROUNDS_HEADER,
    "interval": RE_INTERVAL,
    "distance_repeat": RE_DISTANCE_REPEAT,
    "tabata": RE_TABATA,
    "amrap": RE_AMRAP,
    "emom": RE_EMOM,
    "for_time": RE_FOR_TIME,
    "rest": RE_REST_LINE,
    "work_rest": RE_WORK_REST,
    "chipper": RE_CHIPPER,
    "per_round": RE_PER_ROUND,
    "fixed_reps": RE_FIXED_REPS,
    "leading_scheme": RE_LEADING_SCHEME,
    "movement_with_reps": RE_MOVEMENT_WITH_REPS,
    "movement_with_duration": RE_MOVEMENT_WITH_DURATION,
    "set_prefix": RE_SET_PREFIX,
})


# ---------------------------------------------------------------------------
# Match results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TabataMarker:
    original_text: str


@dataclass(frozen=True)
class AmrapMarker:
    minutes: Optional[int]
    original_text: str


@dataclass(frozen=True)
class EmomMarker:
    interval_seconds: int
    total_seconds: Optional[int]
    original_text: str


@dataclass(frozen=True)
class ForTimeMarker:
    rounds: Optional[int]
    original_text: str


@dataclass(frozen=True)
class WorkRestMarker:
    work_seconds: int
    rest_seconds: int
    original_text: str


@dataclass(frozen=True)
class LeadingRepScheme:
    """A scheme that opens a movement line: '21-15-9 Thrusters'."""
    scheme: RepScheme
    remainder: str


@dataclass(frozen=True)
class MovementWithReps:
    reps: int
    movement: str
    modifier: Optional[str]
    original_text: str


@dataclass(frozen=True)
class MovementWithDuration:
    seconds: int
    movement: str
    original_text: str


@dataclass(frozen=True)
class SetPrefix:
    sets: int
    remainder: str


# ---------------------------------------------------------------------------
# Unit lookups
# ---------------------------------------------------------------------------

def _load_unit(raw: Optional[str]) -> Optional[LoadUnit]:
    if not raw:
        return None
    unit = raw.lower()
    if unit == "#" or unit.startswith(("lb", "pound")):
        return LoadUnit.LB
    if unit.startswith(("kg", "kilo")):
        return LoadUnit.KG
    if unit.startswith("pood"):
        return LoadUnit.POOD
    return None


def _distance_unit(raw: str) -> DistanceUnit:
    unit = raw.lower()
    if unit in ("k", "km") or unit.startswith("kilo"):
        return DistanceUnit.KM
    if unit in ("ft", "feet", "foot"):
        return DistanceUnit.FT
    if unit == "mi" or unit.startswith("mile"):
        return DistanceUnit.MI
    return DistanceUnit.M


def _seconds(value: Optional[str], unit: Optional[str], default_unit_seconds: int = 60) -> Optional[int]:
    """Convert a number plus time unit to seconds. No unit means minutes."""
    number = to_int(value)
    if number is None:
        return None
    if not unit:
        return number * default_unit_seconds
    return number * 60 if unit.lower().startswith("m") else number


def _clock_seconds(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    minutes, _, seconds = text.partition(":")
    m, s = to_int(minutes), to_int(seconds)
    if m is None or s is None:
        return None
    return m * 60 + s


def _time_value(m: re.Match, name: str) -> Optional[int]:
    """Seconds from a group set produced by _time_fragment."""
    clock = m.group(f"{name}_clock")
    if clock:
        return _clock_seconds(clock)
    colon = m.group(f"{name}_colon")
    if colon:
        return to_int(colon)
    return _seconds(m.group(f"{name}_num"), m.group(f"{name}_unit"))


def _int_list(text: str, separator: str) -> Optional[list]:
    values = [to_int(part) for part in text.split(separator)]
    if not values or any(v is None for v in values):
        return None
    return values


# ---------------------------------------------------------------------------
# Quantity matchers
# ---------------------------------------------------------------------------

def match_weight(line: str) -> Optional[Weight]:
    m = RE_WEIGHT.search(line)
    if not m:
        return None
    value, unit = to_decimal(m.group("value")), _load_unit(m.group("unit"))
    if value is None or unit is None:
        return None
    return Weight(value, unit, m.group(0))


def match_weight_pair(line: str) -> Optional[WeightPair]:
    """Paired male/female load. Unit defaults to pounds when omitted and male > female."""
    m = RE_WEIGHT_PAIR.search(line)
    if not m:
        return None
    male, female = to_decimal(m.group("male")), to_decimal(m.group("female"))
    if male is None or female is None:
        return None
    unit = _load_unit(m.group("unit")) or _load_unit(m.group("male_unit"))
    if unit is None:
        # without a unit only a heavier/lighter pair reads as a load; 5/5 is per side
        if male <= female:
            return None
        unit = LoadUnit.LB
    text = m.group(0).strip()
    return WeightPair(Weight(male, unit, text), Weight(female, unit, text), text)


def match_distance(line: str) -> Optional[Distance]:
    m = RE_DISTANCE.search(line)
    if not m:
        return None
    value = to_decimal(m.group("value"))
    if value is None:
        return None
    return Distance(value, _distance_unit(m.group("unit")), m.group(0))


def match_calories(line: str) -> Optional[Calories]:
    m = RE_CALORIES.search(line)
    if not m:
        return None
    value = to_int(m.group("value"))
    return Calories(value, m.group(0)) if value is not None else None


def match_calorie_pair(line: str) -> Optional[CaloriePair]:
    m = RE_CALORIE_PAIR.search(line)
    if not m:
        return None
    male, female = to_int(m.group("male")), to_int(m.group("female"))
    if male is None or female is None:
        return None
    return CaloriePair(male, female, m.group(0))


def match_percentage(line: str) -> Optional[PercentageLoad]:
    """75% 1RM, 50% of bodyweight, or a bare bodyweight / BW marker."""
    m = RE_PERCENTAGE.search(line)
    if m:
        pct = to_decimal(m.group("pct"))
        if pct is None:
            return None
        ref = (m.group("ref") or "1RM").lower()
        reference = "bodyweight" if ("body" in ref or ref == "bw") else "1RM"
        return PercentageLoad(pct, reference, m.group(0).strip())
    m = RE_BODYWEIGHT.search(line)
    if m:
        return PercentageLoad(Decimal("100"), "bodyweight", m.group(0))
    return None


def match_clock_time(line: str) -> Optional[ClockTime]:
    m = RE_CLOCK.search(line)
    if not m:
        return None
    minutes, seconds = to_int(m.group("minutes")), to_int(m.group("seconds"))
    if minutes is None or seconds is None:
        return None
    return ClockTime(minutes, seconds, m.group(0))


def match_duration(line: str) -> Optional[Duration]:
    m = RE_DURATION.search(line)
    if not m:
        return None
    if m.group("colon"):
        seconds = to_int(m.group("colon"))
    else:
        seconds = _seconds(m.group("value"), m.group("unit"))
    return Duration(seconds, m.group(0)) if seconds is not None else None


def match_height_marker(line: str) -> Optional[HeightMarker]:
    m = RE_HOLD.search(line)
    if m:
        raw_value = m.group("value") or m.group("value_b")
        raw_unit = m.group("unit") or m.group("unit_b")
        seconds = _seconds(raw_value, raw_unit)
        if seconds is not None:
            return HeightMarker("hold", seconds, "s", m.group(0))
    m = RE_HEIGHT.search(line)
    if m:
        value = to_int(m.group("value"))
        if value is not None:
            unit = "cm" if m.group("unit").lower() == "cm" else "in"
            return HeightMarker("height", value, unit, m.group(0))
    return None


# ---------------------------------------------------------------------------
# Structure matchers
# ---------------------------------------------------------------------------

def match_time_cap(line: str) -> Optional[TimeCap]:
    m = RE_TIME_CAP.search(line)
    if not m:
        return None
    minutes = to_int(m.group("minutes") or m.group("minutes_b"))
    if minutes is None:
        return None
    seconds = to_int(m.group("seconds")) or 0
    return TimeCap(minutes * 60 + seconds, m.group(0).strip())


def match_round_count(line: str) -> Optional[RoundCount]:
    m = RE_ROUND_COUNT.search(line)
    if not m:
        return None
    rounds = to_int(m.group("rounds"))
    return RoundCount(rounds, m.group(0)) if rounds else None


def match_rounds_header(line: str) -> Optional[RoundCount]:
    """Whole-line round count such as '5 Rounds:'."""
    m = RE_ROUNDS_HEADER.match(line.strip())
    if not m:
        return None
    rounds = to_int(m.group("rounds"))
    return RoundCount(rounds, m.group(0)) if rounds else None


def is_distance_repeat(line: str) -> bool:
    """4 x 500m and friends repeat a distance rather than a timed interval."""
    return RE_DISTANCE_REPEAT.search(line) is not None


def match_interval(line: str) -> Optional[IntervalConfig]:
    if is_distance_repeat(line):
        return None
    m = RE_INTERVAL.search(line)
    if not m:
        return None
    rounds = to_int(m.group("rounds"))
    work = _time_value(m, "work")
    rest = _time_value(m, "rest_a")
    if rest is None:
        rest = _time_value(m, "rest_b")
    if not rounds or not work or rest is None:
        return None
    return IntervalConfig(rounds, work, rest, m.group(0).strip())


def match_work_rest(line: str) -> Optional[WorkRestMarker]:
    """Work/rest split with no round count, e.g. '20 sec on / 10 sec off'."""
    m = RE_WORK_REST.match(line.strip())
    if not m:
        return None
    work = _time_value(m, "work")
    rest = _time_value(m, "rest_a")
    if rest is None:
        rest = _time_value(m, "rest_b")
    if not work or rest is None:
        return None
    return WorkRestMarker(work, rest, m.group(0).strip())


def match_tabata(line: str) -> Optional[TabataMarker]:
    m = RE_TABATA.search(line)
    return TabataMarker(m.group(0)) if m else None


def match_amrap(line: str) -> Optional[AmrapMarker]:
    m = RE_AMRAP.search(line)
    if not m:
        return None
    minutes = to_int(m.group("before") or m.group("after"))
    return AmrapMarker(minutes or None, m.group(0).strip())


def match_emom(line: str) -> Optional[EmomMarker]:
    m = RE_EMOM.search(line)
    if not m:
        return None

    if m.group("every_sec"):
        interval = to_int(m.group("every_sec"))
    elif m.group("every_min"):
        interval = _seconds(m.group("every_min"), "min")
    elif m.group("every_n"):
        interval = _seconds(m.group("every_n"), "min")
    else:
        interval = 60
    if not interval:
        return None

    total = None
    if m.group("before"):
        total = _seconds(m.group("before"), "min")
    elif m.group("after"):
        after_unit = (m.group("after_unit") or "").lower()
        count = to_int(m.group("after"))
        if count is not None:
            total = count * interval if after_unit.startswith("r") else count * 60
    return EmomMarker(interval, total or None, m.group(0).strip())


def match_for_time(line: str) -> Optional[ForTimeMarker]:
    m = RE_FOR_TIME.search(line)
    if not m:
        return None
    rounds = to_int(m.group("rounds") or m.group("rft"))
    return ForTimeMarker(rounds or None, m.group(0).strip())


# ---------------------------------------------------------------------------
# Rep scheme matchers
# ---------------------------------------------------------------------------

def match_chipper(line: str) -> Optional[RepScheme]:
    """Whole-line chipper scheme: '21-15-9', '50-40-30-20-10 reps for time'."""
    m = RE_CHIPPER.match(line.strip())
    if not m:
        return None
    reps = _int_list(m.group("reps"), "-")
    return RepScheme.from_reps(reps, m.group(0)) if reps else None


def match_per_round(line: str) -> Optional[RepScheme]:
    """Whole-line per-round scheme: '10/8/6'."""
    m = RE_PER_ROUND.match(line.strip())
    if not m:
        return None
    reps = _int_list(m.group("reps"), "/")
    return RepScheme.from_reps(reps, m.group(0)) if reps else None


def match_fixed_reps(line: str) -> Optional[RepScheme]:
    """Whole-line fixed scheme: '5 rounds of 10 reps', '5x5'."""
    m = RE_FIXED_REPS.match(line.strip())
    if not m:
        return None
    rounds, reps = to_int(m.group("rounds")), to_int(m.group("reps"))
    if not rounds or not reps:
        return None
    return RepScheme.from_reps([reps] * rounds, m.group(0))


def match_rep_scheme(line: str) -> Optional[RepScheme]:
    return match_chipper(line) or match_per_round(line) or match_fixed_reps(line)


def match_leading_rep_scheme(line: str) -> Optional[LeadingRepScheme]:
    m = RE_LEADING_SCHEME.match(line.strip())
    if not m:
        return None
    raw = m.group("reps")
    reps = _int_list(raw, "-" if "-" in raw else "/")
    scheme = RepScheme.from_reps(reps, raw) if reps else None
    if scheme is None:
        return None
    return LeadingRepScheme(scheme, m.group("rest").strip())


# ---------------------------------------------------------------------------
# Movement matchers
# ---------------------------------------------------------------------------

def match_movement_with_reps(line: str) -> Optional[MovementWithReps]:
    m = RE_MOVEMENT_WITH_REPS.match(line.strip())
    if not m:
        return None
    reps = to_int(m.group("reps"))
    if not reps:
        return None
    modifier = m.group("modifier")
    return MovementWithReps(
        reps=reps,
        movement=m.group("movement").strip(),
        modifier=modifier.strip() if modifier else None,
        original_text=line,
    )


def match_set_prefix(line: str) -> Optional[SetPrefix]:
    m = RE_SET_PREFIX.match(line.strip())
    if not m:
        return None
    sets = to_int(m.group("sets"))
    return SetPrefix(sets, m.group("rest").strip()) if sets else None


def match_movement_with_duration(line: str) -> Optional[MovementWithDuration]:
    m = RE_MOVEMENT_WITH_DURATION.match(line.strip())
    if not m:
        return None
    if m.group("clock"):
        seconds = _clock_seconds(m.group("clock"))
    elif m.group("colon"):
        seconds = to_int(m.group("colon"))
    else:
        seconds = _seconds(m.group("value"), m.group("unit"))
    if not seconds:
        return None
    return MovementWithDuration(seconds, m.group("movement").strip(), line)


def is_header_line(line: str) -> bool:
    """True for structural lines that carry no movement of their own."""
    text = line.strip()
    if not text:
        return False
    if (
        RE_TABATA.search(text)
        or RE_AMRAP.search(text)
        or RE_EMOM.search(text)
        or RE_FOR_TIME.search(text)
        or RE_TIME_CAP.search(text)
        or RE_REST_LINE.search(text)
        or RE_WORK_REST.match(text)
        or match_interval(text)
    ):
        return True
    return match_rounds_header(text) is not None or match_rep_scheme(text) is not None
