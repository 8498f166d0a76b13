"""
Parser Models

Pipeline artifacts and the response schema produced by the workout text parser.
Intermediate stages exchange frozen dataclasses; everything that leaves the
pipeline is a pydantic model.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from .quantities import (
    CaloriePair,
    Calories,
    Distance,
    Duration,
    HeightMarker,
    PercentageLoad,
    RepScheme,
    Weight,
    WeightPair,
)


class WorkoutType(str, Enum):
    """Workout classification"""
    FOR_TIME = "for_time"
    AMRAP = "amrap"
    EMOM = "emom"
    INTERVALS = "intervals"
    ROUNDS = "rounds"
    TABATA = "tabata"


class ConfidenceLevel(str, Enum):
    """Human-facing bucket for the 0-100 confidence score"""
    PERFECT = "Perfect"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ParsingIssue(BaseModel):
    """Error or warning attached to a parse result"""
    error_type: str = Field(..., description="Issue tag, e.g. 'EmptyInput', 'UnknownMovement'")
    message: str
    line_number: int = Field(default=0, ge=0, description="1-based source line, 0 for document-level issues")
    severity: IssueSeverity = IssueSeverity.ERROR
    suggestion: Optional[str] = None
    original_text: Optional[str] = None
    similar_names: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True


# ---------------------------------------------------------------------------
# Pipeline artifacts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MovementSourceLine:
    """A movement line and where it came from."""
    text: str
    line_number: int


@dataclass(frozen=True)
class PreprocessedDocument:
    original_text: str
    normalized_text: str = ""
    title: Optional[str] = None
    lines: Tuple[str, ...] = ()
    header_lines: Tuple[str, ...] = ()
    movement_lines: Tuple[MovementSourceLine, ...] = ()
    workout_rep_scheme: Optional[RepScheme] = None
    # keyed by index into movement_lines; read-only
    movement_rep_schemes: Mapping[int, RepScheme] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class WorkoutTypeMatch:
    workout_type: WorkoutType
    confidence: float
    matched_pattern: Optional[str] = None
    time_cap_seconds: Optional[int] = None
    round_count: Optional[int] = None
    interval_seconds: Optional[int] = None
    # set when the type was inferred from a chipper rep scheme
    rep_scheme: Optional[RepScheme] = None
    error: Optional[ParsingIssue] = None
    warning: Optional[ParsingIssue] = None


@dataclass(frozen=True)
class ParsedMovementLine:
    """Everything the pattern library could pull out of one line."""
    original_text: str
    movement_text: str = ""
    reps: Optional[int] = None
    # "3 x 10 Back Squats" prescribes 3 sets of 10
    set_count: Optional[int] = None
    weight: Optional[Weight] = None
    weight_pair: Optional[WeightPair] = None
    distance: Optional[Distance] = None
    calories: Optional[Calories] = None
    calorie_pair: Optional[CaloriePair] = None
    percentage: Optional[PercentageLoad] = None
    duration: Optional[Duration] = None
    height: Optional[HeightMarker] = None
    modifiers: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return not self.original_text.strip()

    @property
    def has_load(self) -> bool:
        return self.weight is not None or self.weight_pair is not None or self.percentage is not None

    @property
    def has_quantity(self) -> bool:
        return (
            self.reps is not None
            or self.has_load
            or self.distance is not None
            or self.calories is not None
            or self.calorie_pair is not None
            or self.duration is not None
        )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class ParsedMovementEntry(BaseModel):
    """One movement of the structured workout"""
    sequence_order: int = Field(..., ge=1)
    line_number: int = Field(default=0, ge=0)
    original_text: str
    movement_text: str = Field(default="", description="Movement name after quantities were stripped")

    movement_definition_id: Optional[int] = Field(default=None, description="None when unidentified")
    canonical_name: Optional[str] = None
    movement_name: Optional[str] = Field(default=None, description="Display name of the resolved movement")
    category: Optional[str] = None
    match_score: int = Field(default=0, ge=0, le=100)

    rep_count: Optional[int] = None
    set_count: Optional[int] = None
    load_value: Optional[float] = None
    load_value_female: Optional[float] = None
    load_unit: Optional[str] = None
    load_percentage: Optional[float] = None
    load_percentage_reference: Optional[str] = None
    distance_value: Optional[float] = None
    distance_unit: Optional[str] = None
    calories: Optional[int] = None
    calories_female: Optional[int] = None
    duration_seconds: Optional[int] = None
    height_value: Optional[int] = None
    height_unit: Optional[str] = None
    hold_seconds: Optional[int] = None
    notes: Optional[str] = None

    rep_scheme_reps: Optional[List[int]] = None
    rep_scheme_type: Optional[str] = None

    @property
    def is_identified(self) -> bool:
        return self.movement_definition_id is not None


class MovementLineResult(BaseModel):
    """Outcome of parsing one movement line"""
    success: bool
    line_number: int = 0
    original_text: str = ""
    entry: Optional[ParsedMovementEntry] = None
    confidence: int = Field(default=0, ge=0, le=100)
    issues: List[ParsingIssue] = Field(default_factory=list)

    @property
    def is_identified(self) -> bool:
        return self.entry is not None and self.entry.is_identified


class ParsedWorkout(BaseModel):
    """Structured workout without confidence metadata"""
    original_text: str
    title: Optional[str] = None
    parsed_description: str = ""
    workout_type: WorkoutType = WorkoutType.FOR_TIME
    time_cap_seconds: Optional[int] = None
    round_count: Optional[int] = None
    interval_duration_seconds: Optional[int] = None
    movements: List[ParsedMovementEntry] = Field(default_factory=list)
    errors: List[ParsingIssue] = Field(default_factory=list)
    rep_scheme_reps: Optional[List[int]] = None
    rep_scheme_type: Optional[str] = None

    class Config:
        use_enum_values = True


class ConfidenceBreakdown(BaseModel):
    """Inputs that went into the overall confidence score"""
    type_confidence: float = Field(default=0, ge=0, le=1)
    identification_rate: float = Field(default=0, ge=0, le=1)
    movement_lines: int = 0
    identified_movements: int = 0
    unidentified_movements: int = 0
    unparsed_lines: int = 0
    error_count: int = 0
    warning_count: int = 0
    error_limit_reached: bool = False


class ParsedWorkoutResult(BaseModel):
    """Terminal artifact of a parse"""
    success: bool = True
    original_text: str
    title: Optional[str] = None
    workout_type: WorkoutType = WorkoutType.FOR_TIME
    time_cap_seconds: Optional[int] = None
    round_count: Optional[int] = None
    interval_seconds: Optional[int] = None
    movements: List[ParsedMovementEntry] = Field(default_factory=list)
    errors: List[ParsingIssue] = Field(
        default_factory=list,
        description="Every issue, ordered errors first, then warnings, then info",
    )
    warnings: List[ParsingIssue] = Field(default_factory=list)
    confidence_score: int = Field(default=0, ge=0, le=100)
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    description: str = ""
    is_usable: bool = False
    confidence_details: ConfidenceBreakdown = Field(default_factory=ConfidenceBreakdown)
    parsed_workout: Optional[ParsedWorkout] = None

    class Config:
        use_enum_values = True
