"""
Parsing issue catalogue

Error codes, message templates and the collector that de-duplicates and
orders issues before they are attached to a result.
"""

import difflib
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .models import IssueSeverity, ParsingIssue

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 10000
MIN_INPUT_LENGTH = 5
MAX_ERROR_COUNT = 20
SIMILAR_NAME_SUGGESTIONS = 3


class ErrorCode(str, Enum):
    # Input
    EMPTY_INPUT = "EmptyInput"
    INPUT_TOO_LONG = "InputTooLong"
    INPUT_TOO_SHORT = "InputTooShort"
    BINARY_CONTENT = "BinaryContent"
    NO_NUMBERS = "NoNumbers"

    # Structure
    NO_WORKOUT_STRUCTURE = "NoWorkoutStructure"
    NO_MOVEMENTS_DETECTED = "NoMovementsDetected"
    MISSING_DURATION = "MissingDuration"
    MISSING_TIME_CAP = "MissingTimeCap"
    MISSING_ROUND_COUNT = "MissingRoundCount"
    MISSING_INTERVAL = "MissingInterval"

    # Movement lines
    UNKNOWN_MOVEMENT = "UnknownMovement"
    AMBIGUOUS_MOVEMENT = "AmbiguousMovement"
    UNRECOGNIZED_MOVEMENT_FORMAT = "UnrecognizedMovementFormat"

    # System
    CANCELLED = "Cancelled"


_MESSAGES: Dict[ErrorCode, Tuple[str, str]] = {
    ErrorCode.EMPTY_INPUT: (
        "Workout text cannot be empty.",
        "Enter a workout description including movements and quantities.",
    ),
    ErrorCode.INPUT_TOO_LONG: (
        "Workout text exceeds maximum length of {limit:,} characters.",
        "Reduce the workout description or split into multiple workouts.",
    ),
    ErrorCode.INPUT_TOO_SHORT: (
        "Workout text is too short to contain valid workout data.",
        "Include at least one movement with reps, distance, or duration.",
    ),
    ErrorCode.BINARY_CONTENT: (
        "Input appears to contain binary or encoded content.",
        "Paste plain text workout description only.",
    ),
    ErrorCode.NO_NUMBERS: (
        "Workout text contains no numbers.",
        "Add reps, loads, distances or a time domain.",
    ),
    ErrorCode.NO_WORKOUT_STRUCTURE: (
        "Could not detect a valid workout structure.",
        "Include workout type (e.g., 'AMRAP 20 min', 'For Time', '5 Rounds').",
    ),
    ErrorCode.NO_MOVEMENTS_DETECTED: (
        "No movements could be parsed from the workout text.",
        "List movements with quantities (e.g., '21 Thrusters', '400m Run').",
    ),
    ErrorCode.MISSING_DURATION: (
        "Timed workout (AMRAP/EMOM) requires a duration.",
        "Add duration (e.g., '20 min AMRAP', 'EMOM x 10 minutes').",
    ),
    ErrorCode.MISSING_TIME_CAP: (
        "No time cap found for this {workout_type} workout.",
        "Add a time cap (e.g., 'Time cap: 15 min').",
    ),
    ErrorCode.MISSING_ROUND_COUNT: (
        "Rounds-based workout requires a round count.",
        "Specify rounds (e.g., '5 Rounds for Time').",
    ),
    ErrorCode.MISSING_INTERVAL: (
        "Interval workout has no interval length.",
        "Specify work and rest (e.g., '8 x 20s on / 10s off').",
    ),
    ErrorCode.UNKNOWN_MOVEMENT: (
        "Movement '{name}' not recognized.",
        "Check spelling or try a common abbreviation.",
    ),
    ErrorCode.AMBIGUOUS_MOVEMENT: (
        "'{name}' could match multiple movements: {candidates}.",
        "Use the full movement name or common abbreviation.",
    ),
    ErrorCode.UNRECOGNIZED_MOVEMENT_FORMAT: (
        "Could not parse movement: '{text}'.",
        "Use format: quantity + movement (e.g., '21 Thrusters').",
    ),
    ErrorCode.CANCELLED: (
        "Parsing was cancelled before all lines were processed.",
        "Try again.",
    ),
}


def make_issue(
    code: ErrorCode,
    severity: IssueSeverity = IssueSeverity.ERROR,
    line_number: int = 0,
    original_text: Optional[str] = None,
    similar_names: Optional[List[str]] = None,
    **params,
) -> ParsingIssue:
    """Build an issue from the catalogue, formatting the template with params."""
    template, suggestion = _MESSAGES[code]
    try:
        message = template.format(**params)
    except (KeyError, IndexError, ValueError):
        message = template
    if similar_names:
        suggestion = f"Did you mean: {', '.join(similar_names)}?"
    return ParsingIssue(
        error_type=code.value,
        message=message,
        line_number=line_number,
        severity=severity,
        suggestion=suggestion,
        original_text=original_text,
        similar_names=list(similar_names or []),
    )


def find_similar_names(
    name: str,
    candidates: Iterable[str],
    limit: int = SIMILAR_NAME_SUGGESTIONS,
    cutoff: float = 0.6,
) -> List[str]:
    """Closest candidate names by sequence similarity, case-insensitive."""
    lookup: Dict[str, str] = {}
    for candidate in candidates:
        if candidate:
            lookup.setdefault(candidate.lower(), candidate)
    matches = difflib.get_close_matches(name.lower(), list(lookup), n=limit, cutoff=cutoff)
    return [lookup[m] for m in matches]


class IssueCollector:
    """Collects issues, dropping duplicates and capping the number of errors."""

    def __init__(self, max_errors: int = MAX_ERROR_COUNT):
        self.max_errors = max_errors
        self.errors: List[ParsingIssue] = []
        self.warnings: List[ParsingIssue] = []
        self.info: List[ParsingIssue] = []
        self._seen: set = set()

    @staticmethod
    def _key(issue: ParsingIssue) -> str:
        if issue.line_number:
            # one source line can hold several comma-separated movements
            return f"{issue.error_type}:{issue.line_number}:{issue.original_text or ''}"
        return f"{issue.error_type}:{(issue.original_text or '')[:50]}"

    @property
    def error_limit_reached(self) -> bool:
        return len(self.errors) >= self.max_errors

    def add(self, issue: Optional[ParsingIssue]) -> bool:
        if issue is None:
            return False
        key = self._key(issue)
        if key in self._seen:
            return False
        self._seen.add(key)

        severity = IssueSeverity(issue.severity)
        if severity == IssueSeverity.ERROR:
            if self.error_limit_reached:
                logger.debug(f"Error limit reached, dropping {issue.error_type}")
                return False
            self.errors.append(issue)
        elif severity == IssueSeverity.WARNING:
            self.warnings.append(issue)
        else:
            self.info.append(issue)
        return True

    def extend(self, issues: Iterable[Optional[ParsingIssue]]) -> None:
        for issue in issues:
            self.add(issue)

    def sorted_issues(self) -> List[ParsingIssue]:
        return [*self.errors, *self.warnings, *self.info]
