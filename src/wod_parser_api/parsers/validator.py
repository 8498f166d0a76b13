"""
Validation and confidence scoring

Combines the type detector's confidence with the share of movement lines
that resolved to a known movement, and assembles the final result.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .input_validator import check_input
from .issues import ErrorCode, IssueCollector, make_issue
from .models import (
    ConfidenceBreakdown,
    ConfidenceLevel,
    IssueSeverity,
    MovementLineResult,
    ParsedWorkout,
    ParsedWorkoutResult,
    ParsingIssue,
    WorkoutType,
    WorkoutTypeMatch,
)

logger = logging.getLogger(__name__)

TYPE_CONFIDENCE_WEIGHT = 0.3
IDENTIFICATION_WEIGHT = 0.7

# Lower bounds, checked top-down; anything below the last is Low
LEVEL_THRESHOLDS = (
    (90, ConfidenceLevel.PERFECT),
    (70, ConfidenceLevel.HIGH),
    (40, ConfidenceLevel.MEDIUM),
)

TYPE_LABELS = {
    WorkoutType.FOR_TIME: "For Time",
    WorkoutType.AMRAP: "AMRAP",
    WorkoutType.EMOM: "EMOM",
    WorkoutType.INTERVALS: "Intervals",
    WorkoutType.ROUNDS: "Rounds",
    WorkoutType.TABATA: "Tabata",
}


def confidence_level(score: int) -> ConfidenceLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return ConfidenceLevel.LOW


def confidence_score(type_confidence: float, identified: int, total_lines: int) -> int:
    """round(100 * (0.3 * type confidence + 0.7 * identification rate)), clamped to 0-100."""
    rate = identified / total_lines if total_lines else 0.0
    score = round(100 * (TYPE_CONFIDENCE_WEIGHT * type_confidence + IDENTIFICATION_WEIGHT * rate))
    return max(0, min(100, score))


def _format_seconds(seconds: int) -> str:
    minutes, rest = divmod(seconds, 60)
    if not rest:
        return f"{minutes} min"
    if not minutes:
        return f"{rest} sec"
    return f"{minutes} min {rest} sec"


def describe(
    workout_type: WorkoutType,
    time_cap_seconds: Optional[int],
    round_count: Optional[int],
    movement_count: int,
) -> str:
    """Short summary such as 'AMRAP - 20 min - 2 movement(s)'."""
    parts = [TYPE_LABELS[WorkoutType(workout_type)]]
    if time_cap_seconds:
        parts.append(_format_seconds(time_cap_seconds))
    if round_count:
        parts.append(f"{round_count} rounds")
    parts.append(f"{movement_count} movement(s)")
    return " - ".join(parts)


def structure_warnings(workout: ParsedWorkout) -> List[ParsingIssue]:
    """Advisory issues about missing time domain or round parameters."""
    issues: List[ParsingIssue] = []
    workout_type = WorkoutType(workout.workout_type)

    if workout_type == WorkoutType.FOR_TIME and not workout.time_cap_seconds:
        issues.append(make_issue(ErrorCode.MISSING_TIME_CAP, IssueSeverity.INFO, workout_type="For Time"))
    elif workout_type == WorkoutType.ROUNDS and not workout.round_count:
        issues.append(make_issue(ErrorCode.MISSING_ROUND_COUNT, IssueSeverity.WARNING))
    elif workout_type == WorkoutType.INTERVALS and not workout.interval_duration_seconds:
        issues.append(make_issue(ErrorCode.MISSING_INTERVAL, IssueSeverity.WARNING))

    if not workout.movements:
        issues.append(make_issue(ErrorCode.NO_MOVEMENTS_DETECTED, IssueSeverity.WARNING))
    return issues


def empty_result(original_text: str, issue: Optional[ParsingIssue] = None) -> ParsedWorkoutResult:
    error = issue or make_issue(ErrorCode.EMPTY_INPUT)
    return ParsedWorkoutResult(
        success=False,
        original_text=original_text,
        errors=[error],
        confidence_score=0,
        confidence_level=ConfidenceLevel.LOW,
        description="",
        is_usable=False,
        confidence_details=ConfidenceBreakdown(error_count=1),
        parsed_workout=ParsedWorkout(original_text=original_text, errors=[error]),
    )


def validate(
    parsed_workout: ParsedWorkout,
    type_match: WorkoutTypeMatch,
    line_results: Sequence[MovementLineResult],
    input_issues: Iterable[ParsingIssue] = (),
) -> ParsedWorkoutResult:
    """
    Score a parsed workout and assemble the final result.

    Args:
        parsed_workout: Structured workout built from the pipeline
        type_match: Detector output the workout was built from
        line_results: One result per movement line, in order
        input_issues: Issues raised before the pipeline ran

    Returns:
        ParsedWorkoutResult; usable whenever the input was non-empty
    """
    if type_match.error is not None and type_match.error.error_type == ErrorCode.EMPTY_INPUT.value:
        return empty_result(parsed_workout.original_text, type_match.error)

    collector = IssueCollector()
    collector.extend(input_issues)
    collector.add(type_match.error)
    collector.add(type_match.warning)
    for line_result in line_results:
        collector.extend(line_result.issues)
    collector.extend(structure_warnings(parsed_workout))

    counted = [r for r in line_results if r.original_text.strip()]
    identified = sum(1 for r in counted if r.is_identified)
    constructed = sum(1 for r in counted if r.success)
    score = confidence_score(type_match.confidence, identified, len(counted))
    level = confidence_level(score)

    logger.debug(
        f"Confidence {score} ({level.value}): type {type_match.confidence}, "
        f"{identified}/{len(counted)} lines identified"
    )

    issues = collector.sorted_issues()
    workout = parsed_workout.model_copy(update={"errors": issues})
    return ParsedWorkoutResult(
        success=bool(parsed_workout.movements),
        original_text=parsed_workout.original_text,
        title=parsed_workout.title,
        workout_type=parsed_workout.workout_type,
        time_cap_seconds=parsed_workout.time_cap_seconds,
        round_count=parsed_workout.round_count,
        interval_seconds=parsed_workout.interval_duration_seconds,
        movements=list(parsed_workout.movements),
        errors=issues,
        warnings=list(collector.warnings),
        confidence_score=score,
        confidence_level=level,
        description=parsed_workout.parsed_description,
        is_usable=True,
        confidence_details=ConfidenceBreakdown(
            type_confidence=type_match.confidence,
            identification_rate=round(identified / len(counted), 4) if counted else 0.0,
            movement_lines=len(counted),
            identified_movements=identified,
            unidentified_movements=constructed - identified,
            unparsed_lines=len(counted) - constructed,
            error_count=len(collector.errors),
            warning_count=len(collector.warnings),
            error_limit_reached=collector.error_limit_reached,
        ),
        parsed_workout=workout,
    )


def quick_validate(text: Optional[str]) -> List[ParsingIssue]:
    """
    Input-level checks without running the pipeline.

    Empty input short-circuits with a single EmptyInput error.
    """
    check = check_input(text or "")
    if check.is_empty:
        return [make_issue(ErrorCode.EMPTY_INPUT)]
    collector = IssueCollector()
    collector.extend(check.issues)
    return collector.sorted_issues()
