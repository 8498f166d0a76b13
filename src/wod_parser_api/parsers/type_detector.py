"""
Workout type detection

Classifies a preprocessed document and extracts its global parameters. Rules
run in a fixed priority order and the first one that matches any line wins,
so a line with both an EMOM marker and a bare duration stays an EMOM.
"""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from .issues import ErrorCode, make_issue
from .models import IssueSeverity, PreprocessedDocument, WorkoutType, WorkoutTypeMatch
from .patterns import (
    match_amrap,
    match_chipper,
    match_emom,
    match_for_time,
    match_interval,
    match_leading_rep_scheme,
    match_round_count,
    match_tabata,
    match_time_cap,
    match_work_rest,
)
from .quantities import IntervalConfig, RepScheme, TimeCap

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tabata protocol: 8 rounds of 20s work / 10s rest
TABATA_ROUNDS = 8
TABATA_INTERVAL_SECONDS = 30
TABATA_TIME_CAP_SECONDS = 240

DEFAULT_EMOM_INTERVAL_SECONDS = 60

ROUNDS_CONFIDENCE = 0.9
CHIPPER_CONFIDENCE = 0.8
DEFAULT_CONFIDENCE = 0.5
# AMRAP without a time domain is still an AMRAP, but a weaker one
AMRAP_WITHOUT_DURATION_CONFIDENCE = 0.7
WORK_REST_WITHOUT_ROUNDS_CONFIDENCE = 0.8


def _first(lines: Sequence[str], matcher: Callable[[str], Optional[T]]) -> Optional[T]:
    for line in lines:
        match = matcher(line)
        if match is not None:
            return match
    return None


def _cap_seconds(time_cap: Optional[TimeCap]) -> Optional[int]:
    return time_cap.seconds if time_cap else None


def _detect_tabata(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    marker = _first(lines, match_tabata)
    if marker is None:
        return None
    return WorkoutTypeMatch(
        workout_type=WorkoutType.INTERVALS,
        confidence=1.0,
        matched_pattern=marker.original_text,
        time_cap_seconds=TABATA_TIME_CAP_SECONDS,
        round_count=TABATA_ROUNDS,
        interval_seconds=TABATA_INTERVAL_SECONDS,
    )


def _detect_amrap(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    marker = _first(lines, match_amrap)
    if marker is None:
        return None
    if marker.minutes:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.AMRAP,
            confidence=1.0,
            matched_pattern=marker.original_text,
            time_cap_seconds=marker.minutes * 60,
        )
    if time_cap is not None:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.AMRAP,
            confidence=1.0,
            matched_pattern=marker.original_text,
            time_cap_seconds=time_cap.seconds,
        )
    return WorkoutTypeMatch(
        workout_type=WorkoutType.AMRAP,
        confidence=AMRAP_WITHOUT_DURATION_CONFIDENCE,
        matched_pattern=marker.original_text,
        warning=make_issue(
            ErrorCode.MISSING_DURATION,
            IssueSeverity.WARNING,
            original_text=marker.original_text,
        ),
    )


def _detect_emom(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    marker = _first(lines, match_emom)
    if marker is None:
        return None
    total = marker.total_seconds or _cap_seconds(time_cap)
    rounds = None
    if total and total % marker.interval_seconds == 0:
        rounds = total // marker.interval_seconds
    warning = None
    if not total:
        warning = make_issue(
            ErrorCode.MISSING_DURATION,
            IssueSeverity.WARNING,
            original_text=marker.original_text,
        )
    return WorkoutTypeMatch(
        workout_type=WorkoutType.EMOM,
        confidence=1.0,
        matched_pattern=marker.original_text,
        time_cap_seconds=total,
        round_count=rounds,
        interval_seconds=marker.interval_seconds,
        warning=warning,
    )


def _detect_interval(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    config = _first(lines, match_interval)
    if config is None:
        return _detect_split_interval(lines, time_cap)
    return WorkoutTypeMatch(
        workout_type=WorkoutType.INTERVALS,
        confidence=1.0,
        matched_pattern=config.original_text,
        time_cap_seconds=config.total_seconds,
        round_count=config.rounds,
        interval_seconds=config.interval_seconds,
    )


def _detect_split_interval(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    """
    Round count and work/rest written on separate lines:

        8 rounds
        20 sec on / 10 sec off
    """
    work_rest = _first(lines, match_work_rest)
    if work_rest is None:
        return None
    count = _first(lines, match_round_count)
    if count is None:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.INTERVALS,
            confidence=WORK_REST_WITHOUT_ROUNDS_CONFIDENCE,
            matched_pattern=work_rest.original_text,
            time_cap_seconds=_cap_seconds(time_cap),
            interval_seconds=work_rest.work_seconds + work_rest.rest_seconds,
        )
    config = IntervalConfig(
        count.rounds,
        work_rest.work_seconds,
        work_rest.rest_seconds,
        f"{count.original_text} {work_rest.original_text}",
    )
    return WorkoutTypeMatch(
        workout_type=WorkoutType.INTERVALS,
        confidence=1.0,
        matched_pattern=config.original_text,
        time_cap_seconds=config.total_seconds,
        round_count=config.rounds,
        interval_seconds=config.interval_seconds,
    )


def _detect_for_time(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    marker = _first(lines, match_for_time)
    if marker is None:
        return None
    return WorkoutTypeMatch(
        workout_type=WorkoutType.FOR_TIME,
        confidence=1.0,
        matched_pattern=marker.original_text,
        time_cap_seconds=_cap_seconds(time_cap),
        round_count=marker.rounds,
    )


def _detect_rounds(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    count = _first(lines, match_round_count)
    if count is None:
        return None
    return WorkoutTypeMatch(
        workout_type=WorkoutType.ROUNDS,
        confidence=ROUNDS_CONFIDENCE,
        matched_pattern=count.original_text,
        time_cap_seconds=_cap_seconds(time_cap),
        round_count=count.rounds,
    )


def _chipper_scheme(line: str) -> Optional[RepScheme]:
    scheme = match_chipper(line)
    if scheme is not None:
        return scheme
    leading = match_leading_rep_scheme(line)
    if leading is not None and "-" in leading.scheme.original_text:
        return leading.scheme
    return None


def _detect_chipper(lines, time_cap) -> Optional[WorkoutTypeMatch]:
    scheme = _first(lines, _chipper_scheme)
    if scheme is None:
        return None
    return WorkoutTypeMatch(
        workout_type=WorkoutType.FOR_TIME,
        confidence=CHIPPER_CONFIDENCE,
        matched_pattern=scheme.original_text,
        time_cap_seconds=_cap_seconds(time_cap),
        rep_scheme=scheme,
    )


# Priority order matters: first rule that matches wins
DETECTION_RULES = (
    _detect_tabata,
    _detect_amrap,
    _detect_emom,
    _detect_interval,
    _detect_for_time,
    _detect_rounds,
    _detect_chipper,
)


def detect(document: PreprocessedDocument) -> WorkoutTypeMatch:
    """
    Classify a document. Never fails: with no signal the result is a
    low-confidence For Time.
    """
    if document.is_empty:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.FOR_TIME,
            confidence=0.0,
            error=make_issue(ErrorCode.EMPTY_INPUT),
        )

    lines = document.lines
    time_cap = _first(lines, match_time_cap)

    for rule in DETECTION_RULES:
        match = rule(lines, time_cap)
        if match is not None:
            logger.debug(
                f"Detected {match.workout_type.value} from '{match.matched_pattern}' "
                f"(confidence {match.confidence})"
            )
            return match

    logger.debug("No workout type marker found, defaulting to for_time")
    return WorkoutTypeMatch(
        workout_type=WorkoutType.FOR_TIME,
        confidence=DEFAULT_CONFIDENCE,
        time_cap_seconds=_cap_seconds(time_cap),
    )
