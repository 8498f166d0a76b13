"""
Workout parsing service

Runs the full pipeline:
    input check -> preprocess -> detect type -> parse movement lines
    -> propagate rep schemes -> validate

A resolver is built from the vocabulary snapshot on every call, so one
service instance can serve concurrent parses.
"""

import logging
import threading
from typing import List, Optional, Tuple

from wod_parser_api.config import settings
from wod_parser_api.parsers.input_validator import check_input
from wod_parser_api.parsers.issues import ErrorCode, make_issue
from wod_parser_api.parsers.models import (
    IssueSeverity,
    MovementLineResult,
    MovementSourceLine,
    ParsedMovementEntry,
    ParsedWorkout,
    ParsedWorkoutResult,
    ParsingIssue,
)
from wod_parser_api.parsers.movement_line_parser import MovementLineParser
from wod_parser_api.parsers.movement_resolver import MovementResolver
from wod_parser_api.parsers.preprocessor import MAX_LINE_LENGTH, preprocess
from wod_parser_api.parsers.rep_scheme import propagate_rep_schemes
from wod_parser_api.parsers.type_detector import detect
from wod_parser_api.parsers.validator import describe, empty_result, quick_validate, validate
from wod_parser_api.vocabulary import MovementVocabulary

logger = logging.getLogger(__name__)


class WorkoutParsingService:
    """Parses free-text workouts against a movement vocabulary."""

    def __init__(self, vocabulary: MovementVocabulary, max_input_length: Optional[int] = None):
        if vocabulary is None:
            raise ValueError("WorkoutParsingService requires a movement vocabulary")
        self.vocabulary = vocabulary
        self.max_input_length = max_input_length or settings.MAX_INPUT_LENGTH

    def _run(
        self,
        text: Optional[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> ParsedWorkoutResult:
        original = text or ""
        check = check_input(original, max_length=self.max_input_length)
        if check.is_empty:
            logger.debug("Empty workout text")
            return empty_result(original)

        document = preprocess(check.sanitized_text)
        type_match = detect(document)
        if document.is_empty:
            return empty_result(original, type_match.error)

        line_parser = MovementLineParser(MovementResolver(self.vocabulary))
        line_results: List[MovementLineResult] = []
        indexed_entries: List[Tuple[int, ParsedMovementEntry]] = []
        cancelled: Optional[ParsingIssue] = None

        for index, source in enumerate(document.movement_lines):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Parse cancelled after {index} of {len(document.movement_lines)} lines")
                cancelled = make_issue(ErrorCode.CANCELLED, IssueSeverity.WARNING)
                break
            result = line_parser.parse(source, sequence_order=len(indexed_entries) + 1)
            line_results.append(result)
            if result.entry is not None:
                indexed_entries.append((index, result.entry))

        scheme = document.workout_rep_scheme
        if scheme is None and not document.movement_rep_schemes:
            # e.g. a chipper line written after the movement list
            scheme = type_match.rep_scheme
        movements = propagate_rep_schemes(indexed_entries, scheme, document.movement_rep_schemes)

        workout = ParsedWorkout(
            original_text=original,
            title=document.title,
            parsed_description=describe(
                type_match.workout_type,
                type_match.time_cap_seconds,
                type_match.round_count,
                len(movements),
            ),
            workout_type=type_match.workout_type,
            time_cap_seconds=type_match.time_cap_seconds,
            round_count=type_match.round_count,
            interval_duration_seconds=type_match.interval_seconds,
            movements=movements,
            rep_scheme_reps=list(scheme.reps) if scheme else None,
            rep_scheme_type=scheme.scheme_type.value if scheme else None,
        )

        input_issues = list(check.issues)
        if cancelled is not None:
            input_issues.append(cancelled)
        return validate(workout, type_match, line_results, input_issues)

    def parse(self, text: Optional[str], cancel_event: Optional[threading.Event] = None) -> ParsedWorkoutResult:
        """
        Parse workout text into a scored, structured result.

        Never raises for bad input; empty text yields a single EmptyInput error.
        Setting cancel_event stops the parse between movement lines.
        """
        result = self._run(text, cancel_event)
        logger.info(
            f"Parsed workout: {result.description or 'empty'} "
            f"(confidence {result.confidence_score}, {len(result.errors)} issue(s))"
        )
        return result

    def validate(self, text: Optional[str]) -> List[ParsingIssue]:
        """Errors and warnings for the text; empty input short-circuits."""
        issues = quick_validate(text)
        if any(i.error_type == ErrorCode.EMPTY_INPUT.value for i in issues):
            return issues
        return self.parse(text).errors

    def parse_to_legacy_shape(self, text: Optional[str]) -> ParsedWorkout:
        """Structured workout without confidence metadata."""
        result = self._run(text)
        return result.parsed_workout

    def parse_line(self, line: str) -> MovementLineResult:
        """Parse a single movement line on its own."""
        parser = MovementLineParser(MovementResolver(self.vocabulary))
        return parser.parse(MovementSourceLine(line.strip()[:MAX_LINE_LENGTH], 1), sequence_order=1)
