"""
Movement line parsing

`parse_line` pulls quantities out of a single line and isolates the movement
name; `MovementLineParser` resolves that name and turns the line into a
ParsedMovementEntry. Neither raises for bad input.
"""

import logging
import re
from typing import List, Optional

from wod_parser_api.utils import collapse_whitespace, to_float
from .issues import ErrorCode, make_issue
from .models import (
    IssueSeverity,
    MovementLineResult,
    MovementSourceLine,
    ParsedMovementEntry,
    ParsedMovementLine,
    ParsingIssue,
)
from .movement_resolver import MovementMatch, MovementResolver
from .patterns import (
    RE_EMPTY_PARENS,
    match_calorie_pair,
    match_calories,
    match_distance,
    match_height_marker,
    match_movement_with_duration,
    match_movement_with_reps,
    match_percentage,
    match_set_prefix,
    match_weight,
    match_weight_pair,
)
from .quantities import Duration

logger = logging.getLogger(__name__)

RE_PARENTHETICAL = re.compile(r"\(([^)]*)\)")
RE_EDGE_PUNCTUATION = re.compile(r"^[\s,;:@+&/-]+|[\s,;:@+&/-]+$")

# Per-line confidence by how the movement name was resolved
EXACT_LINE_CONFIDENCE = 100
PREFIX_LINE_CONFIDENCE = 80
PARTIAL_LINE_CONFIDENCE = 60
AMBIGUOUS_LINE_CONFIDENCE = 70
UNRESOLVED_LINE_CONFIDENCE = 30


def _strip_fragment(text: str, fragment: Optional[str]) -> str:
    if not text or not fragment:
        return text
    return re.sub(re.escape(fragment.strip()), " ", text, count=1, flags=re.I)


def _clean(text: str) -> str:
    text = RE_EMPTY_PARENS.sub(" ", text)
    text = collapse_whitespace(text)
    return RE_EDGE_PUNCTUATION.sub("", text)


def parse_line(line: str) -> ParsedMovementLine:
    """
    Extract reps, loads, distance, calories, duration and markers from a line.

    A leading set count ('3 x 10 Back Squats') is taken off first. The reps
    shape ('21 Thrusters (95/65 lb)') is tried next and the duration
    shape (':30 Plank') only when it does not match. Loads, distance and
    calories are extracted independently; pairs win over single values.
    """
    text = line.strip()
    if not text:
        return ParsedMovementLine(original_text=line)

    set_count: Optional[int] = None
    prefix = match_set_prefix(text)
    if prefix is not None:
        set_count, text = prefix.sets, prefix.remainder

    reps: Optional[int] = None
    duration: Optional[Duration] = None
    candidate = text
    modifier: Optional[str] = None

    reps_shape = match_movement_with_reps(text)
    if reps_shape is not None:
        reps = reps_shape.reps
        candidate = reps_shape.movement
        modifier = reps_shape.modifier
    else:
        duration_shape = match_movement_with_duration(text)
        if duration_shape is not None:
            duration = Duration(duration_shape.seconds, text[: len(text) - len(duration_shape.movement)].strip())
            candidate = duration_shape.movement

    weight_pair = match_weight_pair(text)
    weight = None if weight_pair else match_weight(text)
    calorie_pair = match_calorie_pair(text)
    calories = None if calorie_pair else match_calories(text)
    distance = match_distance(text)
    height = match_height_marker(text)

    percentage = match_percentage(text)
    if percentage is not None and "%" not in percentage.original_text:
        # A bare 'bodyweight' only counts as a load inside a modifier
        percentage = match_percentage(modifier) if modifier else None

    fragments = [
        weight_pair.original_text if weight_pair else None,
        weight.original_text if weight else None,
        calorie_pair.original_text if calorie_pair else None,
        calories.original_text if calories else None,
        distance.original_text if distance else None,
        percentage.original_text if percentage else None,
        height.original_text if height else None,
    ]
    for fragment in fragments:
        candidate = _strip_fragment(candidate, fragment)
        modifier = _strip_fragment(modifier, fragment) if modifier else modifier

    notes: List[str] = []
    if modifier and _clean(modifier):
        notes.append(_clean(modifier))
    for inner in RE_PARENTHETICAL.findall(candidate):
        if _clean(inner):
            notes.append(_clean(inner))
    candidate = RE_PARENTHETICAL.sub(" ", candidate)

    return ParsedMovementLine(
        original_text=line,
        movement_text=_clean(candidate),
        reps=reps,
        set_count=set_count,
        weight=weight,
        weight_pair=weight_pair,
        distance=distance,
        calories=calories,
        calorie_pair=calorie_pair,
        percentage=percentage,
        duration=duration,
        height=height,
        modifiers="; ".join(notes) or None,
    )


def line_confidence(match: Optional[MovementMatch]) -> int:
    if match is None:
        return UNRESOLVED_LINE_CONFIDENCE
    if match.is_exact:
        confidence = EXACT_LINE_CONFIDENCE
    elif match.score >= 60:
        confidence = PREFIX_LINE_CONFIDENCE
    else:
        confidence = PARTIAL_LINE_CONFIDENCE
    if match.is_ambiguous:
        confidence = min(confidence, AMBIGUOUS_LINE_CONFIDENCE)
    return confidence


def build_entry(
    parsed: ParsedMovementLine,
    match: Optional[MovementMatch],
    sequence_order: int,
    line_number: int = 0,
) -> ParsedMovementEntry:
    """Flatten a parsed line and its resolved movement into an entry."""
    load_value = load_value_female = load_unit = None
    if parsed.weight_pair is not None:
        load_value = to_float(parsed.weight_pair.male.value)
        load_value_female = to_float(parsed.weight_pair.female.value)
        load_unit = parsed.weight_pair.male.unit.value
    elif parsed.weight is not None:
        load_value = to_float(parsed.weight.value)
        load_unit = parsed.weight.unit.value

    calories = calories_female = None
    if parsed.calorie_pair is not None:
        calories, calories_female = parsed.calorie_pair.male, parsed.calorie_pair.female
    elif parsed.calories is not None:
        calories = parsed.calories.value

    height_value = height_unit = hold_seconds = None
    if parsed.height is not None:
        if parsed.height.kind == "hold":
            hold_seconds = parsed.height.value
        else:
            height_value, height_unit = parsed.height.value, parsed.height.unit

    descriptor = match.descriptor if match else None
    return ParsedMovementEntry(
        sequence_order=sequence_order,
        line_number=line_number,
        original_text=parsed.original_text.strip(),
        movement_text=parsed.movement_text,
        movement_definition_id=descriptor.id if descriptor else None,
        canonical_name=descriptor.canonical_name if descriptor else None,
        movement_name=descriptor.display_name if descriptor else None,
        category=descriptor.category if descriptor else None,
        match_score=match.score if match else 0,
        rep_count=parsed.reps,
        set_count=parsed.set_count,
        load_value=load_value,
        load_value_female=load_value_female,
        load_unit=load_unit,
        load_percentage=to_float(parsed.percentage.percentage) if parsed.percentage else None,
        load_percentage_reference=parsed.percentage.reference if parsed.percentage else None,
        distance_value=to_float(parsed.distance.value) if parsed.distance else None,
        distance_unit=parsed.distance.unit.value if parsed.distance else None,
        calories=calories,
        calories_female=calories_female,
        duration_seconds=parsed.duration.seconds if parsed.duration else None,
        height_value=height_value,
        height_unit=height_unit,
        hold_seconds=hold_seconds,
        notes=parsed.modifiers,
    )


class MovementLineParser:
    """Turns movement lines into entries using one resolver snapshot."""

    def __init__(self, resolver: MovementResolver):
        self.resolver = resolver

    def parse(self, source: MovementSourceLine, sequence_order: int) -> MovementLineResult:
        parsed = parse_line(source.text)
        if parsed.is_blank:
            return MovementLineResult(success=False, line_number=source.line_number, original_text=source.text)

        match = self.resolver.resolve(parsed.movement_text) if parsed.movement_text else None
        issues: List[ParsingIssue] = []

        if match is None and not parsed.has_quantity:
            logger.debug(f"Line {source.line_number} unrecognized: '{source.text}'")
            issues.append(make_issue(
                ErrorCode.UNRECOGNIZED_MOVEMENT_FORMAT,
                IssueSeverity.ERROR,
                line_number=source.line_number,
                original_text=source.text,
                similar_names=self.resolver.suggest(parsed.movement_text) if parsed.movement_text else None,
                text=source.text,
            ))
            return MovementLineResult(
                success=False,
                line_number=source.line_number,
                original_text=source.text,
                confidence=0,
                issues=issues,
            )

        if match is None:
            name = parsed.movement_text or source.text
            issues.append(make_issue(
                ErrorCode.UNKNOWN_MOVEMENT,
                IssueSeverity.WARNING,
                line_number=source.line_number,
                original_text=source.text,
                similar_names=self.resolver.suggest(name) if parsed.movement_text else None,
                name=name,
            ))
        elif match.is_ambiguous:
            candidates = [match.descriptor.display_name] + [d.display_name for d in match.alternatives]
            issues.append(make_issue(
                ErrorCode.AMBIGUOUS_MOVEMENT,
                IssueSeverity.WARNING,
                line_number=source.line_number,
                original_text=source.text,
                name=parsed.movement_text,
                candidates=", ".join(candidates[:4]),
            ))

        entry = build_entry(parsed, match, sequence_order, source.line_number)
        return MovementLineResult(
            success=True,
            line_number=source.line_number,
            original_text=source.text,
            entry=entry,
            confidence=line_confidence(match),
            issues=issues,
        )
