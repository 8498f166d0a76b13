"""
Workout text preprocessor

Normalizes raw text, pulls out an optional title and a workout-level rep
scheme, and sorts the remaining lines into structural headers and movement
lines. Output is deterministic for a given input.
"""

import logging
import re
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

from .models import MovementSourceLine, PreprocessedDocument
from .patterns import (
    RE_REST_LINE,
    is_header_line,
    match_leading_rep_scheme,
    match_movement_with_duration,
    match_movement_with_reps,
    match_rep_scheme,
)
from .quantities import RepScheme

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 40

# Longer lines are cut before any pattern runs on them
MAX_LINE_LENGTH = 1000

# Benchmark workouts commonly used as a heading
NAMED_WORKOUTS = frozenset({
    "amanda", "angie", "annie", "barbara", "chelsea", "cindy", "diane",
    "dt", "elizabeth", "eva", "fight gone bad", "filthy fifty", "fran",
    "grace", "helen", "isabel", "jackie", "karen", "kelly", "linda",
    "lynne", "mary", "murph", "nancy", "nicole", "roy",
})

_CHAR_MAP = str.maketrans({
    "‘": "'", "’": "'", "′": "'",
    "“": '"', "”": '"', "″": '"',
    "–": "-", "—": "-", "−": "-",
    "×": "x", "•": "-", " ": " ",
})

RE_BULLET = re.compile(r"^(?:[-*]+|\d+[.)])\s+(?=\S)")
RE_TITLE = re.compile(r"^[\"']?[a-z][a-z0-9\s\-'&.!#]*[\"']?:?$", re.I)
RE_COMMA_OUTSIDE_PARENS = re.compile(r",(?![^()]*\))")
RE_STARTS_WITH_QUANTITY = re.compile(r"^(?:\d|:\d)")
# "AMRAP 20 min: 5 Pull-ups, 10 Push-ups" splits at the first colon followed by a space
RE_INLINE_HEADER = re.compile(r"^(?P<header>[^:]+?)\s*:\s+(?P<rest>\S.*)$")


def normalize_line(line: str) -> str:
    """Fold typographic characters, collapse whitespace and drop list bullets."""
    text = " ".join(line.translate(_CHAR_MAP).split())
    return RE_BULLET.sub("", text)


def split_lines(text: str) -> List[Tuple[int, str]]:
    """Non-blank normalized lines paired with their 1-based source line number."""
    raw_lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    numbered = []
    for number, raw in enumerate(raw_lines, start=1):
        line = normalize_line(raw)
        if len(line) > MAX_LINE_LENGTH:
            logger.debug(f"Line {number} cut to {MAX_LINE_LENGTH} characters")
            line = line[:MAX_LINE_LENGTH].rstrip()
        if line:
            numbered.append((number, line))
    return numbered


def is_named_workout(line: str) -> bool:
    return line.strip("\"': ").lower() in NAMED_WORKOUTS


def is_title_line(line: str) -> bool:
    """Short, letter-led line that carries no structure and no movement."""
    if is_named_workout(line):
        return True
    if len(line) > MAX_TITLE_LENGTH or not RE_TITLE.match(line):
        return False
    if is_header_line(line):
        return False
    return match_movement_with_reps(line) is None and match_movement_with_duration(line) is None


def split_movement_line(line: str, force: bool = False) -> List[str]:
    """
    Split '10 Pull-ups, 20 Push-ups' into separate movements.

    Commas inside parentheses never split. Without force, a line is only split
    when every piece starts with a quantity, so 'Thrusters, 95 lb' stays whole.
    """
    pieces = [p.strip() for p in RE_COMMA_OUTSIDE_PARENS.split(line)]
    pieces = [p for p in pieces if p]
    if len(pieces) <= 1:
        return [line]
    if force or all(RE_STARTS_WITH_QUANTITY.match(p) for p in pieces):
        return pieces
    return [line]


def split_inline_header(line: str) -> Optional[Tuple[str, str]]:
    """
    Split 'For Time: 100 Burpees' into its header and the movements after it.

    Returns None unless the part before the colon is structural and the part
    after it is not, so 'Time Cap: 12 min' and 'Rest: 2 min' stay whole.
    """
    m = RE_INLINE_HEADER.match(line)
    if not m:
        return None
    header, rest = m.group("header"), m.group("rest")
    if RE_REST_LINE.search(header) or not is_header_line(header) or is_header_line(rest):
        return None
    return header, rest


def _has_plain_title(numbered: List[Tuple[int, str]]) -> bool:
    # a run of bare names is a movement list, not a title followed by movements
    if len(numbered) < 2 or not is_title_line(numbered[0][1]):
        return False
    return not is_title_line(numbered[1][1])


def preprocess(text: Optional[str]) -> PreprocessedDocument:
    """
    Turn raw workout text into a PreprocessedDocument.

    Args:
        text: Raw workout text

    Returns:
        Document with is_empty set when the text has no content
    """
    original = text or ""
    numbered = split_lines(original)
    if not numbered:
        return PreprocessedDocument(original_text=original)

    all_lines = tuple(line for _, line in numbered)
    title = None
    if is_named_workout(numbered[0][1]) or _has_plain_title(numbered):
        title = numbered[0][1].strip("\"': ")
        numbered = numbered[1:]

    workout_scheme: Optional[RepScheme] = None
    headers: List[str] = []
    movements: List[MovementSourceLine] = []
    movement_schemes: Dict[int, RepScheme] = {}

    for line_number, line in numbered:
        header: Optional[str] = None
        content: Optional[str] = line
        force_split = False
        inline = split_inline_header(line)
        if inline is not None:
            header, content = inline
            force_split = True
        elif is_header_line(line):
            header, content = line, None

        if header is not None:
            if workout_scheme is None and not movements:
                workout_scheme = match_rep_scheme(header)
                if workout_scheme is not None:
                    logger.debug(f"Workout rep scheme {workout_scheme.reps} from '{header}'")
            headers.append(header)
        if content is None:
            continue

        leading = match_leading_rep_scheme(content)
        if leading is not None:
            pieces = split_movement_line(leading.remainder, force=True)
            if workout_scheme is None and not movements:
                # opening the movement list it scopes the workout, as a line of its own would
                workout_scheme = leading.scheme
            else:
                for offset in range(len(pieces)):
                    movement_schemes[len(movements) + offset] = leading.scheme
            movements.extend(MovementSourceLine(piece, line_number) for piece in pieces)
            continue

        for piece in split_movement_line(content, force=force_split):
            movements.append(MovementSourceLine(piece, line_number))

    return PreprocessedDocument(
        original_text=original,
        normalized_text="\n".join(all_lines),
        title=title,
        lines=all_lines,
        header_lines=tuple(headers),
        movement_lines=tuple(movements),
        workout_rep_scheme=workout_scheme,
        movement_rep_schemes=MappingProxyType(movement_schemes),
    )
