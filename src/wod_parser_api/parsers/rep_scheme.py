"""
Rep scheme propagation

Fills missing rep counts from a movement-specific scheme or, failing that,
from the workout-level scheme by position. Explicit counts always stay.
"""

import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from .models import ParsedMovementEntry
from .quantities import RepScheme

logger = logging.getLogger(__name__)


def _with_scheme(entry: ParsedMovementEntry, scheme: RepScheme, rep_count: Optional[int]) -> ParsedMovementEntry:
    update = {
        "rep_scheme_reps": list(scheme.reps),
        "rep_scheme_type": scheme.scheme_type.value,
    }
    if entry.rep_count is None and rep_count is not None:
        update["rep_count"] = rep_count
    return entry.model_copy(update=update)


def propagate_rep_schemes(
    entries: Sequence[Tuple[int, ParsedMovementEntry]],
    workout_scheme: Optional[RepScheme] = None,
    movement_schemes: Optional[Mapping[int, RepScheme]] = None,
) -> List[ParsedMovementEntry]:
    """
    Apply rep schemes to movement entries.

    Args:
        entries: (movement line index, entry) pairs in sequence order
        workout_scheme: Scheme that precedes the movement list, e.g. 21-15-9
        movement_schemes: Schemes attached to single movement lines, by index

    Returns:
        New entries; the inputs are not modified
    """
    movement_schemes = movement_schemes or {}

    missing = [
        index for index, entry in entries
        if entry.rep_count is None and index not in movement_schemes
    ]
    use_workout_scheme = (
        workout_scheme is not None
        and bool(missing)
        and workout_scheme.round_count >= len(missing)
    )
    if workout_scheme is not None and missing and not use_workout_scheme:
        logger.debug(
            f"Workout scheme {workout_scheme.reps} does not cover {len(missing)} movements, skipping"
        )

    result: List[ParsedMovementEntry] = []
    position = 0
    for index, entry in entries:
        scheme = movement_schemes.get(index)
        if scheme is not None:
            result.append(_with_scheme(entry, scheme, scheme.reps[0]))
        elif entry.rep_count is None and use_workout_scheme:
            result.append(_with_scheme(entry, workout_scheme, workout_scheme.reps[position]))
            position += 1
        else:
            result.append(entry)
    return result
