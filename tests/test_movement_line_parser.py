"""Tests for single movement line parsing."""
import pytest

from wod_parser_api.parsers.models import MovementSourceLine
from wod_parser_api.parsers.movement_line_parser import (
    AMBIGUOUS_LINE_CONFIDENCE,
    EXACT_LINE_CONFIDENCE,
    PREFIX_LINE_CONFIDENCE,
    MovementLineParser,
    parse_line,
)
from wod_parser_api.parsers.movement_resolver import MovementResolver
from wod_parser_api.parsers.quantities import LoadUnit


def _parse(line_parser, text, line_number=1):
    return line_parser.parse(MovementSourceLine(text, line_number), sequence_order=1)


class TestParseLine:
    """Quantity extraction and movement name cleanup."""

    def test_reps_with_paired_load(self):
        parsed = parse_line("21 Thrusters (95/65 lb)")
        assert parsed.reps == 21
        assert parsed.weight_pair.male.unit == LoadUnit.LB
        assert int(parsed.weight_pair.male.value) == 95
        assert int(parsed.weight_pair.female.value) == 65
        assert parsed.movement_text == "Thrusters"
        assert parsed.modifiers is None

    def test_distance_line(self):
        parsed = parse_line("400m Run")
        assert parsed.reps is None
        assert int(parsed.distance.value) == 400
        assert parsed.movement_text == "Run"

    def test_calorie_pair_line(self):
        parsed = parse_line("15/12 Cal Assault Bike")
        assert (parsed.calorie_pair.male, parsed.calorie_pair.female) == (15, 12)
        assert parsed.weight_pair is None
        assert parsed.movement_text == "Assault Bike"

    def test_calories_line(self):
        parsed = parse_line("20 Cal Row")
        assert parsed.calories.value == 20
        assert parsed.reps is None
        assert parsed.movement_text == "Row"

    def test_duration_line(self):
        parsed = parse_line("30 sec Plank")
        assert parsed.duration.seconds == 30
        assert parsed.movement_text == "Plank"

    def test_percentage_load(self):
        parsed = parse_line("5 Back Squats @ 75% 1RM")
        assert parsed.reps == 5
        assert int(parsed.percentage.percentage) == 75
        assert parsed.percentage.reference == "1RM"
        assert parsed.movement_text == "Back Squats"

    def test_box_height(self):
        parsed = parse_line("10 Box Jumps (24/20 in)")
        assert parsed.height.value == 24
        assert parsed.weight_pair is None
        assert parsed.movement_text == "Box Jumps"

    def test_leftover_parenthetical_becomes_notes(self):
        parsed = parse_line("10 Pull-ups (strict)")
        assert parsed.movement_text == "Pull-ups"
        assert parsed.modifiers == "strict"

    def test_unitless_per_side_count_is_a_note(self):
        parsed = parse_line("10 Pistols (5/5)")
        assert parsed.reps == 10
        assert parsed.weight_pair is None
        assert parsed.weight is None
        assert parsed.movement_text == "Pistols"
        assert parsed.modifiers == "5/5"

    def test_sets_of_reps(self):
        parsed = parse_line("3 x 10 Back Squats")
        assert parsed.set_count == 3
        assert parsed.reps == 10
        assert parsed.movement_text == "Back Squats"

    def test_sets_of_distance(self):
        parsed = parse_line("4 x 500m Row")
        assert parsed.set_count == 4
        assert parsed.reps is None
        assert int(parsed.distance.value) == 500
        assert parsed.movement_text == "Row"

    def test_bodyweight_outside_modifier_is_not_a_load(self):
        parsed = parse_line("10 Bodyweight Squats")
        assert parsed.percentage is None
        assert parsed.movement_text == "Bodyweight Squats"

    def test_bodyweight_in_modifier_is_a_load(self):
        parsed = parse_line("10 Pull-ups (BW)")
        assert parsed.percentage.reference == "bodyweight"

    def test_blank_line(self):
        parsed = parse_line("   ")
        assert parsed.is_blank
        assert not parsed.has_quantity


class TestMovementLineParser:
    """Resolution outcomes and issues per line."""

    def test_identified_movement(self, line_parser):
        result = _parse(line_parser, "21 Thrusters (95/65 lb)", line_number=3)

        assert result.success is True
        assert result.is_identified
        assert result.confidence == EXACT_LINE_CONFIDENCE
        assert result.issues == []

        entry = result.entry
        assert entry.line_number == 3
        assert entry.canonical_name == "thruster"
        assert entry.movement_name == "Thruster"
        assert entry.category == "weightlifting"
        assert entry.rep_count == 21
        assert entry.load_value == 95.0
        assert entry.load_value_female == 65.0
        assert entry.load_unit == "lb"

    def test_entry_quantities(self, line_parser):
        entry = _parse(line_parser, "400m Run").entry
        assert entry.distance_value == 400.0
        assert entry.distance_unit == "m"

        entry = _parse(line_parser, "15/12 Cal Assault Bike").entry
        assert (entry.calories, entry.calories_female) == (15, 12)

        entry = _parse(line_parser, "30 sec Plank").entry
        assert entry.duration_seconds == 30

        entry = _parse(line_parser, "10 Box Jumps (24/20 in)").entry
        assert (entry.height_value, entry.height_unit) == (24, "in")

    def test_set_count_reaches_the_entry(self, line_parser):
        entry = _parse(line_parser, "3 x 10 Back Squats").entry
        assert (entry.canonical_name, entry.set_count, entry.rep_count) == ("back_squat", 3, 10)

        entry = _parse(line_parser, "4 x 500m Row").entry
        assert (entry.canonical_name, entry.set_count, entry.rep_count) == ("row", 4, None)
        assert entry.distance_value == 500.0

    def test_per_side_count_is_not_a_load(self, line_parser):
        entry = _parse(line_parser, "10 Pistols (5/5)").entry
        assert entry.canonical_name == "pistol"
        assert entry.load_value is None
        assert entry.load_unit is None
        assert entry.notes == "5/5"

    def test_unknown_movement_keeps_reps(self, line_parser):
        result = _parse(line_parser, "5 Flibbertigibbets", line_number=2)

        assert result.success is True
        assert not result.is_identified
        assert result.entry.rep_count == 5
        assert result.entry.movement_definition_id is None
        assert result.entry.movement_text == "Flibbertigibbets"

        issue = result.issues[0]
        assert issue.error_type == "UnknownMovement"
        assert issue.severity == "warning"
        assert issue.line_number == 2

    def test_unknown_movement_suggests_similar_names(self, line_parser):
        result = _parse(line_parser, "10 Thrusers")
        issue = result.issues[0]
        assert "Thruster" in issue.similar_names
        assert issue.suggestion.startswith("Did you mean")

    def test_unrecognized_line_without_quantity(self, line_parser):
        result = _parse(line_parser, "Flibbertigibbet")

        assert result.success is False
        assert result.entry is None
        assert result.issues[0].error_type == "UnrecognizedMovementFormat"
        assert result.issues[0].severity == "error"

    def test_bare_known_movement(self, line_parser):
        result = _parse(line_parser, "Pull-ups")
        assert result.success is True
        assert result.entry.rep_count is None
        assert result.entry.canonical_name == "pull_up"

    def test_partial_match_confidence(self, line_parser):
        result = _parse(line_parser, "10 Kettlebell")
        assert result.is_identified
        assert result.confidence == PREFIX_LINE_CONFIDENCE

    def test_ambiguous_movement(self, small_vocabulary):
        parser = MovementLineParser(MovementResolver(small_vocabulary))
        result = _parse(parser, "10 Box")

        assert result.success is True
        assert result.confidence == AMBIGUOUS_LINE_CONFIDENCE
        assert result.issues[0].error_type == "AmbiguousMovement"
        assert "Box Jump-Over" in result.issues[0].message

    def test_blank_line(self, line_parser):
        result = _parse(line_parser, "  ")
        assert result.success is False
        assert result.issues == []

    @pytest.mark.parametrize("text", [
        "((((",
        "999999999999999999999999 Burpees",
        "1.2.3.4 lb",
        "@@@ ### !!!",
    ])
    def test_never_raises(self, line_parser, text):
        result = _parse(line_parser, text)
        assert result.line_number == 1
