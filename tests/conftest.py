"""
Test fixtures for wod-parser-api.

Provides the bundled movement vocabulary and pipeline components so tests run
fast, deterministic and offline.
"""

import sys
from pathlib import Path
from typing import Dict, Any

import pytest
from fastapi.testclient import TestClient

# Repo root: .../wod-parser-api
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import wod_parser_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from wod_parser_api.main import app
from wod_parser_api.parsers.movement_line_parser import MovementLineParser
from wod_parser_api.parsers.movement_resolver import MovementResolver
from wod_parser_api.services.workout_parsing_service import WorkoutParsingService
from wod_parser_api.vocabulary import InMemoryMovementVocabulary, MovementDescriptor
from wod_parser_api.vocabulary.http_vocabulary import HttpVocabularySource
from wod_parser_api.vocabulary.static_vocabulary import DEFAULT_VOCABULARY_PATH, StaticVocabularySource


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_client() -> TestClient:
    """Shared FastAPI TestClient for wod-parser-api."""
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient (for tests needing fresh state)."""
    app.dependency_overrides.clear()
    return TestClient(app)


# ---------------------------------------------------------------------------
# Vocabulary Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def vocabulary() -> InMemoryMovementVocabulary:
    """Bundled movement catalogue (data/movements.json)."""
    return StaticVocabularySource(DEFAULT_VOCABULARY_PATH).load()


@pytest.fixture
def small_vocabulary() -> InMemoryMovementVocabulary:
    """Hand-built vocabulary for resolver edge cases."""
    return InMemoryMovementVocabulary([
        MovementDescriptor(1, "thruster", "Thruster", "weightlifting", ("thrusters",)),
        MovementDescriptor(2, "run", "Run", "cardio", ("running",)),
        MovementDescriptor(3, "row", "Row", "cardio", ("rowing", "erg")),
        MovementDescriptor(4, "box_jump", "Box Jump", "gymnastics", ("box jumps",)),
        MovementDescriptor(5, "box_jump_over", "Box Jump-Over", "gymnastics", ("bjo",)),
    ])


@pytest.fixture
def sample_movements_payload() -> list:
    """Vocabulary service response body."""
    return [
        {"id": 1, "canonical_name": "thruster", "display_name": "Thruster",
         "category": "weightlifting", "aliases": ["thrusters"]},
        {"id": 2, "canonical_name": "pull_up", "display_name": "Pull-Up",
         "category": "gymnastics", "aliases": ["pull-ups", "pullups"]},
    ]


# ---------------------------------------------------------------------------
# Pipeline Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def resolver(vocabulary) -> MovementResolver:
    return MovementResolver(vocabulary)


@pytest.fixture
def line_parser(resolver) -> MovementLineParser:
    return MovementLineParser(resolver)


@pytest.fixture
def service(vocabulary) -> WorkoutParsingService:
    return WorkoutParsingService(vocabulary)


# ---------------------------------------------------------------------------
# Sample Workouts
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_workouts() -> Dict[str, Any]:
    """Benchmark workouts in the shapes coaches usually write them."""
    return {
        "fran": "Fran\n21-15-9\nThrusters (95/65 lb)\nPull-ups",
        "cindy": "Cindy\nAMRAP 20 min\n5 Pull-ups\n10 Push-ups\n15 Air Squats",
        "emom": "10 min EMOM:\n5 Pull-ups",
        "for_time": (
            "For Time:\n"
            "400m Run\n"
            "21 Kettlebell Swings (53/35 lb)\n"
            "12 Pull-ups\n"
            "Time Cap: 12 min"
        ),
        "rounds": "5 Rounds\n10 Burpees\n15 Air Squats",
        "intervals": "5 x 3 min on / 1 min off\n250m Row\n10 Burpees",
        "tabata_amrap": "Tabata\n20 min AMRAP\n10 Burpees",
    }


# ---------------------------------------------------------------------------
# Cache Reset
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_http_vocabulary_cache():
    """HTTP snapshots are process-wide; keep tests independent."""
    HttpVocabularySource.clear_cache()
    yield
    HttpVocabularySource.clear_cache()
