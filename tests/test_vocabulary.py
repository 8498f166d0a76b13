"""
Tests for movement vocabulary sources

The HTTP source is tested against a mocked httpx.Client so no network is used.
"""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from wod_parser_api.config import settings
from wod_parser_api.vocabulary import (
    InMemoryMovementVocabulary,
    MovementDescriptor,
    MovementVocabulary,
    VocabularyUnavailableError,
    get_source,
    load_vocabulary,
    normalize_name,
    register_source,
)
from wod_parser_api.vocabulary.http_vocabulary import HttpVocabularySource
from wod_parser_api.vocabulary.static_vocabulary import StaticVocabularySource


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_httpx_client(sample_movements_payload):
    """Mock httpx.Client used by the HTTP vocabulary source."""
    with patch("wod_parser_api.vocabulary.http_vocabulary.httpx.Client") as mock_class:
        mock_instance = MagicMock()
        mock_instance.__enter__ = MagicMock(return_value=mock_instance)
        mock_instance.__exit__ = MagicMock(return_value=False)
        response = MagicMock()
        response.json.return_value = sample_movements_payload
        mock_instance.get.return_value = response
        mock_class.return_value = mock_instance
        yield mock_instance


# ---------------------------------------------------------------------------
# In-memory vocabulary
# ---------------------------------------------------------------------------


class TestInMemoryVocabulary:

    def test_normalize_name(self):
        assert normalize_name("Pull-Up") == "pullup"
        assert normalize_name("Farmer's  Carry") == "farmerscarry"
        assert normalize_name(None) == ""

    def test_satisfies_protocol(self, vocabulary):
        assert isinstance(vocabulary, MovementVocabulary)

    def test_bundled_catalogue(self, vocabulary):
        movements = vocabulary.list_movements()
        assert len(movements) == 60
        assert len({m.id for m in movements}) == 60

    def test_alias_map(self, vocabulary):
        alias_map = vocabulary.lookup_alias_map()
        assert alias_map["thrusters"] == 1
        assert alias_map["pullup"] == 2

    def test_normalize(self, vocabulary):
        assert vocabulary.normalize("Pull Ups") == "pull_up"
        assert vocabulary.normalize("Zorbs") is None

    def test_find_by_canonical_name(self, vocabulary):
        assert vocabulary.find_by_canonical_name("thruster").display_name == "Thruster"
        assert vocabulary.find_by_canonical_name("") is None

    def test_find_by_alias(self, vocabulary):
        assert vocabulary.find_by_alias("HSPU").canonical_name == "handstand_push_up"
        assert vocabulary.find_by_alias("nothing here") is None

    def test_search_prefix_first(self, vocabulary):
        results = vocabulary.search("pull")
        assert results[0].canonical_name == "pull_up"
        assert any(m.canonical_name == "chest_to_bar_pull_up" for m in results)

    def test_search_short_query(self, vocabulary):
        assert vocabulary.search("p") == []

    def test_duplicate_alias_keeps_first(self):
        vocabulary = InMemoryMovementVocabulary([
            MovementDescriptor(1, "air_squat", "Air Squat", aliases=("squat",)),
            MovementDescriptor(2, "back_squat", "Back Squat", aliases=("squat",)),
        ])
        assert vocabulary.find_by_alias("squat").id == 1

    def test_descriptor_from_dict(self):
        descriptor = MovementDescriptor.from_dict({"id": "7", "canonical_name": "sit_up"})
        assert descriptor.id == 7
        assert descriptor.display_name == "sit_up"
        assert descriptor.aliases == ()


# ---------------------------------------------------------------------------
# Static source
# ---------------------------------------------------------------------------


class TestStaticVocabularySource:

    def test_load_is_cached(self):
        source = StaticVocabularySource()
        assert source.load() is source.load()

    def test_load_custom_file(self, tmp_path):
        path = tmp_path / "movements.json"
        path.write_text(json.dumps({"movements": [
            {"id": 1, "canonical_name": "row", "display_name": "Row", "aliases": ["erg"]},
        ]}))
        vocabulary = StaticVocabularySource(path).load()
        assert vocabulary.find_by_alias("erg").id == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(VocabularyUnavailableError):
            StaticVocabularySource(tmp_path / "missing.json").load()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(VocabularyUnavailableError):
            StaticVocabularySource(path).load()


# ---------------------------------------------------------------------------
# HTTP source
# ---------------------------------------------------------------------------


class TestHttpVocabularySource:

    def test_fetch(self, mock_httpx_client):
        vocabulary = HttpVocabularySource(base_url="http://vocab.test/").load()

        assert vocabulary.find_by_alias("pull-ups").id == 2
        mock_httpx_client.get.assert_called_once_with("http://vocab.test/movements")

    def test_wrapped_payload(self, mock_httpx_client, sample_movements_payload):
        mock_httpx_client.get.return_value.json.return_value = {"movements": sample_movements_payload}
        vocabulary = HttpVocabularySource(base_url="http://vocab.test").load()
        assert len(vocabulary.list_movements()) == 2

    def test_snapshot_reused_within_ttl(self, mock_httpx_client):
        source = HttpVocabularySource(base_url="http://vocab.test", ttl_seconds=3600)
        first = source.load()
        second = source.load()

        assert first is second
        assert mock_httpx_client.get.call_count == 1

    def test_stale_snapshot_served_on_failure(self, mock_httpx_client):
        source = HttpVocabularySource(base_url="http://vocab.test", ttl_seconds=0)
        first = source.load()

        mock_httpx_client.get.side_effect = httpx.ConnectError("connection refused")
        assert source.load() is first

    def test_failure_without_snapshot(self, mock_httpx_client):
        mock_httpx_client.get.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(VocabularyUnavailableError):
            HttpVocabularySource(base_url="http://vocab.test").load()

    def test_missing_url(self, monkeypatch):
        monkeypatch.setattr(settings, "VOCABULARY_URL", None)
        with pytest.raises(VocabularyUnavailableError):
            HttpVocabularySource().load()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestSourceRegistry:

    def test_get_source(self):
        assert isinstance(get_source("static"), StaticVocabularySource)
        assert isinstance(get_source("http"), HttpVocabularySource)

    def test_default_source(self, monkeypatch):
        monkeypatch.setattr(settings, "VOCABULARY_SOURCE", "static")
        assert isinstance(get_source(), StaticVocabularySource)

    def test_unknown_source(self):
        with pytest.raises(KeyError):
            get_source("carrier-pigeon")

    def test_duplicate_registration(self):
        with pytest.raises(ValueError):
            register_source(StaticVocabularySource)

    def test_load_vocabulary(self, monkeypatch):
        monkeypatch.setattr(settings, "VOCABULARY_PATH", None)
        vocabulary = load_vocabulary("static")
        assert vocabulary.find_by_canonical_name("burpee") is not None
