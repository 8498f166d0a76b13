"""Movement vocabulary bundled with the package as a JSON catalogue."""
import json
import logging
from pathlib import Path
from typing import Optional

from wod_parser_api.config import settings
from . import register_source
from .base import InMemoryMovementVocabulary, MovementDescriptor, VocabularySource, VocabularyUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_VOCABULARY_PATH = Path(__file__).parent.parent / "data" / "movements.json"


class StaticVocabularySource(VocabularySource):
    """Loads data/movements.json once per path and caches the snapshot."""

    _cache: dict = {}

    def __init__(self, path: Optional[Path] = None):
        configured = settings.VOCABULARY_PATH
        self.path = Path(path or configured or DEFAULT_VOCABULARY_PATH)

    @classmethod
    def source_name(cls) -> str:
        return "static"

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    def load(self) -> InMemoryMovementVocabulary:
        key = str(self.path)
        if key in self._cache:
            return self._cache[key]

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            movements = [MovementDescriptor.from_dict(item) for item in data.get("movements", [])]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load movement vocabulary from {self.path}: {e}")
            raise VocabularyUnavailableError(f"Cannot load movement vocabulary: {e}") from e

        logger.info(f"Loaded {len(movements)} movements (version {data.get('version', 'unknown')})")
        vocabulary = InMemoryMovementVocabulary(movements)
        self._cache[key] = vocabulary
        return vocabulary


register_source(StaticVocabularySource)
