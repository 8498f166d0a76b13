"""
Remote movement vocabulary

Fetches the movement catalogue from the vocabulary service and keeps an
in-process snapshot. The service is only hit again once the snapshot is older
than the configured TTL; a stale snapshot is served if a refresh fails.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from wod_parser_api.config import settings
from . import register_source
from .base import InMemoryMovementVocabulary, MovementDescriptor, VocabularySource, VocabularyUnavailableError

logger = logging.getLogger(__name__)

MOVEMENTS_PATH = "/movements"


class HttpVocabularySource(VocabularySource):
    """Vocabulary snapshot loaded over HTTP."""

    # base_url -> (fetched_at, snapshot)
    _snapshots: Dict[str, tuple] = {}

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.VOCABULARY_URL or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.VOCABULARY_TIMEOUT_SECONDS
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.VOCABULARY_TTL_SECONDS

    @classmethod
    def source_name(cls) -> str:
        return "http"

    @classmethod
    def clear_cache(cls) -> None:
        cls._snapshots.clear()

    def _fetch(self) -> List[MovementDescriptor]:
        with httpx.Client(timeout=self.timeout) as client:
            response = client.get(f"{self.base_url}{MOVEMENTS_PATH}")
            response.raise_for_status()
            payload: Any = response.json()

        items = payload.get("movements", []) if isinstance(payload, dict) else payload
        return [MovementDescriptor.from_dict(item) for item in items]

    def load(self) -> InMemoryMovementVocabulary:
        if not self.base_url:
            raise VocabularyUnavailableError("VOCABULARY_URL is not configured")

        cached = self._snapshots.get(self.base_url)
        if cached and time.monotonic() - cached[0] < self.ttl_seconds:
            return cached[1]

        try:
            movements = self._fetch()
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            if cached:
                logger.warning(f"Vocabulary refresh from {self.base_url} failed, serving stale snapshot: {e}")
                return cached[1]
            logger.error(f"Vocabulary fetch from {self.base_url} failed: {e}")
            raise VocabularyUnavailableError(f"Movement vocabulary service unavailable: {e}") from e

        logger.info(f"Fetched {len(movements)} movements from {self.base_url}")
        snapshot = InMemoryMovementVocabulary(movements)
        self._snapshots[self.base_url] = (time.monotonic(), snapshot)
        return snapshot


register_source(HttpVocabularySource)
