"""Movement vocabulary sources for name resolution."""
from typing import Dict, Optional, Type

from wod_parser_api.config import settings
from .base import (
    InMemoryMovementVocabulary,
    MovementDescriptor,
    MovementVocabulary,
    VocabularySource,
    VocabularyUnavailableError,
    normalize_name,
)

_SOURCE_REGISTRY: Dict[str, Type[VocabularySource]] = {}


def register_source(source_class: Type[VocabularySource]) -> None:
    """Register a vocabulary source class.

    Raises:
        ValueError: If a source is already registered under the same name.
    """
    name = source_class.source_name()
    if name in _SOURCE_REGISTRY:
        raise ValueError(f"Vocabulary source already registered: '{name}'")
    _SOURCE_REGISTRY[name] = source_class


def get_source(name: Optional[str] = None) -> VocabularySource:
    """Instantiate the named source, defaulting to VOCABULARY_SOURCE.

    Raises:
        KeyError: If no source is registered under the name.
    """
    cls = _SOURCE_REGISTRY[name or settings.VOCABULARY_SOURCE]
    return cls()


def load_vocabulary(name: Optional[str] = None) -> InMemoryMovementVocabulary:
    return get_source(name).load()


__all__ = [
    "register_source",
    "get_source",
    "load_vocabulary",
    "InMemoryMovementVocabulary",
    "MovementDescriptor",
    "MovementVocabulary",
    "VocabularySource",
    "VocabularyUnavailableError",
    "normalize_name",
]

# Auto-load sources (triggers self-registration)
from . import static_vocabulary  # noqa: F401,E402
from . import http_vocabulary  # noqa: F401,E402
