"""Movement vocabulary contract and the in-memory snapshot both sources build."""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

logger = logging.getLogger(__name__)

RE_NAME_NOISE = re.compile(r"[-_\s']+")

SEARCH_LIMIT = 10


class VocabularyUnavailableError(Exception):
    """Raised when a movement vocabulary cannot be loaded."""


def normalize_name(text: Optional[str]) -> str:
    """Lowercase and strip hyphens, underscores, whitespace and apostrophes."""
    if not text:
        return ""
    return RE_NAME_NOISE.sub("", text).lower()


@dataclass(frozen=True)
class MovementDescriptor:
    id: int
    canonical_name: str
    display_name: str
    category: Optional[str] = None
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping) -> "MovementDescriptor":
        return cls(
            id=int(data["id"]),
            canonical_name=str(data["canonical_name"]),
            display_name=str(data.get("display_name") or data["canonical_name"]),
            category=data.get("category"),
            aliases=tuple(data.get("aliases") or ()),
        )


@runtime_checkable
class MovementVocabulary(Protocol):
    """Read-only lookup capability the parser resolves movement names against."""

    def lookup_alias_map(self) -> Mapping[str, int]: ...

    def normalize(self, text: str) -> Optional[str]: ...

    def find_by_canonical_name(self, name: str) -> Optional[MovementDescriptor]: ...

    def find_by_alias(self, text: str) -> Optional[MovementDescriptor]: ...

    def search(self, query: str) -> List[MovementDescriptor]: ...

    def list_movements(self) -> List[MovementDescriptor]: ...


class InMemoryMovementVocabulary:
    """Vocabulary over a fixed list of descriptors."""

    def __init__(self, movements: Iterable[MovementDescriptor]):
        self._movements: Tuple[MovementDescriptor, ...] = tuple(movements)
        self._by_id: Dict[int, MovementDescriptor] = {m.id: m for m in self._movements}
        self._by_canonical: Dict[str, MovementDescriptor] = {
            m.canonical_name.lower(): m for m in self._movements
        }

        alias_map: Dict[str, int] = {}
        for movement in self._movements:
            for name in (movement.canonical_name, movement.display_name, *movement.aliases):
                key = normalize_name(name)
                if not key:
                    continue
                if key in alias_map and alias_map[key] != movement.id:
                    logger.warning(
                        f"Alias '{name}' maps to both {alias_map[key]} and {movement.id}, keeping first"
                    )
                    continue
                alias_map[key] = movement.id
        self._alias_map = alias_map

    def lookup_alias_map(self) -> Mapping[str, int]:
        return dict(self._alias_map)

    def normalize(self, text: str) -> Optional[str]:
        movement_id = self._alias_map.get(normalize_name(text))
        if movement_id is None:
            return None
        return self._by_id[movement_id].canonical_name

    def find_by_canonical_name(self, name: str) -> Optional[MovementDescriptor]:
        if not name:
            return None
        return self._by_canonical.get(name.lower())

    def find_by_alias(self, text: str) -> Optional[MovementDescriptor]:
        movement_id = self._alias_map.get(normalize_name(text))
        return self._by_id.get(movement_id) if movement_id is not None else None

    def search(self, query: str) -> List[MovementDescriptor]:
        """Movements whose names contain the query, prefix matches first."""
        key = normalize_name(query)
        if len(key) < 2:
            return []
        prefix, contains = [], []
        for movement in self._movements:
            names = [normalize_name(n) for n in (movement.canonical_name, movement.display_name, *movement.aliases)]
            if any(n.startswith(key) for n in names):
                prefix.append(movement)
            elif any(key in n for n in names):
                contains.append(movement)
        return (prefix + contains)[:SEARCH_LIMIT]

    def list_movements(self) -> List[MovementDescriptor]:
        return list(self._movements)


class VocabularySource(ABC):
    """A place a vocabulary snapshot can be loaded from."""

    @classmethod
    @abstractmethod
    def source_name(cls) -> str:
        """Key used to select this source in configuration."""

    @abstractmethod
    def load(self) -> InMemoryMovementVocabulary:
        """Return a snapshot. Raises VocabularyUnavailableError on failure."""
