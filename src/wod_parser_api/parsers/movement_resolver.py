"""
Movement name resolution

Scores a cleaned movement name against every descriptor in a vocabulary
snapshot. The policy is an ordered table of (predicate, score) rules; the
first rule a descriptor satisfies gives its score and the best score wins.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from wod_parser_api.vocabulary import MovementDescriptor, MovementVocabulary, normalize_name
from .issues import SIMILAR_NAME_SUGGESTIONS, find_similar_names

logger = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 90
# Score given to a hit found only through the vocabulary's own alias lookup
ALIAS_LOOKUP_SCORE = 90


def _exact(query: str, name: str) -> bool:
    return query == name


# Abbreviations such as "bs" or "du" would match inside unrelated words
MIN_PARTIAL_NAME_LENGTH = 3


def _prefix(query: str, name: str) -> bool:
    return name.startswith(query) or (len(name) >= MIN_PARTIAL_NAME_LENGTH and query.startswith(name))


def _name_in_query(query: str, name: str) -> bool:
    return len(name) >= MIN_PARTIAL_NAME_LENGTH and name in query


def _query_in_name(query: str, name: str) -> bool:
    return len(query) > 2 and query in name


@dataclass(frozen=True)
class ScoringRule:
    name: str
    field: str  # canonical, display or alias
    predicate: Callable[[str, str], bool]
    score: int


SCORING_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule("canonical_exact", "canonical", _exact, 100),
    ScoringRule("display_exact", "display", _exact, 95),
    ScoringRule("alias_exact", "alias", _exact, 90),
    ScoringRule("canonical_prefix", "canonical", _prefix, 70),
    ScoringRule("display_prefix", "display", _prefix, 65),
    ScoringRule("alias_prefix", "alias", _prefix, 60),
    ScoringRule("canonical_substring", "canonical", _name_in_query, 40),
    ScoringRule("display_substring", "display", _name_in_query, 35),
    ScoringRule("alias_substring", "alias", _name_in_query, 30),
    ScoringRule("query_in_canonical", "canonical", _query_in_name, 20),
)


@dataclass(frozen=True)
class _IndexedMovement:
    descriptor: MovementDescriptor
    canonical: str
    display: str
    aliases: Tuple[str, ...]

    def names(self, field: str) -> Tuple[str, ...]:
        if field == "canonical":
            return (self.canonical,)
        if field == "display":
            return (self.display,)
        return self.aliases


@dataclass(frozen=True)
class MovementMatch:
    descriptor: MovementDescriptor
    score: int
    rule: str
    query: str
    alternatives: Tuple[MovementDescriptor, ...] = ()

    @property
    def is_exact(self) -> bool:
        return self.score >= EXACT_MATCH_SCORE

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.alternatives)


def score_movement(query: str, movement: _IndexedMovement) -> Tuple[int, Optional[str]]:
    """Highest qualifying score for one descriptor, with the rule that gave it."""
    for rule in SCORING_RULES:
        if any(name and rule.predicate(query, name) for name in movement.names(rule.field)):
            return rule.score, rule.name
    return 0, None


def singular_plural_variants(query: str) -> List[str]:
    variants = []
    if query.endswith("es") and len(query) > 3:
        variants.append(query[:-2])
    if query.endswith("s") and len(query) > 2:
        variants.append(query[:-1])
    else:
        variants.append(query + "s")
    return variants


class MovementResolver:
    """Resolves names against one read-only vocabulary snapshot."""

    def __init__(self, vocabulary: Optional[MovementVocabulary]):
        if vocabulary is None:
            raise ValueError("MovementResolver requires a movement vocabulary")
        self.vocabulary = vocabulary
        self._movements: Tuple[_IndexedMovement, ...] = tuple(
            _IndexedMovement(
                descriptor=m,
                canonical=normalize_name(m.canonical_name),
                display=normalize_name(m.display_name),
                aliases=tuple(normalize_name(a) for a in m.aliases),
            )
            for m in vocabulary.list_movements()
        )

    def _best(self, query: str) -> Optional[MovementMatch]:
        best_score, best_rule, tied = 0, None, []
        for movement in self._movements:
            score, rule = score_movement(query, movement)
            if score == 0:
                continue
            if score > best_score:
                best_score, best_rule, tied = score, rule, [movement]
            elif score == best_score:
                tied.append(movement)
        if not tied:
            return None

        # Among equal scores prefer the name closest in length to the query
        tied.sort(key=lambda m: abs(len(m.canonical) - len(query)))
        winner, others = tied[0], tied[1:]
        alternatives = ()
        if best_score < EXACT_MATCH_SCORE:
            alternatives = tuple(m.descriptor for m in others)
        return MovementMatch(winner.descriptor, best_score, best_rule, query, alternatives)

    def resolve(self, name: str) -> Optional[MovementMatch]:
        """
        Resolve a free-text movement name.

        Returns:
            MovementMatch with score 20-100, or None when nothing qualifies
        """
        query = normalize_name(name)
        if not query:
            return None

        match = self._best(query)
        if match is not None and match.is_exact:
            return match

        for variant in singular_plural_variants(query):
            variant_match = self._best(variant)
            if variant_match is not None and variant_match.is_exact:
                logger.debug(f"Resolved '{name}' through variant '{variant}'")
                return variant_match

        # The vocabulary may know aliases the snapshot descriptors do not list
        descriptor = self.vocabulary.find_by_canonical_name(self.vocabulary.normalize(name) or "")
        if descriptor is None:
            descriptor = self.vocabulary.find_by_alias(name)
        if descriptor is not None:
            return MovementMatch(descriptor, ALIAS_LOOKUP_SCORE, "alias_lookup", query)

        if match is None:
            logger.debug(f"No movement matched '{name}'")
        return match

    def suggest(self, name: str, limit: int = SIMILAR_NAME_SUGGESTIONS) -> List[str]:
        """Display names similar to an unresolved movement name."""
        suggestions = [m.display_name for m in self.vocabulary.search(name)[:limit]]
        if suggestions:
            return suggestions
        candidates = [m.descriptor.display_name for m in self._movements]
        return find_similar_names(name, candidates, limit=limit)
