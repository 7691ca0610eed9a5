"""Lexical matcher: fuzzy pairing of free-text spans with catalog names.

Two strings match when one contains the other outright, or when enough of
the entity's significant words overlap the candidate's words. Overlap is
bidirectional substring containment per word pair, so "counsel" overlaps
"counseling" and vice versa.

The thresholds below are tunable heuristics, not business rules.
"""

import math
from typing import Callable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")

# Candidates shorter than this (after trimming) are never matched.
MIN_CANDIDATE_LENGTH = 3

# Words shorter than this are dropped before overlap counting.
MIN_SIGNIFICANT_WORD_LENGTH = 3

# Share of an entity's significant words that must overlap...
ORG_NAME_MIN_WORD_OVERLAP_RATIO = 0.6
# ...capped at this many words.
MIN_OVERLAPPING_WORDS = 2

# A single-word entity name only matches on overlap if it is at least this long.
MIN_SINGLE_WORD_NAME_LENGTH = 5

STOP_WORDS = frozenset({"the", "and", "or", "for", "of", "in", "on", "at", "to", "a", "an"})


def normalize(text: str) -> str:
    return text.lower().strip()


def significant_words(text: str) -> list[str]:
    """Lowercased whitespace tokens long enough to carry meaning."""
    return [w for w in normalize(text).split() if len(w) >= MIN_SIGNIFICANT_WORD_LENGTH]


def words_overlap(a: str, b: str) -> bool:
    return a in b or b in a


def required_overlap(word_count: int) -> int:
    """Number of overlapping words needed for a name with `word_count` words."""
    return min(MIN_OVERLAPPING_WORDS, math.ceil(word_count * ORG_NAME_MIN_WORD_OVERLAP_RATIO))


def is_distinctive_word(word: str) -> bool:
    """Whether a lone word is specific enough to identify a single-word name."""
    return word not in STOP_WORDS and len(word) >= MIN_SINGLE_WORD_NAME_LENGTH


def overlap_score(text: str, name: str) -> int:
    """Count of `text`'s significant words overlapping any word of `name`."""
    name_words = significant_words(name)
    return sum(
        1
        for word in significant_words(text)
        if any(words_overlap(word, nw) for nw in name_words)
    )


def matches_entity(candidate_text: str, entity_name: str) -> bool:
    """Return True if `candidate_text` plausibly refers to `entity_name`."""
    candidate = normalize(candidate_text)
    entity = normalize(entity_name)
    if len(candidate) < MIN_CANDIDATE_LENGTH or not entity:
        return False

    if entity in candidate or candidate in entity:
        return True

    entity_words = significant_words(entity)
    candidate_words = significant_words(candidate)
    if not entity_words or not candidate_words:
        return False

    matching = [
        ew for ew in entity_words if any(words_overlap(ew, cw) for cw in candidate_words)
    ]

    if len(entity_words) == 1:
        return len(matching) == 1 and is_distinctive_word(entity_words[0])
    if len(entity_words) == 2 and len(matching) == 2:
        return True
    return len(matching) >= required_overlap(len(entity_words))


def longest_first(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Sort by name length, longest first. Stable, so ties keep catalog order."""
    return sorted(items, key=lambda item: len(key(item)), reverse=True)


def best_match(
    candidate_text: str,
    entities: Sequence[T],
    key: Callable[[T], str] = lambda e: e.name,
) -> Optional[T]:
    """First entity, longest name first, that `candidate_text` matches."""
    for entity in longest_first(entities, key):
        if matches_entity(candidate_text, key(entity)):
            return entity
    return None


def name_appears_in(text: str, name: str) -> bool:
    """Catalog sweep test: does `name` (or enough of its words) occur in `text`?

    Unlike matches_entity this checks each name word against the whole text,
    which lets a name be found inside a longer sentence.
    """
    haystack = normalize(text)
    name_lower = normalize(name)
    words = significant_words(name_lower)
    if not words:
        return False

    if len(words) == 1:
        return is_distinctive_word(words[0]) and (
            name_lower in haystack or words[0] in haystack
        )

    if name_lower in haystack:
        return True
    present = [w for w in words if w in haystack]
    return len(present) >= required_overlap(len(words))
