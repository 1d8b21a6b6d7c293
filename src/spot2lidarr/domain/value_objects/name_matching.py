"""Name normalization and fuzzy matching for artists and album titles.

Hey future me - names differ between Spotify and MusicBrainz in all the annoying
ways: punctuation ("AC/DC" vs "ACDC"), articles ("The Beatles" vs "Beatles"),
suffixes, diacritics. Everything here compares NORMALIZED names:

    lowercase -> drop everything outside [a-z0-9 whitespace] -> collapse spaces -> trim

Artist resolution (find_best_match) is tiered, first rule that fires wins:
    1. EXACT       normalized names are equal
    2. PARTIAL     one normalized name contains the other (first in input order)
    3. CONFIDENCE  the provider's top hit scores above the threshold (80)
    otherwise NONE.

Album reconciliation (album_title_matches) only ever runs inside ONE known
artist's album list, so it can afford to be looser: exact, else a 0-1 edit
distance similarity >= 0.85, also tried with edition suffixes
such as "(Remastered)" stripped from both titles.

Examples:
    >>> normalize_name("  AC/DC  ")
    'acdc'
    >>> string_similarity("Abbey Road", "abbey road!")
    1.0
"""

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from rapidfuzz.distance import Levenshtein

T = TypeVar("T")

CONFIDENCE_THRESHOLD = 80.0
ALBUM_SIMILARITY_THRESHOLD = 0.85

_EDITION_KEYWORDS = r"remaster|deluxe|edition|anniversary|bonus|expanded|reissue|version"

# One trailing "(... Remastered ...)", "[... Deluxe ...]" or " - ... Remaster" group.
_EDITION_SUFFIX = re.compile(
    rf"\s*(?:\([^()]*(?:{_EDITION_KEYWORDS})[^()]*\)"
    rf"|\[[^\[\]]*(?:{_EDITION_KEYWORDS})[^\[\]]*\]"
    rf"|\s-\s[^()\[\]]*(?:{_EDITION_KEYWORDS})[^()\[\]]*)\s*$",
    re.IGNORECASE,
)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(value: str) -> str:
    """Normalize a name for comparison.

    Idempotent, and the result is never longer than the input.

    Args:
        value: Free-text artist or album name

    Returns:
        Lowercase name with only a-z, 0-9 and single spaces
    """
    lowered = _NON_ALPHANUMERIC.sub("", value.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def levenshtein_distance(first: str, second: str) -> int:
    """Plain edit distance (insert/delete/substitute, all cost 1)."""
    return Levenshtein.distance(first, second)


def string_similarity(first: str, second: str) -> float:
    """Similarity of two names in 0..1 based on normalized Levenshtein distance.

    1 - distance / max(len) on the normalized forms. Equal normalized names are
    1.0, and 0.0 if either side normalizes to an empty string.
    """
    left = normalize_name(first)
    right = normalize_name(second)
    if left == right:
        return 1.0
    if not left or not right:
        return 0.0
    return Levenshtein.normalized_similarity(left, right)


def strip_edition_suffix(title: str) -> str:
    """Drop trailing edition qualifiers such as "(Remastered)" or "- 2009 Remaster".

    Qualifiers are only stripped when they name an edition (remaster, deluxe,
    anniversary, ...). A title that is nothing but a qualifier is returned as is.

    Examples:
        >>> strip_edition_suffix("Abbey Road (Remastered 2019) [Super Deluxe]")
        'Abbey Road'
    """
    stripped = title
    while True:
        shorter = _EDITION_SUFFIX.sub("", stripped)
        if shorter == stripped or not shorter.strip():
            return stripped.strip()
        stripped = shorter


def title_similarity(first: str, second: str) -> float:
    """Similarity used for album titles of one artist.

    Hey future me - plain string_similarity("Abbey Road", "Abbey Road (Remastered)")
    is only ~0.48 because the suffix is counted as edits. Lidarr and Spotify both
    carry edition suffixes all the time, so we also compare the titles with their
    edition qualifiers stripped and use whichever score is higher.
    GOTCHA: don't reach for substring alignment here. "Love" sits inside "All You
    Need Is Love" and would get an album monitored that nobody saved.
    """
    full = string_similarity(first, second)
    if full >= 1.0:
        return full
    stripped = string_similarity(strip_edition_suffix(first), strip_edition_suffix(second))
    return max(full, stripped)


def album_title_matches(
    title: str,
    saved_titles: Iterable[str],
    threshold: float = ALBUM_SIMILARITY_THRESHOLD,
) -> bool:
    """Check whether a Lidarr album title corresponds to any saved title."""
    normalized = normalize_name(title)
    saved = list(saved_titles)
    if any(normalize_name(candidate) == normalized for candidate in saved):
        return True
    return any(title_similarity(title, candidate) >= threshold for candidate in saved)


class MatchKind(str, Enum):
    """Which rule produced a match decision."""

    EXACT = "exact"
    PARTIAL = "partial"
    CONFIDENCE = "confidence"
    NONE = "none"


@dataclass(frozen=True)
class MatchDecision(Generic[T]):
    """Outcome of find_best_match."""

    kind: MatchKind
    candidate: T | None = None

    @property
    def matched(self) -> bool:
        return self.candidate is not None


def _no_score(_: object) -> float | None:
    return None


def find_best_match(
    reference: str,
    candidates: Sequence[T],
    name_of: Callable[[T], str],
    score_of: Callable[[T], float | None] = _no_score,
    threshold: float = CONFIDENCE_THRESHOLD,
) -> MatchDecision[T]:
    """Pick the candidate that best corresponds to a reference name.

    Args:
        reference: Name we are looking for (e.g. the Spotify artist name)
        candidates: Provider results, best ranked first
        name_of: Extracts the display name of a candidate
        score_of: Extracts the provider confidence (None if not provided)
        threshold: Score the top candidate must EXCEED for the fallback

    Returns:
        MatchDecision with the rule that fired, candidate is None for NONE
    """
    if not candidates:
        return MatchDecision(MatchKind.NONE)

    target = normalize_name(reference)
    names = [normalize_name(name_of(candidate)) for candidate in candidates]

    # Names made only of punctuation or non-latin script normalize to "". Comparing
    # "" would make every such candidate an exact/substring hit, so fall back to a
    # case-insensitive raw comparison and skip the substring rule.
    if target:
        for candidate, name in zip(candidates, names):
            if name == target:
                return MatchDecision(MatchKind.EXACT, candidate)

        for candidate, name in zip(candidates, names):
            if name and (target in name or name in target):
                return MatchDecision(MatchKind.PARTIAL, candidate)
    else:
        raw_target = reference.casefold().strip()
        for candidate in candidates:
            if raw_target and name_of(candidate).casefold().strip() == raw_target:
                return MatchDecision(MatchKind.EXACT, candidate)

    top = candidates[0]
    score = score_of(top)
    if score is not None and score > threshold:
        return MatchDecision(MatchKind.CONFIDENCE, top)

    return MatchDecision(MatchKind.NONE)
