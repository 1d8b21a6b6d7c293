"""Domain value objects and pure matching rules."""

from spot2lidarr.domain.value_objects.name_matching import (
    ALBUM_SIMILARITY_THRESHOLD,
    CONFIDENCE_THRESHOLD,
    MatchDecision,
    MatchKind,
    album_title_matches,
    find_best_match,
    levenshtein_distance,
    normalize_name,
    string_similarity,
    strip_edition_suffix,
    title_similarity,
)

__all__ = [
    "ALBUM_SIMILARITY_THRESHOLD",
    "CONFIDENCE_THRESHOLD",
    "MatchDecision",
    "MatchKind",
    "album_title_matches",
    "find_best_match",
    "levenshtein_distance",
    "normalize_name",
    "string_similarity",
    "strip_edition_suffix",
    "title_similarity",
]
