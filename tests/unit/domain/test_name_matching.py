"""Tests for name normalization and fuzzy matching."""

import pytest

from spot2lidarr.domain.entities import CandidateMatch
from spot2lidarr.domain.value_objects import (
    MatchKind,
    album_title_matches,
    find_best_match,
    levenshtein_distance,
    normalize_name,
    string_similarity,
    strip_edition_suffix,
    title_similarity,
)


def _match(reference: str, candidates: list[CandidateMatch], threshold: float = 80.0):
    return find_best_match(
        reference,
        candidates,
        name_of=lambda c: c.name,
        score_of=lambda c: c.score,
        threshold=threshold,
    )


class TestNormalizeName:
    """Test name normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("  AC/DC  ", "acdc"),
            ("The Beatles!", "the beatles"),
            ("Guns N' Roses", "guns n roses"),
            ("Sigur Rós", "sigur rs"),
            ("multiple   \t spaces", "multiple spaces"),
            ("", ""),
            ("!!!", ""),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        """Test lowercase, punctuation removal and whitespace collapsing."""
        assert normalize_name(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["Beyoncé", "  Mötley   Crüe ", "A$AP Rocky", "100 gecs", "!!!", "Ünïcödé"]
    )
    def test_normalize_is_idempotent_and_never_longer(self, raw: str) -> None:
        """Test normalize(normalize(x)) == normalize(x) and len never grows."""
        once = normalize_name(raw)
        assert normalize_name(once) == once
        assert len(once) <= len(raw)


class TestStringSimilarity:
    """Test edit-distance similarity."""

    def test_levenshtein_distance(self) -> None:
        """Test classic edit distance."""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_equal_after_normalization_is_one(self) -> None:
        """Test names differing only in case/punctuation are identical."""
        assert string_similarity("Abbey Road", "abbey road!") == 1.0

    def test_empty_side_is_zero(self) -> None:
        """Test empty normalized strings score zero."""
        assert string_similarity("", "Abbey Road") == 0.0
        assert string_similarity("???", "Abbey Road") == 0.0

    def test_partial_difference(self) -> None:
        """Test 1 - distance / max length."""
        assert string_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)


class TestAlbumTitleMatching:
    """Test album title reconciliation."""

    def test_edition_suffix_matches(self) -> None:
        """Test a remaster suffix doesn't block the match."""
        assert title_similarity("Abbey Road", "Abbey Road (Remastered)") >= 0.85
        assert album_title_matches("Abbey Road (Remastered)", ["Abbey Road"])

    def test_different_album_does_not_match(self) -> None:
        """Test an unrelated title stays below the threshold."""
        assert not album_title_matches("Let It Be", ["Abbey Road"])

    def test_exact_normalized_match(self) -> None:
        """Test punctuation-only differences match exactly."""
        assert album_title_matches("Help!", ["help"])

    def test_short_saved_title_does_not_match_longer_one(self) -> None:
        """Test a short title isn't matched just because it sits inside a longer one."""
        assert not album_title_matches("Greatest Hits", ["Up"])

    def test_contained_title_is_not_a_match(self) -> None:
        """Test a Lidarr title inside an unrelated saved title stays unmatched."""
        assert not album_title_matches("Love", ["All You Need Is Love"])
        assert not album_title_matches("Help", ["Help Me If You Can"])
        assert title_similarity("Love", "All You Need Is Love") < 0.85

    def test_saved_title_with_edition_suffix(self) -> None:
        """Test the suffix is stripped on the saved side too."""
        assert album_title_matches(
            "Abbey Road", ["Abbey Road (2019 Remaster) [Super Deluxe]"]
        )
        assert album_title_matches("Parklife - 2012 Remaster", ["Parklife"])

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Abbey Road (Remastered 2019) [Super Deluxe]", "Abbey Road"),
            ("Parklife - 2012 Remaster", "Parklife"),
            ("OK Computer (Collector's Edition)", "OK Computer"),
            ("Sgt. Pepper's (Mono)", "Sgt. Pepper's (Mono)"),
            ("(Deluxe Edition)", "(Deluxe Edition)"),
            ("Help!", "Help!"),
        ],
    )
    def test_strip_edition_suffix(self, raw: str, expected: str) -> None:
        """Test only edition qualifiers are removed."""
        assert strip_edition_suffix(raw) == expected

    def test_no_saved_titles(self) -> None:
        """Test nothing matches an empty saved list."""
        assert not album_title_matches("Abbey Road", [])


class TestFindBestMatch:
    """Test tiered artist resolution."""

    def test_exact_wins_regardless_of_order(self) -> None:
        """Test an exact match beats an earlier substring match."""
        revival = CandidateMatch(id="mbid-revival", name="The Beatles Revival Band", score=100)
        beatles = CandidateMatch(id="mbid-beatles", name="The Beatles", score=90)

        decision = _match("the beatles", [revival, beatles])

        assert decision.kind is MatchKind.EXACT
        assert decision.candidate == beatles

    def test_substring_match_either_direction(self) -> None:
        """Test containment of the reference or of the candidate."""
        beatles = CandidateMatch(id="mbid-beatles", name="The Beatles", score=10)
        assert _match("Beatles", [beatles]).kind is MatchKind.PARTIAL

        prince = CandidateMatch(id="mbid-prince", name="Prince", score=10)
        decision = _match("Prince & The Revolution", [prince])
        assert decision.kind is MatchKind.PARTIAL
        assert decision.candidate == prince

    def test_first_substring_candidate_wins(self) -> None:
        """Test input order decides between several partial matches."""
        first = CandidateMatch(id="1", name="Beatles Tribute", score=50)
        second = CandidateMatch(id="2", name="Beatles Revival", score=99)
        assert _match("Beatles", [first, second]).candidate == first

    def test_confidence_fallback_uses_top_candidate(self) -> None:
        """Test the provider score fallback when no name matches."""
        top = CandidateMatch(id="mbid-prince", name="Prince", score=95)
        other = CandidateMatch(id="other", name="Someone Else", score=85)

        decision = _match("Prinz", [top, other])

        assert decision.kind is MatchKind.CONFIDENCE
        assert decision.candidate == top

    def test_score_at_threshold_is_no_match(self) -> None:
        """Test the score must strictly exceed the threshold."""
        top = CandidateMatch(id="x", name="Prince", score=80)
        decision = _match("Prinz", [top])
        assert decision.kind is MatchKind.NONE
        assert decision.candidate is None
        assert not decision.matched

    def test_missing_score_is_no_match(self) -> None:
        """Test candidates without a score never pass the fallback."""
        top = CandidateMatch(id="x", name="Prince", score=None)
        assert _match("Prinz", [top]).kind is MatchKind.NONE

    def test_empty_candidates(self) -> None:
        """Test no candidates means no match."""
        assert _match("Anyone", []).kind is MatchKind.NONE

    def test_punctuation_only_name(self) -> None:
        """Test names that normalize to "" only match exactly (case-insensitive)."""
        same = CandidateMatch(id="mbid-ex", name="!!!", score=50)
        other = CandidateMatch(id="mbid-other", name="Chk Chk Chk", score=50)

        assert _match("!!!", [other, same]).candidate == same
        assert _match("!!!", [other]).kind is MatchKind.NONE
