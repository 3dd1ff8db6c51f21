"""
Tests for harmonic flow suggestions.
"""

from crowdset.models import ScoredTrack, TrackFeatures, TrackStat
from crowdset.ordering import MAX_SUGGESTIONS, harmonic_flow, has_harmonic_anchor, suggest_next_tracks
from crowdset.theory import CompatibilityLabel


def _track(identity, key, crowd=50.0, frequency=1, first_seen=0):
    stat = TrackStat(
        identity=identity,
        name=identity,
        artists=("Artist",),
        frequency=frequency,
        first_seen=first_seen,
        guest_count=10,
        features=TrackFeatures(key=key),
    )
    return ScoredTrack(stat=stat, crowd_match_score=crowd, theme_match_score=50.0)


class TestSuggestions:
    """Test the anchor-plus-three suggestion set."""

    def test_labels_for_8a_anchor(self):
        """8A, 9A, 7A candidates label as perfect, boost and drop; 8B is left out."""
        anchor = _track("anchor", "8A", crowd=99.0)
        candidates = [
            _track("same", "8A", first_seen=1),
            _track("up", "9A", first_seen=2),
            _track("down", "7A", first_seen=3),
            _track("relative", "8B", first_seen=4),
        ]
        suggestions = suggest_next_tracks(anchor, candidates)
        assert [(s.track.identity, s.label) for s in suggestions] == [
            ("anchor", CompatibilityLabel.PERFECT_MATCH),
            ("same", CompatibilityLabel.PERFECT_MATCH),
            ("up", CompatibilityLabel.ENERGY_BOOST),
            ("down", CompatibilityLabel.ENERGY_DROP),
        ]
        assert suggestions[0].is_anchor
        assert not suggestions[1].is_anchor

    def test_best_crowd_match_per_class(self):
        """Within a class the highest crowd match wins."""
        anchor = _track("anchor", "5B")
        candidates = [
            _track("weak", "6B", crowd=20.0, first_seen=1),
            _track("strong", "6B", crowd=80.0, first_seen=2),
        ]
        assert [t.identity for t in harmonic_flow(anchor, candidates)] == ["anchor", "strong"]

    def test_never_backfilled(self):
        """Missing classes are omitted, not filled with incompatible tracks."""
        anchor = _track("anchor", "1A")
        candidates = [
            _track("drop", "12A", first_seen=1),
            _track("far", "6A", crowd=100.0, first_seen=2),
            _track("nokey", None, crowd=100.0, first_seen=3),
        ]
        assert [t.identity for t in harmonic_flow(anchor, candidates)] == ["anchor", "drop"]

    def test_capped_at_four(self):
        """At most the anchor plus one track per class."""
        anchor = _track("anchor", "8A")
        candidates = [
            _track(f"t{i}", key, first_seen=i)
            for i, key in enumerate(["8A", "9A", "7A", "8A", "9A", "7A"])
        ]
        result = harmonic_flow(anchor, candidates)
        assert len(result) == MAX_SUGGESTIONS
        assert len({t.identity for t in result}) == MAX_SUGGESTIONS

    def test_anchor_not_repeated(self):
        """The anchor is never suggested as its own perfect match."""
        anchor = _track("anchor", "8A")
        result = harmonic_flow(anchor, [anchor, _track("other", "8A", first_seen=1)])
        assert [t.identity for t in result] == ["anchor", "other"]

    def test_musical_notation_keys(self):
        """Candidates in musical notation still match."""
        anchor = _track("anchor", "8A")
        result = harmonic_flow(anchor, [_track("em", "Em", first_seen=1)])
        assert [t.identity for t in result] == ["anchor", "em"]


class TestAnchor:
    """Test anchor detection."""

    def test_anchor_needs_key(self):
        """Only anchors with a parseable key engage harmonic flow."""
        assert has_harmonic_anchor(_track("a", "8A"))
        assert not has_harmonic_anchor(_track("a", None))
        assert not has_harmonic_anchor(_track("a", "Z9"))
        assert not has_harmonic_anchor(None)

    def test_keyless_anchor_returns_only_anchor(self):
        """A keyless anchor yields just itself."""
        anchor = _track("a", None)
        assert harmonic_flow(anchor, [_track("b", "8A")]) == [anchor]
