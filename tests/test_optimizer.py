"""
Tests for transition scoring and set order suggestion.
"""

import pytest

from crowdset.models import ScoredTrack, TrackFeatures, TrackStat
from crowdset.ordering import score_transition, suggest_set_order


def _track(identity, key=None, energy=None, crowd=50.0, danceability=None):
    stat = TrackStat(
        identity=identity,
        name=identity,
        artists=("Artist",),
        frequency=1,
        first_seen=0,
        guest_count=1,
        features=TrackFeatures(key=key, energy=energy, danceability=danceability),
    )
    return ScoredTrack(stat=stat, crowd_match_score=crowd, theme_match_score=50.0)


class TestTransitionScore:
    """Test transition scoring factors."""

    def test_compatible_beats_incompatible(self):
        """A boost transition outscores an unrelated key."""
        start = _track("s", "8A", energy=60.0)
        assert score_transition(start, _track("b", "9A", energy=65.0)) > score_transition(
            start, _track("x", "2B", energy=65.0)
        )

    def test_unknown_key_is_neutral(self):
        """Unknown keys sit between compatible and incompatible."""
        start = _track("s", "8A")
        unknown = score_transition(start, _track("u"))
        assert score_transition(start, _track("x", "2B")) < unknown < score_transition(start, _track("p", "8A"))

    def test_score_bounded(self):
        """Transition scores stay within 0-1."""
        best = score_transition(
            _track("a", "8A", energy=60.0, danceability=70.0),
            _track("b", "8A", energy=65.0, danceability=70.0, crowd=100.0),
        )
        assert 0.0 <= best <= 1.0
        assert best == pytest.approx(1.0)


class TestSetOrder:
    """Test greedy set ordering."""

    def test_single_track(self):
        """Trivial inputs come back as is."""
        assert suggest_set_order([]) == []
        assert suggest_set_order([_track("a", "8A")]) == ["a"]

    def test_walks_the_wheel(self):
        """From 8A the order climbs one step at a time."""
        tracks = [_track("10A", "10A", energy=60.0), _track("8A", "8A", energy=60.0), _track("9A", "9A", energy=60.0)]
        assert suggest_set_order(tracks, start_identity="8A") == ["8A", "9A", "10A"]

    def test_every_track_once(self):
        """The suggestion is a permutation of the input."""
        tracks = [_track(str(i), f"{i % 12 + 1}B", energy=float(i * 10)) for i in range(6)]
        order = suggest_set_order(tracks)
        assert sorted(order) == sorted(t.identity for t in tracks)
