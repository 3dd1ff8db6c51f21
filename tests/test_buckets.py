"""
Tests for favorites / hidden anthems classification.
"""

from crowdset.models import ScoredTrack, TrackStat
from crowdset.scoring import classify, rank_by_crowd


def _scored(identity, crowd, theme=0.0, popularity=50.0, frequency=1, first_seen=0, guest_count=10):
    stat = TrackStat(
        identity=identity,
        name=identity,
        artists=("Artist",),
        frequency=frequency,
        first_seen=first_seen,
        guest_count=guest_count,
        popularity=popularity,
    )
    return ScoredTrack(stat=stat, crowd_match_score=crowd, theme_match_score=theme)


class TestFavorites:
    """Test crowd-favorite ranking."""

    def test_sorted_by_crowd_match(self):
        """Highest crowd match first."""
        tracks = [_scored("a", 40), _scored("b", 80, first_seen=1), _scored("c", 60, first_seen=2)]
        assert [t.identity for t in classify(tracks).favorites] == ["b", "c", "a"]

    def test_ties_break_by_frequency_then_first_seen(self):
        """Equal scores rank by frequency, then first-seen order."""
        tracks = [
            _scored("late", 50, frequency=2, first_seen=2),
            _scored("more", 50, frequency=3, first_seen=3),
            _scored("early", 50, frequency=2, first_seen=1),
        ]
        assert [t.identity for t in rank_by_crowd(tracks)] == ["more", "early", "late"]

    def test_top_k_limit(self):
        """Only the top-K tracks are favorites."""
        tracks = [_scored(str(i), 100 - i, first_seen=i) for i in range(20)]
        favorites = classify(tracks, favorites_limit=15).favorites
        assert len(favorites) == 15
        assert favorites[-1].identity == "14"


class TestHiddenAnthems:
    """Test hidden anthem selection."""

    def test_theme_94_popularity_35_is_anthem(self):
        """High theme and low popularity outside the favorites qualifies."""
        tracks = [_scored("fav", 90, first_seen=0), _scored("gem", 10, theme=94, popularity=35, first_seen=1)]
        buckets = classify(tracks, favorites_limit=1)
        assert [t.identity for t in buckets.hidden_anthems] == ["gem"]

    def test_theme_94_popularity_70_is_not(self):
        """The same track with high popularity does not qualify."""
        tracks = [_scored("fav", 90, first_seen=0), _scored("gem", 10, theme=94, popularity=70, first_seen=1)]
        buckets = classify(tracks, favorites_limit=1)
        assert buckets.hidden_anthems == []

    def test_thresholds_inclusive(self):
        """Theme 85 and popularity 55 are on the qualifying side."""
        tracks = [_scored("fav", 90), _scored("edge", 10, theme=85, popularity=55, first_seen=1)]
        assert [t.identity for t in classify(tracks, favorites_limit=1).hidden_anthems] == ["edge"]

    def test_sorted_by_theme(self):
        """Hidden anthems rank by theme match."""
        tracks = [
            _scored("fav", 90),
            _scored("a", 5, theme=88, popularity=20, first_seen=1),
            _scored("b", 5, theme=97, popularity=20, first_seen=2),
        ]
        buckets = classify(tracks, favorites_limit=1)
        assert [t.identity for t in buckets.hidden_anthems] == ["b", "a"]

    def test_soft_removed_anthems_hidden(self):
        """Anthems already queued stay out of the list."""
        tracks = [_scored("fav", 90), _scored("gem", 10, theme=94, popularity=35, first_seen=1)]
        buckets = classify(tracks, favorites_limit=1, removed_anthems=frozenset({"gem"}))
        assert buckets.hidden_anthems == []


class TestBucketInvariants:
    """Test exclusivity and conservation."""

    def test_exclusive(self):
        """No track is in both buckets."""
        tracks = [
            _scored(str(i), 100 - i * 5, theme=90, popularity=30, first_seen=i)
            for i in range(10)
        ]
        buckets = classify(tracks, favorites_limit=4)
        favorite_ids = {t.identity for t in buckets.favorites}
        anthem_ids = {t.identity for t in buckets.hidden_anthems}
        assert favorite_ids.isdisjoint(anthem_ids)
        assert len(favorite_ids) == 4
        assert len(anthem_ids) == 6

    def test_conservation(self):
        """Tracks nobody referenced never appear."""
        tracks = [
            _scored("seen", 50, theme=90, popularity=10),
            _scored("ghost", 99, theme=99, popularity=10, frequency=0, first_seen=1),
        ]
        buckets = classify(tracks)
        ids = {t.identity for t in buckets.favorites + buckets.hidden_anthems}
        assert ids == {"seen"}

    def test_empty_crowd(self):
        """Tracks scored against no guests are in neither bucket."""
        tracks = [_scored("a", 0, theme=90, popularity=10, guest_count=0)]
        buckets = classify(tracks)
        assert buckets.favorites == []
        assert buckets.hidden_anthems == []
