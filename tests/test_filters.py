"""
Tests for the smart filter pipeline and presets.
"""

import pytest

from crowdset.errors import ConfigError
from crowdset.filters import (
    QUICK_PRESETS,
    FilterConfig,
    active_filter_count,
    apply_filters,
    cooldown_track_count,
    filter_summary,
    get_preset,
)
from crowdset.models import QueueEntry, QueueSource, ScoredTrack, TrackFeatures, TrackStat


def _track(identity, artists=("Artist",), crowd=50.0, first_seen=0, **features):
    stat = TrackStat(
        identity=identity,
        name=identity,
        artists=tuple(artists),
        frequency=1,
        first_seen=first_seen,
        guest_count=10,
        features=TrackFeatures(**features),
    )
    return ScoredTrack(stat=stat, crowd_match_score=crowd, theme_match_score=50.0)


def _queue(*artist_lists):
    return [
        QueueEntry(track=_track(f"q{i}", artists=artists), source=QueueSource.AI, order=i)
        for i, artists in enumerate(artist_lists)
    ]


def _ids(tracks):
    return [t.identity for t in tracks]


class TestFilterConfig:
    """Test configuration validation."""

    def test_defaults_are_off(self):
        """A default config has no active filters."""
        config = FilterConfig()
        assert active_filter_count(config) == 0
        assert filter_summary(config) == []

    def test_inverted_range_rejected(self):
        """min > max on a range raises ConfigError."""
        with pytest.raises(ConfigError):
            FilterConfig(energy_range=(80.0, 20.0))

    def test_out_of_bounds_range_rejected(self):
        """Ranges must stay within 0-100."""
        with pytest.raises(ConfigError):
            FilterConfig(valence_range=(-10.0, 50.0))

    def test_inverted_era_rejected(self):
        """An era whose start is after its end raises ConfigError."""
        with pytest.raises(ConfigError):
            FilterConfig(era_filter_enabled=True, era_min_decade=2000, era_max_decade=1980)

    def test_config_error_is_value_error(self):
        """ConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            FilterConfig(danceability_range=(60.0, 40.0))


class TestFilterIdentity:
    """Test that a disabled pipeline changes nothing."""

    def test_all_disabled_returns_input(self):
        """Every option off returns the tracks unchanged in order."""
        tracks = [
            _track("c", explicit=True, energy=10.0, release_year=1970),
            _track("a", instrumentalness=0.9),
            _track("b", key="8A"),
        ]
        assert apply_filters(tracks, FilterConfig(), []) == tracks


class TestExplicitStage:
    """Test explicit content filtering."""

    def test_explicit_dropped(self):
        """Explicit tracks are removed; unknown counts as clean."""
        tracks = [_track("clean", explicit=False), _track("dirty", explicit=True), _track("unknown")]
        result = apply_filters(tracks, FilterConfig(no_explicit=True))
        assert _ids(result) == ["clean", "unknown"]


class TestArtistCooldown:
    """Test artist repetition prevention."""

    def test_cooldown_window(self):
        """Cooldown minutes convert to a track count, rounding up."""
        assert cooldown_track_count(30, 3) == 10
        assert cooldown_track_count(10, 3) == 4
        assert cooldown_track_count(0, 3) == 0

    def test_recent_artist_dropped(self):
        """Tracks by an artist in the window are removed."""
        queue = _queue(("Old Artist",), ("Kygo",), ("Avicii",))
        tracks = [_track("k", artists=("KYGO",)), _track("o", artists=("Old Artist",)), _track("x")]
        config = FilterConfig(prevent_artist_repetition=True, artist_cooldown_minutes=6)
        # 6 minutes / 3 per track = last 2 entries
        assert _ids(apply_filters(tracks, config, queue)) == ["o", "x"]

    def test_any_shared_artist_counts(self):
        """A featured artist in the window is enough to drop a track."""
        queue = _queue(("Avicii", "Aloe Blacc"))
        tracks = [_track("feat", artists=("David Guetta", "aloe blacc"))]
        config = FilterConfig(prevent_artist_repetition=True, artist_cooldown_minutes=30)
        assert apply_filters(tracks, config, queue) == []

    def test_disabled_with_empty_queue(self):
        """With an empty queue nothing is dropped."""
        tracks = [_track("a")]
        config = FilterConfig(prevent_artist_repetition=True)
        assert apply_filters(tracks, config, []) == tracks

    def test_average_track_length_configurable(self):
        """Longer average tracks shrink the window."""
        queue = _queue(("Kygo",), ("Avicii",))
        tracks = [_track("k", artists=("Kygo",))]
        config = FilterConfig(prevent_artist_repetition=True, artist_cooldown_minutes=6)
        assert apply_filters(tracks, config, queue, average_track_minutes=6) == tracks


class TestEraStage:
    """Test decade bounds."""

    def test_decades_inclusive(self):
        """Tracks from the bounding decades are kept."""
        tracks = [
            _track("70s", release_year=1979),
            _track("80s", release_year=1980),
            _track("90s", release_year=1999),
            _track("00s", release_year=2000),
        ]
        config = FilterConfig(era_filter_enabled=True, era_min_decade=1980, era_max_decade=1990)
        assert _ids(apply_filters(tracks, config)) == ["80s", "90s"]

    def test_missing_year_counts_as_reference_year(self):
        """Unknown release years fall back to the reference year."""
        tracks = [_track("unknown")]
        config = FilterConfig(era_filter_enabled=True, era_min_decade=1980, era_max_decade=1990)
        assert apply_filters(tracks, config, reference_year=2024) == []
        assert apply_filters(tracks, config, reference_year=1985) == tracks


class TestRangeStages:
    """Test energy, danceability and valence ranges."""

    def test_energy_range(self):
        """Only tracks within the energy range survive."""
        tracks = [_track("low", energy=20.0), _track("mid", energy=60.0), _track("high", energy=90.0)]
        config = FilterConfig(energy_range=(50.0, 80.0))
        assert _ids(apply_filters(tracks, config)) == ["mid"]

    def test_missing_metadata_uses_default(self):
        """A track without danceability is treated as 50."""
        tracks = [_track("unknown")]
        assert apply_filters(tracks, FilterConfig(danceability_range=(40.0, 60.0))) == tracks
        assert apply_filters(tracks, FilterConfig(danceability_range=(70.0, 100.0))) == []

    def test_valence_range(self):
        """Valence bounds are inclusive."""
        tracks = [_track("sad", valence=20.0), _track("happy", valence=80.0)]
        config = FilterConfig(valence_range=(0.0, 20.0))
        assert _ids(apply_filters(tracks, config)) == ["sad"]


class TestVocalFocus:
    """Test the vocal focus resort."""

    def test_sorted_by_instrumentalness(self):
        """Vocal-forward tracks come first; ties keep input order."""
        tracks = [
            _track("inst", instrumentalness=0.9),
            _track("vocal1", instrumentalness=0.1),
            _track("unknown"),
            _track("vocal2", instrumentalness=0.1),
        ]
        result = apply_filters(tracks, FilterConfig(vocal_focus=True))
        assert _ids(result) == ["vocal1", "vocal2", "unknown", "inst"]

    def test_harmonic_flow_overrides_vocal_focus(self):
        """With an anchor, harmonic flow replaces the vocal sort."""
        anchor = _track("anchor", key="8A", crowd=90.0)
        tracks = [_track("boost", key="9A", instrumentalness=0.9), _track("vocal", key="1B", instrumentalness=0.0)]
        config = FilterConfig(vocal_focus=True, harmonic_flow=True)
        assert _ids(apply_filters(tracks, config, anchor=anchor)) == ["anchor", "boost"]

    def test_malformed_anchor_key_falls_back(self):
        """An anchor without a usable key leaves vocal focus in charge."""
        anchor = _track("anchor", key="??")
        tracks = [_track("inst", instrumentalness=0.9), _track("vocal", instrumentalness=0.0)]
        config = FilterConfig(vocal_focus=True, harmonic_flow=True)
        assert _ids(apply_filters(tracks, config, anchor=anchor)) == ["vocal", "inst"]


class TestStageOrder:
    """Test that combined filters run in their declared order."""

    def test_filters_before_harmonic_flow(self):
        """Harmonic candidates are drawn from the filtered list."""
        anchor = _track("anchor", key="8A")
        tracks = [
            _track("explicit-perfect", key="8A", explicit=True, crowd=99.0),
            _track("clean-perfect", key="8A", crowd=10.0, first_seen=1),
        ]
        config = FilterConfig(no_explicit=True, harmonic_flow=True)
        assert _ids(apply_filters(tracks, config, anchor=anchor)) == ["anchor", "clean-perfect"]


class TestPresets:
    """Test quick presets and summaries."""

    def test_presets_valid(self):
        """Every preset builds a valid config with something active."""
        assert [p.id for p in QUICK_PRESETS] == [
            "family-friendly",
            "high-energy-throwback",
            "vocal-showcase",
            "peak-hour",
            "cool-down",
        ]
        for preset in QUICK_PRESETS:
            assert active_filter_count(preset.config) > 0

    def test_get_preset(self):
        """Presets are looked up by id."""
        assert get_preset("family-friendly").config.no_explicit is True
        assert get_preset("unknown") is None

    def test_summary_lines(self):
        """Summaries describe active knobs in order."""
        summary = filter_summary(get_preset("peak-hour").config)
        assert summary == [
            "Artist cooldown: 15 min",
            "Energy: 80%-100%",
            "Danceability: 70%-100%",
        ]

    def test_active_count(self):
        """Each active knob counts once."""
        config = FilterConfig(no_explicit=True, energy_range=(10.0, 90.0), harmonic_flow=True)
        assert active_filter_count(config) == 3
