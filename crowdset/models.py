"""
Core data model for crowd preference aggregation and set curation.

PreferenceRecord  - one guest's normalized submission for one event
TrackStat         - per-track aggregate derived from all records of an event
ScoredTrack       - TrackStat plus crowd-match and theme-match percentages
QueueEntry        - a track placed into the live DJ set

TrackStat and ScoredTrack are derived values, rebuilt on every aggregation
pass. Missing audio metadata falls back to the DEFAULT_* constants below.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

# Documented fallbacks for absent track metadata
DEFAULT_POPULARITY = 0.0
DEFAULT_ENERGY = 50.0
DEFAULT_DANCEABILITY = 50.0
DEFAULT_VALENCE = 50.0
DEFAULT_INSTRUMENTALNESS = 0.5


class PreferenceSource(str, Enum):
    """Where a guest's preferences came from."""
    MANUAL = "manual"
    SPOTIFY = "spotify"


class QueueSource(str, Enum):
    """Which list a live queue entry was taken from."""
    AI = "ai"
    SPOTIFY = "spotify"
    HIDDEN_ANTHEMS = "hidden-anthems"
    TIP_REQUEST = "tip-request"


@dataclass(frozen=True)
class TrackFeatures:
    """Optional per-track metadata. None means unknown."""
    explicit: Optional[bool] = None
    release_year: Optional[int] = None
    key: Optional[str] = None  # Camelot notation, e.g. "8A"
    energy: Optional[float] = None  # 0-100
    danceability: Optional[float] = None  # 0-100
    valence: Optional[float] = None  # 0-100
    instrumentalness: Optional[float] = None  # 0-1

    def merged(self, newer: "TrackFeatures") -> "TrackFeatures":
        """Overlay the known fields of a newer observation (last write wins)."""
        updates = {
            f.name: getattr(newer, f.name)
            for f in fields(newer)
            if getattr(newer, f.name) is not None
        }
        return replace(self, **updates) if updates else self


@dataclass(frozen=True)
class TrackDescriptor:
    """A full track description supplied with a guest's submission."""
    name: str
    artists: Tuple[str, ...] = ()
    id: Optional[str] = None
    album: Optional[str] = None
    popularity: Optional[float] = None  # 0-100
    features: TrackFeatures = field(default_factory=TrackFeatures)

    @property
    def artist(self) -> str:
        return self.artists[0] if self.artists else ""


@dataclass(frozen=True)
class RecentTrackRef:
    """A recently played track named only by free text."""
    name: str
    artist: str = ""


@dataclass(frozen=True)
class PreferenceRecord:
    """One guest's submission for one event. Unique per (event_id, guest_id)."""
    event_id: str
    guest_id: str
    artists: Tuple[str, ...] = ()
    genres: Tuple[str, ...] = ()
    recent_tracks: Tuple[RecentTrackRef, ...] = ()
    tracks: Tuple[TrackDescriptor, ...] = ()
    source: PreferenceSource = PreferenceSource.MANUAL
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.event_id, self.guest_id)


@dataclass(frozen=True)
class TrackStat:
    """Aggregated statistics for one track identity within one event."""
    identity: str
    name: str
    artists: Tuple[str, ...]
    frequency: int  # distinct guests whose data referenced the track
    first_seen: int  # fold order, only used to break ties
    guest_count: int  # size of the guest population the stat was drawn from
    track_id: Optional[str] = None
    album: Optional[str] = None
    popularity: Optional[float] = None
    features: TrackFeatures = field(default_factory=TrackFeatures)

    @property
    def artist(self) -> str:
        return self.artists[0] if self.artists else ""


@dataclass(frozen=True)
class ScoredTrack:
    """
    A TrackStat with its two percentage scores.

    Scores are kept unrounded; use the display_* properties for presentation.
    rank_change is None for tracks that are new to a ranking.
    """
    stat: TrackStat
    crowd_match_score: float
    theme_match_score: float
    rank_change: Optional[int] = None

    @property
    def identity(self) -> str:
        return self.stat.identity

    @property
    def track_id(self) -> Optional[str]:
        return self.stat.track_id

    @property
    def name(self) -> str:
        return self.stat.name

    @property
    def artists(self) -> Tuple[str, ...]:
        return self.stat.artists

    @property
    def artist(self) -> str:
        return self.stat.artist

    @property
    def frequency(self) -> int:
        return self.stat.frequency

    @property
    def first_seen(self) -> int:
        return self.stat.first_seen

    @property
    def guest_count(self) -> int:
        return self.stat.guest_count

    @property
    def popularity(self) -> float:
        if self.stat.popularity is None:
            return DEFAULT_POPULARITY
        return self.stat.popularity

    @property
    def key(self) -> Optional[str]:
        return self.stat.features.key

    @property
    def explicit(self) -> bool:
        return bool(self.stat.features.explicit)

    @property
    def release_year(self) -> Optional[int]:
        return self.stat.features.release_year

    @property
    def energy(self) -> float:
        return _or_default(self.stat.features.energy, DEFAULT_ENERGY)

    @property
    def danceability(self) -> float:
        return _or_default(self.stat.features.danceability, DEFAULT_DANCEABILITY)

    @property
    def valence(self) -> float:
        return _or_default(self.stat.features.valence, DEFAULT_VALENCE)

    @property
    def instrumentalness(self) -> float:
        return _or_default(self.stat.features.instrumentalness, DEFAULT_INSTRUMENTALNESS)

    @property
    def display_crowd_match(self) -> int:
        return round(self.crowd_match_score)

    @property
    def display_theme_match(self) -> int:
        return round(self.theme_match_score)


@dataclass(frozen=True)
class QueueEntry:
    """A track in the live DJ set. order is the insertion counter."""
    track: ScoredTrack
    source: QueueSource
    order: int

    @property
    def identity(self) -> str:
        return self.track.identity

    @property
    def artists(self) -> Tuple[str, ...]:
        return self.track.artists


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value
