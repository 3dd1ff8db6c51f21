"""
Preference aggregation

Folds the preference records of one event into per-track, per-artist and
per-genre frequency tables.

Counting rules:
- Every guest counts at most once per track, artist and genre, regardless
  of how many times or where (descriptor / recent track) it was listed.
- List position never weights a count.
- Records are folded in (submitted_at, guest_id) order, so first-seen
  order and last-write-wins popularity do not depend on input order.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import structlog

from crowdset.errors import DuplicateRecordError
from crowdset.models import (
    PreferenceRecord,
    TrackDescriptor,
    TrackFeatures,
    TrackStat,
)

logger = structlog.get_logger()


def normalize_text(value: str) -> str:
    """Case-fold and collapse whitespace for identity matching."""
    return " ".join(value.split()).casefold()


def track_identity(track_id: Optional[str], name: str, artist: str) -> str:
    """Canonical identity: the catalog id when known, else name + artist."""
    if track_id:
        return track_id
    return f"{normalize_text(name)}|{normalize_text(artist)}"


@dataclass(frozen=True)
class NameCount:
    """Frequency of an artist or genre name across guests."""
    name: str
    count: int
    first_seen: int


@dataclass(frozen=True)
class AggregationResult:
    """Output of one aggregation pass over an event's records."""
    tracks: Dict[str, TrackStat] = field(default_factory=dict)
    artists: Dict[str, NameCount] = field(default_factory=dict)
    genres: Dict[str, NameCount] = field(default_factory=dict)
    total_guests: int = 0


@dataclass
class _TrackAccumulator:
    identity: str
    name: str
    artists: Tuple[str, ...]
    first_seen: int
    track_id: Optional[str] = None
    album: Optional[str] = None
    popularity: Optional[float] = None
    features: TrackFeatures = field(default_factory=TrackFeatures)
    guests: Set[str] = field(default_factory=set)
    described: bool = False

    def observe(self, descriptor: TrackDescriptor):
        if not self.described:
            # Descriptor spelling wins over free-text references
            self.name = descriptor.name
            self.artists = descriptor.artists or self.artists
            self.described = True
        if descriptor.popularity is not None:
            self.popularity = descriptor.popularity
        if descriptor.album:
            self.album = descriptor.album
        self.features = self.features.merged(descriptor.features)

    def freeze(self, total_guests: int) -> TrackStat:
        return TrackStat(
            identity=self.identity,
            name=self.name,
            artists=self.artists,
            frequency=len(self.guests),
            first_seen=self.first_seen,
            guest_count=total_guests,
            track_id=self.track_id,
            album=self.album,
            popularity=self.popularity,
            features=self.features,
        )


class _NameCounter:
    """Distinct-guest counter keyed by normalized name."""

    def __init__(self):
        self._display: Dict[str, str] = {}
        self._first_seen: Dict[str, int] = {}
        self._guests: Dict[str, Set[str]] = {}

    def add(self, name: str, guest_id: str):
        key = normalize_text(name)
        if not key:
            return
        if key not in self._display:
            self._display[key] = name.strip()
            self._first_seen[key] = len(self._first_seen)
            self._guests[key] = set()
        self._guests[key].add(guest_id)

    def result(self) -> Dict[str, NameCount]:
        return {
            key: NameCount(
                name=self._display[key],
                count=len(self._guests[key]),
                first_seen=self._first_seen[key],
            )
            for key in self._display
        }


def _check_unique(records: Sequence[PreferenceRecord]):
    seen: Set[Tuple[str, str]] = set()
    for record in records:
        if record.key in seen:
            raise DuplicateRecordError(record.event_id, record.guest_id)
        seen.add(record.key)


def _as_utc(moment: datetime) -> datetime:
    """Naive timestamps are read as UTC so mixed records still sort."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _alias_table(records: Iterable[PreferenceRecord]) -> Dict[str, str]:
    """Map name+artist keys to catalog ids so free-text refs can resolve."""
    aliases: Dict[str, str] = {}
    for record in records:
        for descriptor in record.tracks:
            if descriptor.id:
                text_key = track_identity(None, descriptor.name, descriptor.artist)
                aliases.setdefault(text_key, descriptor.id)
    return aliases


def aggregate(records: Sequence[PreferenceRecord]) -> AggregationResult:
    """
    Aggregate guest preference records into frequency tables.

    Args:
        records: Records of one event, at most one per (event_id, guest_id)

    Returns:
        AggregationResult with track stats keyed by identity and artist /
        genre counts keyed by normalized name

    Raises:
        DuplicateRecordError: If two records share (event_id, guest_id)
    """
    _check_unique(records)

    ordered = sorted(records, key=lambda r: (_as_utc(r.submitted_at), r.guest_id))
    aliases = _alias_table(ordered)
    total_guests = len(ordered)

    tracks: Dict[str, _TrackAccumulator] = {}
    artists = _NameCounter()
    genres = _NameCounter()

    def touch(identity: str, name: str, track_artists: Tuple[str, ...],
              track_id: Optional[str]) -> _TrackAccumulator:
        acc = tracks.get(identity)
        if acc is None:
            acc = _TrackAccumulator(
                identity=identity,
                name=name,
                artists=track_artists,
                first_seen=len(tracks),
                track_id=track_id,
            )
            tracks[identity] = acc
        return acc

    for record in ordered:
        for artist in record.artists:
            artists.add(artist, record.guest_id)
        for genre in record.genres:
            genres.add(genre, record.guest_id)

        for descriptor in record.tracks:
            text_key = track_identity(None, descriptor.name, descriptor.artist)
            track_id = descriptor.id or aliases.get(text_key)
            acc = touch(track_id or text_key, descriptor.name, descriptor.artists, track_id)
            acc.guests.add(record.guest_id)
            acc.observe(descriptor)

        for ref in record.recent_tracks:
            text_key = track_identity(None, ref.name, ref.artist)
            resolved = aliases.get(text_key)
            artists_tuple = (ref.artist,) if ref.artist else ()
            acc = touch(resolved or text_key, ref.name, artists_tuple, resolved)
            acc.guests.add(record.guest_id)

    result = AggregationResult(
        tracks={identity: acc.freeze(total_guests) for identity, acc in tracks.items()},
        artists=artists.result(),
        genres=genres.result(),
        total_guests=total_guests,
    )

    logger.debug(
        "Aggregated preferences",
        guest_count=total_guests,
        track_count=len(result.tracks),
        artist_count=len(result.artists),
        genre_count=len(result.genres),
    )
    return result


def top_counts(counts: Dict[str, NameCount], limit: int) -> List[NameCount]:
    """Highest counts first, ties by first-seen order."""
    ranked = sorted(counts.values(), key=lambda c: (-c.count, c.first_seen))
    return ranked[:limit]
