"""
Normalization of raw guest preference payloads.

Request handlers receive preference submissions in whatever shape the
client produced: lists, JSON-encoded strings, comma-separated strings,
artist objects or plain names, 0-1 audioFeatures or 0-100 top-level
features. Everything is coerced here, once, into the strict
PreferenceRecord shape so that the aggregation and scoring code never has
to inspect raw types.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from crowdset.models import (
    PreferenceRecord,
    PreferenceSource,
    RecentTrackRef,
    TrackDescriptor,
    TrackFeatures,
)
from crowdset.theory.camelot import camelot_from_audio, get_camelot_from_key

logger = structlog.get_logger()

_YEAR_PATTERN = re.compile(r"^(\d{4})")


def _decode_list(value: Any) -> Any:
    """Accept a list, a JSON-encoded list, or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            return json.loads(text)
        return [part.strip() for part in text.split(",") if part.strip()]
    if isinstance(value, (tuple, set)):
        return list(value)
    return value


def _name_of(value: Any) -> Optional[str]:
    """Extract a display name from a string or a {"name": ...} object."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("name")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _percent(value: Optional[float], fraction: bool = False) -> Optional[float]:
    """
    Clamp a feature to the 0-100 scale.

    The scale comes from where the value was sent, never from its size:
    audioFeatures values are 0-1 fractions and get multiplied by 100, while
    top-level fields are already 0-100, so an energy of 1 stays 1.
    """
    if value is None:
        return None
    value = float(value)
    if fraction:
        value = value * 100.0
    return min(max(value, 0.0), 100.0)


class RawTrack(BaseModel):
    """A track descriptor as sent by the client."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "title", "trackName"))
    artists: List[str] = Field(default_factory=list)
    artist: Optional[str] = Field(default=None, validation_alias=AliasChoices("artist", "artistName"))
    album: Optional[str] = None
    popularity: Optional[float] = None
    explicit: Optional[bool] = None
    release_year: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("release_year", "releaseYear")
    )
    release_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("release_date", "releaseDate")
    )
    key: Optional[Any] = None
    mode: Optional[int] = None
    camelot_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("camelot_key", "camelotKey", "camelot")
    )
    energy: Optional[float] = None
    danceability: Optional[float] = None
    valence: Optional[float] = None
    instrumentalness: Optional[float] = None
    audio_features: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("audio_features", "audioFeatures")
    )

    @field_validator("artists", mode="before")
    @classmethod
    def _coerce_artists(cls, value: Any) -> List[str]:
        names = [_name_of(item) for item in _decode_list(value)]
        return [name for name in names if name]

    @field_validator("album", mode="before")
    @classmethod
    def _coerce_album(cls, value: Any) -> Optional[str]:
        return _name_of(value)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def to_descriptor(self) -> Optional[TrackDescriptor]:
        """Build a TrackDescriptor, or None when the track has no name."""
        if not self.name:
            return None

        artists = tuple(self.artists)
        if not artists and self.artist:
            artists = tuple(part.strip() for part in self.artist.split(",") if part.strip())

        return TrackDescriptor(
            name=self.name.strip(),
            artists=artists,
            id=self.id,
            album=self.album,
            popularity=None if self.popularity is None else min(max(self.popularity, 0.0), 100.0),
            features=self._features(),
        )

    def _features(self) -> TrackFeatures:
        audio = self.audio_features or {}

        def percent(name: str) -> Optional[float]:
            value = getattr(self, name)
            if value is not None:
                return _percent(value)
            return _percent(audio.get(name), fraction=True)

        def pick(name: str) -> Any:
            value = getattr(self, name)
            return audio.get(name) if value is None else value

        return TrackFeatures(
            explicit=self.explicit,
            release_year=self._release_year(),
            key=self._camelot_key(audio),
            energy=percent("energy"),
            danceability=percent("danceability"),
            valence=percent("valence"),
            instrumentalness=_unit(pick("instrumentalness")),
        )

    def _release_year(self) -> Optional[int]:
        if self.release_year is not None:
            return self.release_year
        if self.release_date:
            match = _YEAR_PATTERN.match(self.release_date.strip())
            if match:
                return int(match.group(1))
        return None

    def _camelot_key(self, audio: Dict[str, Any]) -> Optional[str]:
        if self.camelot_key:
            return get_camelot_from_key(self.camelot_key)
        if isinstance(self.key, str):
            return get_camelot_from_key(self.key)
        pitch_class = self.key if isinstance(self.key, int) else audio.get("key")
        mode = self.mode if self.mode is not None else audio.get("mode")
        if isinstance(pitch_class, int) and isinstance(mode, int):
            return camelot_from_audio(pitch_class, mode)
        return None


class RawRecentTrack(BaseModel):
    """A recently played track reference: a bare name or {name, artist}."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(validation_alias=AliasChoices("name", "title", "trackName"))
    artist: str = Field(default="", validation_alias=AliasChoices("artist", "artistName", "artists"))

    @field_validator("artist", mode="before")
    @classmethod
    def _coerce_artist(cls, value: Any) -> str:
        if isinstance(value, list):
            value = value[0] if value else ""
        return _name_of(value) or ""


class RawPreferencePayload(BaseModel):
    """A guest preference submission as received by a request handler."""

    model_config = ConfigDict(extra="ignore")

    guest_id: str = Field(min_length=1, validation_alias=AliasChoices("guest_id", "guestId", "userId"))
    artists: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    recent_tracks: List[RawRecentTrack] = Field(
        default_factory=list, validation_alias=AliasChoices("recent_tracks", "recentTracks")
    )
    tracks: List[RawTrack] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tracks", "tracksData", "tracks_data"),
    )
    source: PreferenceSource = PreferenceSource.MANUAL
    spotify_analyzed: bool = Field(
        default=False, validation_alias=AliasChoices("spotify_analyzed", "spotifyAnalyzed")
    )
    submitted_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("submitted_at", "submittedAt")
    )

    @field_validator("guest_id", mode="before")
    @classmethod
    def _coerce_guest_id(cls, value: Any) -> Any:
        return value if value is None else str(value).strip()

    @field_validator("artists", "genres", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> List[str]:
        names = [_name_of(item) for item in _decode_list(value)]
        return [name for name in names if name]

    @field_validator("recent_tracks", mode="before")
    @classmethod
    def _coerce_recent(cls, value: Any) -> List[Any]:
        items = _decode_list(value)
        return [{"name": item} if isinstance(item, str) else item for item in items]

    @field_validator("tracks", mode="before")
    @classmethod
    def _coerce_tracks(cls, value: Any) -> List[Any]:
        return _decode_list(value)

    @field_validator("source", mode="before")
    @classmethod
    def _coerce_source(cls, value: Any) -> Any:
        if value is None or value == "":
            return PreferenceSource.MANUAL
        return str(value).strip().lower()

    def to_record(self, event_id: str) -> PreferenceRecord:
        source = PreferenceSource.SPOTIFY if self.spotify_analyzed else self.source
        submitted_at = self.submitted_at or datetime.now(timezone.utc)
        if submitted_at.tzinfo is None:
            submitted_at = submitted_at.replace(tzinfo=timezone.utc)

        descriptors = [track.to_descriptor() for track in self.tracks]
        recent = [
            RecentTrackRef(name=ref.name.strip(), artist=ref.artist.strip())
            for ref in self.recent_tracks
            if ref.name.strip()
        ]

        return PreferenceRecord(
            event_id=event_id,
            guest_id=self.guest_id,
            artists=tuple(self.artists),
            genres=tuple(self.genres),
            recent_tracks=tuple(recent),
            tracks=tuple(d for d in descriptors if d is not None),
            source=source,
            submitted_at=submitted_at,
        )


def parse_preference_record(payload: Dict[str, Any], event_id: str) -> PreferenceRecord:
    """
    Normalize a raw preference payload into a PreferenceRecord.

    Args:
        payload: Loosely-typed submission body
        event_id: Event the submission belongs to

    Returns:
        Strict PreferenceRecord

    Raises:
        pydantic.ValidationError: If the payload cannot be normalized
            (e.g. missing guest id, malformed JSON list)
    """
    record = RawPreferencePayload.model_validate(payload).to_record(event_id)

    logger.debug(
        "Parsed preference record",
        event_id=event_id,
        guest_id=record.guest_id,
        source=record.source.value,
        track_count=len(record.tracks),
        artist_count=len(record.artists),
    )
    return record


def _unit(value: Optional[float]) -> Optional[float]:
    """Clamp instrumentalness to 0-1, scaling down 0-100 inputs."""
    if value is None:
        return None
    value = float(value)
    if value > 1.0:
        value = value / 100.0
    return min(max(value, 0.0), 1.0)
