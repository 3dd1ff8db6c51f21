"""
Smart filter pipeline

Stages run in a fixed order so combined filters behave predictably:

| # | Stage                    | Kind   | No-op when                       |
|---|--------------------------|--------|----------------------------------|
| 1 | Explicit content         | drop   | no_explicit is False             |
| 2 | Artist cooldown          | drop   | repetition prevention is off     |
| 3 | Era / decade bounds      | drop   | era filter not enabled           |
| 4 | Energy / dance / valence | drop   | range is the full (0, 100)       |
| 5 | Vocal focus              | resort | disabled, or harmonic anchor set |

With harmonic flow enabled and an anchor with a usable key, the filtered
list is replaced by the anchor's harmonic suggestion set instead of being
vocal-sorted. Each stage is a pure function of the track list and one
config concern.
"""

import math
from datetime import date
from typing import List, Optional, Sequence, Tuple

import structlog

from crowdset.filters.config import FilterConfig, is_full_range
from crowdset.models import QueueEntry, ScoredTrack
from crowdset.ordering.harmonic_flow import harmonic_flow, has_harmonic_anchor

logger = structlog.get_logger()

DEFAULT_AVERAGE_TRACK_MINUTES = 3.0


def exclude_explicit(tracks: Sequence[ScoredTrack], enabled: bool) -> List[ScoredTrack]:
    """Stage 1: drop tracks flagged explicit."""
    if not enabled:
        return list(tracks)
    return [t for t in tracks if not t.explicit]


def cooldown_track_count(cooldown_minutes: float, average_track_minutes: float) -> int:
    """How many queue entries back a cooldown in minutes reaches."""
    if cooldown_minutes <= 0 or average_track_minutes <= 0:
        return 0
    return math.ceil(cooldown_minutes / average_track_minutes)


def exclude_recent_artists(
    tracks: Sequence[ScoredTrack],
    recent_queue: Sequence[QueueEntry],
    enabled: bool,
    cooldown_minutes: float,
    average_track_minutes: float = DEFAULT_AVERAGE_TRACK_MINUTES,
) -> List[ScoredTrack]:
    """
    Stage 2: drop tracks whose artist played within the cooldown window.

    Any shared artist counts; names compare case-insensitively.
    """
    if not enabled:
        return list(tracks)

    window = cooldown_track_count(cooldown_minutes, average_track_minutes)
    if window == 0 or not recent_queue:
        return list(tracks)

    recent_artists = {
        artist.strip().casefold()
        for entry in recent_queue[-window:]
        for artist in entry.artists
        if artist.strip()
    }
    return [
        t for t in tracks
        if not any(a.strip().casefold() in recent_artists for a in t.artists)
    ]


def decade_of(year: int) -> int:
    return (year // 10) * 10


def restrict_era(
    tracks: Sequence[ScoredTrack],
    enabled: bool,
    min_decade: int,
    max_decade: int,
    reference_year: Optional[int] = None,
) -> List[ScoredTrack]:
    """
    Stage 3: keep tracks released within [min_decade, max_decade].

    Tracks without a release year count as released in reference_year
    (the current year by default).
    """
    if not enabled:
        return list(tracks)

    fallback_year = reference_year if reference_year is not None else date.today().year
    kept = []
    for track in tracks:
        year = track.release_year if track.release_year is not None else fallback_year
        if decade_of(min_decade) <= decade_of(year) <= decade_of(max_decade):
            kept.append(track)
    return kept


def restrict_range(
    tracks: Sequence[ScoredTrack],
    attribute: str,
    bounds: Tuple[float, float],
) -> List[ScoredTrack]:
    """Stage 4: keep tracks whose attribute (0-100) lies within bounds."""
    if is_full_range(bounds):
        return list(tracks)
    low, high = bounds
    return [t for t in tracks if low <= getattr(t, attribute) <= high]


def vocal_focus_sort(tracks: Sequence[ScoredTrack], enabled: bool) -> List[ScoredTrack]:
    """Stage 5: stable resort, most vocal-forward (lowest instrumentalness) first."""
    if not enabled:
        return list(tracks)
    return sorted(tracks, key=lambda t: t.instrumentalness)


def apply_filters(
    tracks: Sequence[ScoredTrack],
    config: FilterConfig,
    recent_queue: Sequence[QueueEntry] = (),
    anchor: Optional[ScoredTrack] = None,
    average_track_minutes: float = DEFAULT_AVERAGE_TRACK_MINUTES,
    reference_year: Optional[int] = None,
) -> List[ScoredTrack]:
    """
    Run the smart filter pipeline over a candidate list.

    Args:
        tracks: Candidates, in the caller's order
        config: Filter knobs
        recent_queue: Live queue, oldest first, for the artist cooldown
        anchor: Track selected as harmonic anchor, if any
        average_track_minutes: Minutes per track for the cooldown window
        reference_year: Year assumed for tracks without a release year

    Returns:
        Filtered list; with every option off, the input unchanged
    """
    filtered = exclude_explicit(tracks, config.no_explicit)
    filtered = exclude_recent_artists(
        filtered,
        recent_queue,
        config.prevent_artist_repetition,
        config.artist_cooldown_minutes,
        average_track_minutes,
    )
    filtered = restrict_era(
        filtered,
        config.era_filter_enabled,
        config.era_min_decade,
        config.era_max_decade,
        reference_year,
    )
    filtered = restrict_range(filtered, "energy", config.energy_range)
    filtered = restrict_range(filtered, "danceability", config.danceability_range)
    filtered = restrict_range(filtered, "valence", config.valence_range)

    if config.harmonic_flow and has_harmonic_anchor(anchor):
        result = harmonic_flow(anchor, filtered)
    else:
        result = vocal_focus_sort(filtered, config.vocal_focus)

    logger.debug(
        "Smart filters applied",
        input_count=len(tracks),
        output_count=len(result),
        harmonic_flow=config.harmonic_flow and has_harmonic_anchor(anchor),
    )
    return result
