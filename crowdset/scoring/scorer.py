"""
Track scoring module

Turns aggregated track statistics into two independent percentages:

- crowd match: how strongly the measured crowd backs the track
- theme match: fit to the event's vibe, supplied by an external classifier

Scores stay unrounded internally so repeated rescoring never compounds
rounding error; ScoredTrack.display_* rounds for presentation.
"""

from dataclasses import dataclass, replace
from typing import List, Mapping, Optional

import structlog

from crowdset.models import ScoredTrack, TrackFeatures, TrackStat

logger = structlog.get_logger()

DEFAULT_FREQUENCY_WEIGHT = 0.7
DEFAULT_POPULARITY_WEIGHT = 0.3


@dataclass(frozen=True)
class ScoringWeights:
    """
    Blend coefficients for the crowd-match score.

    These are tunable; the only contract is that frequency dominates.
    """
    frequency: float = DEFAULT_FREQUENCY_WEIGHT
    popularity: float = DEFAULT_POPULARITY_WEIGHT

    def __post_init__(self):
        if self.frequency < 0 or self.popularity < 0:
            raise ValueError("Scoring weights must be non-negative")
        if self.frequency <= self.popularity:
            raise ValueError("Frequency weight must dominate popularity weight")


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(max(value, low), high)


def crowd_match(
    frequency: int,
    popularity: float,
    total_guests: int,
    weights: ScoringWeights = ScoringWeights(),
) -> float:
    """
    Crowd-match percentage from guest frequency and catalog popularity.

    Args:
        frequency: Distinct guests whose data referenced the track
        popularity: Catalog popularity 0-100
        total_guests: Guests in the event
        weights: Blend coefficients

    Returns:
        Unrounded score in [0, 100]; 0 when there is no crowd
    """
    if total_guests <= 0:
        return 0.0

    share = min(frequency / total_guests, 1.0)
    pop = _clamp(popularity) / 100.0
    total_weight = weights.frequency + weights.popularity

    blended = (share * weights.frequency + pop * weights.popularity) / total_weight
    return _clamp(blended * 100.0)


def score(
    stat: TrackStat,
    theme_fit: float,
    total_guests: int,
    weights: ScoringWeights = ScoringWeights(),
    metadata: Optional[TrackFeatures] = None,
) -> ScoredTrack:
    """
    Score one aggregated track.

    Args:
        stat: Aggregated statistics
        theme_fit: Theme-fit percentage from the external classifier
        total_guests: Guests in the event; 0 means an empty crowd
        weights: Crowd-match blend coefficients
        metadata: Externally supplied metadata overriding the aggregated one

    Returns:
        ScoredTrack with both scores clamped to [0, 100]
    """
    if metadata is not None:
        stat = replace(stat, features=stat.features.merged(metadata))

    if total_guests <= 0:
        # An empty crowd keeps the track out of every bucket
        return ScoredTrack(
            stat=replace(stat, guest_count=0),
            crowd_match_score=0.0,
            theme_match_score=0.0,
        )

    popularity = stat.popularity if stat.popularity is not None else 0.0
    return ScoredTrack(
        stat=stat,
        crowd_match_score=crowd_match(stat.frequency, popularity, total_guests, weights),
        theme_match_score=_clamp(float(theme_fit)),
    )


def score_all(
    stats: Mapping[str, TrackStat],
    theme_fit: Mapping[str, float],
    total_guests: int,
    weights: ScoringWeights = ScoringWeights(),
    metadata: Optional[Mapping[str, TrackFeatures]] = None,
) -> List[ScoredTrack]:
    """
    Score every track of an aggregation pass.

    Tracks missing from theme_fit get a theme fit of 0. The result is in
    first-seen order.
    """
    metadata = metadata or {}
    scored = [
        score(
            stat,
            theme_fit.get(identity, 0.0),
            total_guests,
            weights,
            metadata.get(identity),
        )
        for identity, stat in sorted(stats.items(), key=lambda item: item[1].first_seen)
    ]

    logger.debug("Scored tracks", track_count=len(scored), guest_count=total_guests)
    return scored

