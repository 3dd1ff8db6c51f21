"""
Bucket classification

Splits scored tracks into two disjoint lists per refresh:

| Bucket          | Membership                                        | Order                 |
|-----------------|---------------------------------------------------|-----------------------|
| Favorites       | top-K by crowd match                              | crowd match desc      |
| Hidden anthems  | theme >= 85, popularity <= 55, not in favorites   | theme match desc      |

Favorites ties break by frequency desc, then first-seen order.
Tracks scored against an empty crowd, or never referenced by any guest,
are in neither bucket.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, List, Sequence

import structlog

from crowdset.models import ScoredTrack

logger = structlog.get_logger()

DEFAULT_FAVORITES_LIMIT = 15
HIDDEN_ANTHEM_THEME_MIN = 85.0
HIDDEN_ANTHEM_POPULARITY_MAX = 55.0


@dataclass(frozen=True)
class Buckets:
    favorites: List[ScoredTrack] = field(default_factory=list)
    hidden_anthems: List[ScoredTrack] = field(default_factory=list)


def crowd_rank_key(track: ScoredTrack):
    """Sort key for crowd ranking: crowd match, frequency, first seen."""
    return (-track.crowd_match_score, -track.frequency, track.first_seen)


def rank_by_crowd(tracks: Sequence[ScoredTrack]) -> List[ScoredTrack]:
    """Order tracks by crowd-match rank."""
    return sorted(tracks, key=crowd_rank_key)


def is_hidden_anthem_candidate(
    track: ScoredTrack,
    theme_min: float = HIDDEN_ANTHEM_THEME_MIN,
    popularity_max: float = HIDDEN_ANTHEM_POPULARITY_MAX,
) -> bool:
    """High theme fit with low baseline popularity."""
    return track.theme_match_score >= theme_min and track.popularity <= popularity_max


def classify(
    scored: Sequence[ScoredTrack],
    favorites_limit: int = DEFAULT_FAVORITES_LIMIT,
    theme_min: float = HIDDEN_ANTHEM_THEME_MIN,
    popularity_max: float = HIDDEN_ANTHEM_POPULARITY_MAX,
    removed_anthems: AbstractSet[str] = frozenset(),
) -> Buckets:
    """
    Classify scored tracks into favorites and hidden anthems.

    Args:
        scored: Scored tracks of one refresh
        favorites_limit: Number of favorites (top-K)
        theme_min: Minimum theme match for a hidden anthem
        popularity_max: Maximum popularity for a hidden anthem
        removed_anthems: Identities soft-removed from the hidden anthems
            list (e.g. already added to the live queue)

    Returns:
        Buckets with no identity in both lists
    """
    eligible = [t for t in scored if t.guest_count > 0 and t.frequency > 0]

    favorites = rank_by_crowd(eligible)[:max(favorites_limit, 0)]
    favorite_ids = {t.identity for t in favorites}

    anthems = [
        t for t in eligible
        if t.identity not in favorite_ids
        and t.identity not in removed_anthems
        and is_hidden_anthem_candidate(t, theme_min, popularity_max)
    ]
    anthems.sort(key=lambda t: (-t.theme_match_score, t.first_seen))

    logger.debug(
        "Classified tracks",
        eligible_count=len(eligible),
        favorite_count=len(favorites),
        hidden_anthem_count=len(anthems),
        removed_anthem_count=len(removed_anthems),
    )
    return Buckets(favorites=favorites, hidden_anthems=anthems)
