"""
Harmonic flow: pick the next tracks that mix out of an anchor track.

The suggestion list is the anchor itself followed by at most one track per
compatibility class, in this order:

    anchor, Perfect Match, Energy Boost, Energy Drop

Within a class the best crowd-ranked candidate wins. A class with no
compatible candidate is left out, never backfilled. Candidates with a
missing or malformed key never match.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from crowdset.models import ScoredTrack
from crowdset.scoring.buckets import rank_by_crowd
from crowdset.theory.camelot import CompatibilityLabel, describe_compatibility, parse_camelot

logger = structlog.get_logger()

MAX_SUGGESTIONS = 4

_CLASS_ORDER = (
    CompatibilityLabel.PERFECT_MATCH,
    CompatibilityLabel.ENERGY_BOOST,
    CompatibilityLabel.ENERGY_DROP,
)


@dataclass(frozen=True)
class HarmonicSuggestion:
    track: ScoredTrack
    label: Optional[CompatibilityLabel]
    is_anchor: bool = False


def has_harmonic_anchor(anchor: Optional[ScoredTrack]) -> bool:
    """True when the anchor exists and carries a parseable key."""
    return anchor is not None and parse_camelot(anchor.key) is not None


def suggest_next_tracks(
    anchor: ScoredTrack,
    candidates: Sequence[ScoredTrack],
) -> List[HarmonicSuggestion]:
    """
    Build the harmonic suggestion set for an anchor track.

    Args:
        anchor: Track currently selected as the mixing anchor
        candidates: Candidate tracks (any order; ranked by crowd match here)

    Returns:
        Up to MAX_SUGGESTIONS suggestions, anchor first
    """
    suggestions = [
        HarmonicSuggestion(
            track=anchor,
            label=CompatibilityLabel.PERFECT_MATCH if has_harmonic_anchor(anchor) else None,
            is_anchor=True,
        )
    ]
    if not has_harmonic_anchor(anchor):
        return suggestions

    best = {}
    for track in rank_by_crowd([c for c in candidates if c.identity != anchor.identity]):
        label = describe_compatibility(track.key, anchor.key)
        if label is not None and label not in best:
            best[label] = track
        if len(best) == len(_CLASS_ORDER):
            break

    for label in _CLASS_ORDER:
        if label in best:
            suggestions.append(HarmonicSuggestion(track=best[label], label=label))

    logger.debug(
        "Harmonic suggestions built",
        anchor=anchor.identity,
        anchor_key=anchor.key,
        classes=[s.label.value for s in suggestions[1:]],
    )
    return suggestions[:MAX_SUGGESTIONS]


def harmonic_flow(anchor: ScoredTrack, candidates: Sequence[ScoredTrack]) -> List[ScoredTrack]:
    """The suggestion set as a plain track list, anchor first."""
    return [s.track for s in suggest_next_tracks(anchor, candidates)]
