"""Harmonic flow and set ordering module"""

from crowdset.ordering.harmonic_flow import (
    MAX_SUGGESTIONS,
    HarmonicSuggestion,
    harmonic_flow,
    has_harmonic_anchor,
    suggest_next_tracks,
)
from crowdset.ordering.optimizer import suggest_set_order
from crowdset.ordering.scoring import score_transition

__all__ = [
    "MAX_SUGGESTIONS",
    "HarmonicSuggestion",
    "harmonic_flow",
    "has_harmonic_anchor",
    "suggest_next_tracks",
    "suggest_set_order",
    "score_transition",
]
