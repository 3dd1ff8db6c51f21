"""
Transition scoring module

Combines multiple factors to score how well one queued track leads into
the next.
"""

from crowdset.models import ScoredTrack
from crowdset.theory.camelot import CompatibilityLabel, describe_compatibility, parse_camelot

_HARMONIC_SCORES = {
    CompatibilityLabel.PERFECT_MATCH: 1.0,
    CompatibilityLabel.ENERGY_BOOST: 0.9,
    CompatibilityLabel.ENERGY_DROP: 0.85,
}


def score_transition(track_from: ScoredTrack, track_to: ScoredTrack) -> float:
    """
    Score the quality of a transition between two tracks.

    Factors considered:
    - Harmonic compatibility (Camelot wheel)
    - Energy progression
    - Crowd match of the destination track
    - Danceability match

    Returns:
        Score from 0 to 1 where 1 is a perfect transition
    """
    harmonic_score = _score_harmonic(track_from.key, track_to.key)
    energy_score = _score_energy_progression(track_from.energy, track_to.energy)
    crowd_score = track_to.crowd_match_score / 100.0
    dance_score = _score_danceability_match(track_from.danceability, track_to.danceability)

    return (
        harmonic_score * 0.4 +
        energy_score * 0.25 +
        crowd_score * 0.25 +
        dance_score * 0.1
    )


def _score_harmonic(key_from, key_to) -> float:
    """Unknown keys score neutral; incompatible keys score low."""
    if parse_camelot(key_from) is None or parse_camelot(key_to) is None:
        return 0.5
    label = describe_compatibility(key_to, key_from)
    return _HARMONIC_SCORES.get(label, 0.2)


def _score_energy_progression(energy_from: float, energy_to: float) -> float:
    """
    Score energy progression on the 0-100 scale.

    Slight increases are preferred; large jumps or drops are penalized.
    """
    diff = energy_to - energy_from

    if 0 <= diff <= 15:
        return 1.0
    if -10 <= diff < 0:
        return 0.85
    if -20 <= diff <= 25:
        return 0.6
    return 0.3


def _score_danceability_match(dance1: float, dance2: float) -> float:
    diff = abs(dance1 - dance2)

    if diff <= 10:
        return 1.0
    elif diff <= 20:
        return 0.8
    elif diff <= 30:
        return 0.5
    else:
        return 0.3
