"""
Set order suggestion

Greedy nearest-neighbor ordering over transition scores. The result is a
suggestion only: the live queue changes when the caller applies it.
"""

from typing import List, Optional, Sequence

import structlog

from crowdset.models import ScoredTrack
from crowdset.ordering.scoring import score_transition

logger = structlog.get_logger()


def suggest_set_order(
    tracks: Sequence[ScoredTrack],
    start_identity: Optional[str] = None,
) -> List[str]:
    """
    Suggest an order of tracks for smooth harmonic transitions.

    Args:
        tracks: Tracks to order
        start_identity: Track to open with; defaults to the track with the
            best average outgoing transition score

    Returns:
        List of track identities in suggested order
    """
    if len(tracks) <= 1:
        return [t.identity for t in tracks]

    logger.info("Starting set order suggestion", track_count=len(tracks))

    n = len(tracks)
    scores = [[0.0] * n for _ in range(n)]

    for i in range(n):
        for j in range(n):
            if i != j:
                scores[i][j] = score_transition(tracks[i], tracks[j])

    start_index = None
    if start_identity is not None:
        start_index = next(
            (i for i, t in enumerate(tracks) if t.identity == start_identity), None
        )
    if start_index is None:
        avg_scores = [sum(scores[i]) / (n - 1) for i in range(n)]
        start_index = avg_scores.index(max(avg_scores))

    current = start_index
    ordered = [current]
    remaining = [i for i in range(n) if i != current]

    while remaining:
        # Ties keep the original relative order
        best_next = max(remaining, key=lambda candidate: scores[current][candidate])
        ordered.append(best_next)
        remaining.remove(best_next)
        current = best_next

    ordered_ids = [tracks[i].identity for i in ordered]

    logger.info("Set order suggested", order=ordered_ids)
    return ordered_ids
