"""Track scoring and bucket classification module"""

from crowdset.scoring.buckets import (
    Buckets,
    classify,
    crowd_rank_key,
    is_hidden_anthem_candidate,
    rank_by_crowd,
)
from crowdset.scoring.scorer import ScoringWeights, crowd_match, score, score_all

__all__ = [
    "Buckets",
    "classify",
    "crowd_rank_key",
    "is_hidden_anthem_candidate",
    "rank_by_crowd",
    "ScoringWeights",
    "crowd_match",
    "score",
    "score_all",
]
