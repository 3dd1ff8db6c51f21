"""Preference aggregation module"""

from crowdset.aggregation.aggregator import (
    AggregationResult,
    NameCount,
    aggregate,
    normalize_text,
    top_counts,
    track_identity,
)
from crowdset.aggregation.insights import CrowdInsights, crowd_insights
from crowdset.aggregation.store import PreferenceStore

__all__ = [
    "AggregationResult",
    "NameCount",
    "aggregate",
    "normalize_text",
    "top_counts",
    "track_identity",
    "CrowdInsights",
    "crowd_insights",
    "PreferenceStore",
]
