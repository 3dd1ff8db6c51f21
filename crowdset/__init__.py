"""
Crowd preference aggregation and set-curation engine.
"""

from crowdset.engine import CurationEngine, RefreshResult
from crowdset.errors import ConfigError, CrowdsetError, DuplicateRecordError
from crowdset.filters import FilterConfig
from crowdset.models import (
    PreferenceRecord,
    PreferenceSource,
    QueueEntry,
    QueueSource,
    RecentTrackRef,
    ScoredTrack,
    TrackDescriptor,
    TrackFeatures,
    TrackStat,
)

__version__ = "0.1.0"

__all__ = [
    "CurationEngine",
    "RefreshResult",
    "ConfigError",
    "CrowdsetError",
    "DuplicateRecordError",
    "FilterConfig",
    "PreferenceRecord",
    "PreferenceSource",
    "QueueEntry",
    "QueueSource",
    "RecentTrackRef",
    "ScoredTrack",
    "TrackDescriptor",
    "TrackFeatures",
    "TrackStat",
]
