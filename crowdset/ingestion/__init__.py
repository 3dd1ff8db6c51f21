"""Raw preference payload normalization"""

from crowdset.ingestion.parser import (
    RawPreferencePayload,
    RawTrack,
    parse_preference_record,
)

__all__ = [
    "RawPreferencePayload",
    "RawTrack",
    "parse_preference_record",
]
