"""Smart filter pipeline module"""

from crowdset.filters.config import FULL_RANGE, FilterConfig
from crowdset.filters.pipeline import (
    apply_filters,
    cooldown_track_count,
    exclude_explicit,
    exclude_recent_artists,
    restrict_era,
    restrict_range,
    vocal_focus_sort,
)
from crowdset.filters.presets import (
    QUICK_PRESETS,
    QuickPreset,
    active_filter_count,
    filter_summary,
    get_preset,
)

__all__ = [
    "FULL_RANGE",
    "FilterConfig",
    "apply_filters",
    "cooldown_track_count",
    "exclude_explicit",
    "exclude_recent_artists",
    "restrict_era",
    "restrict_range",
    "vocal_focus_sort",
    "QUICK_PRESETS",
    "QuickPreset",
    "active_filter_count",
    "filter_summary",
    "get_preset",
]
