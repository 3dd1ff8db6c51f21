"""Rank deltas and refresh notifications"""

from crowdset.refresh.notifications import (
    RefreshNotification,
    RefreshReason,
    evaluate_refresh,
    format_refresh_notification,
    rank_volatility,
    refresh_badge_text,
    should_initialize,
)
from crowdset.refresh.rank_delta import RankDeltaTracker, diff_ranks, ranks_of

__all__ = [
    "RefreshNotification",
    "RefreshReason",
    "evaluate_refresh",
    "format_refresh_notification",
    "rank_volatility",
    "refresh_badge_text",
    "should_initialize",
    "RankDeltaTracker",
    "diff_ranks",
    "ranks_of",
]
