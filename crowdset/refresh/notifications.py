"""
Refresh notifications

Decides whether the DJ should be offered a refresh of the displayed
recommendations. The engine never refreshes the display on its own; an
external scheduler calls evaluate_refresh on whatever cadence it likes.

Reasons:
- rank_volatility: enough of the top N ids are new
- top_rank_change: the #1 track changed
- guest_batch: enough new guests checked in
- multiple: more than one of the above
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

import structlog

logger = structlog.get_logger()

DEFAULT_MIN_GUESTS = 5
DEFAULT_VOLATILITY_THRESHOLD = 0.3
DEFAULT_GUEST_BATCH = 5
DEFAULT_TOP_N = 10


class RefreshReason(str, Enum):
    RANK_VOLATILITY = "rank_volatility"
    TOP_RANK_CHANGE = "top_rank_change"
    GUEST_BATCH = "guest_batch"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class RefreshNotification:
    should_notify: bool
    reason: Optional[RefreshReason] = None
    new_guests: int = 0
    top_rank_changed: bool = False
    volatility_percent: float = 0.0
    previous_top: List[str] = field(default_factory=list)
    current_top: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return format_refresh_notification(self)

    @property
    def badge_text(self) -> Optional[str]:
        return refresh_badge_text(self)


def should_initialize(guest_count: int, min_guests: int = DEFAULT_MIN_GUESTS) -> bool:
    """Recommendations are shown once enough guests have checked in."""
    return guest_count >= min_guests


def rank_volatility(previous_top: Sequence[str], current_top: Sequence[str]) -> float:
    """Share of the current top ids that were not in the previous top."""
    if not previous_top:
        return 0.0
    previous = set(previous_top)
    changed = sum(1 for track_id in current_top if track_id not in previous)
    return changed / max(len(previous_top), len(current_top))


def evaluate_refresh(
    previous_ids: Sequence[str],
    current_ids: Sequence[str],
    previous_guests: int,
    current_guests: int,
    min_guests: int = DEFAULT_MIN_GUESTS,
    volatility_threshold: float = DEFAULT_VOLATILITY_THRESHOLD,
    guest_batch: int = DEFAULT_GUEST_BATCH,
    top_n: int = DEFAULT_TOP_N,
) -> RefreshNotification:
    """
    Compare the displayed ranking with a freshly computed one.

    Args:
        previous_ids: Ranked identities currently on display
        current_ids: Ranked identities of the latest refresh
        previous_guests: Guest count when the display was last refreshed
        current_guests: Guest count now
        min_guests: Guests required before recommendations are shown
        volatility_threshold: Share of new top ids that triggers a notice
        guest_batch: New guests that trigger a notice
        top_n: How many leading ids are compared

    Returns:
        RefreshNotification; should_notify is False until the display has
        been initialized with at least min_guests guests
    """
    if not previous_ids or not should_initialize(current_guests, min_guests):
        return RefreshNotification(should_notify=False)

    previous_top = list(previous_ids[:top_n])
    current_top = list(current_ids[:top_n])

    volatility = rank_volatility(previous_top, current_top)
    top_changed = bool(current_top) and previous_top[0] != current_top[0]
    new_guests = current_guests - previous_guests

    triggered = []
    if volatility >= volatility_threshold:
        triggered.append(RefreshReason.RANK_VOLATILITY)
    if top_changed:
        triggered.append(RefreshReason.TOP_RANK_CHANGE)
    if new_guests >= guest_batch:
        triggered.append(RefreshReason.GUEST_BATCH)

    if len(triggered) > 1:
        reason = RefreshReason.MULTIPLE
    else:
        reason = triggered[0] if triggered else None

    notification = RefreshNotification(
        should_notify=bool(triggered),
        reason=reason,
        new_guests=new_guests,
        top_rank_changed=top_changed,
        volatility_percent=volatility * 100,
        previous_top=previous_top,
        current_top=current_top,
    )

    if notification.should_notify:
        logger.info(
            "Refresh suggested",
            reason=reason.value,
            new_guests=new_guests,
            volatility_percent=round(notification.volatility_percent),
        )
    return notification


def format_refresh_notification(notification: RefreshNotification) -> str:
    """User-facing message for a notification; empty when silent."""
    if not notification.should_notify:
        return ""

    reason = notification.reason
    if reason == RefreshReason.MULTIPLE:
        return (
            f"{max(notification.new_guests, 0)} new guests have arrived. "
            "Top tracks have changed significantly. Tap to refresh."
        )
    if reason == RefreshReason.GUEST_BATCH:
        return f"{notification.new_guests} new guests have arrived. Tap to refresh recommendations."
    if reason == RefreshReason.TOP_RANK_CHANGE:
        return "The #1 track has changed! Tap to see updated recommendations."
    if reason == RefreshReason.RANK_VOLATILITY:
        return f"{notification.volatility_percent:.0f}% of top tracks have changed. Tap to refresh."
    return "New recommendations available. Tap to refresh."


def refresh_badge_text(notification: RefreshNotification) -> Optional[str]:
    """Badge for the refresh button: "+N" new guests, or "!"."""
    if not notification.should_notify:
        return None
    if notification.new_guests > 0:
        return f"+{notification.new_guests}"
    return "!"
