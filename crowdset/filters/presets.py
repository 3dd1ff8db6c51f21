"""
Quick presets and UI summaries for smart filters.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from crowdset.filters.config import FilterConfig, is_full_range


@dataclass(frozen=True)
class QuickPreset:
    id: str
    name: str
    description: str
    config: FilterConfig


QUICK_PRESETS: List[QuickPreset] = [
    QuickPreset(
        id="family-friendly",
        name="Family Friendly",
        description="No explicit content",
        config=FilterConfig(no_explicit=True),
    ),
    QuickPreset(
        id="high-energy-throwback",
        name="High-Energy Throwback",
        description="Intense nostalgic hits from 80s-90s",
        config=FilterConfig(
            energy_range=(75.0, 100.0),
            era_filter_enabled=True,
            era_min_decade=1980,
            era_max_decade=1990,
            # Short cooldown: several hits from iconic artists are fine
            prevent_artist_repetition=True,
            artist_cooldown_minutes=9.0,
        ),
    ),
    QuickPreset(
        id="vocal-showcase",
        name="Vocal Showcase",
        description="Powerful vocals, wide artist variety",
        config=FilterConfig(
            vocal_focus=True,
            prevent_artist_repetition=True,
            artist_cooldown_minutes=30.0,
        ),
    ),
    QuickPreset(
        id="peak-hour",
        name="Peak Hour",
        description="Maximum energy and danceability",
        config=FilterConfig(
            energy_range=(80.0, 100.0),
            danceability_range=(70.0, 100.0),
            prevent_artist_repetition=True,
            artist_cooldown_minutes=15.0,
        ),
    ),
    QuickPreset(
        id="cool-down",
        name="Cool Down / End of Night",
        description="Mellow, soulful vibes",
        config=FilterConfig(
            energy_range=(0.0, 50.0),
            valence_range=(0.0, 60.0),
            prevent_artist_repetition=True,
            artist_cooldown_minutes=9.0,
        ),
    ),
]

_PRESETS_BY_ID: Dict[str, QuickPreset] = {p.id: p for p in QUICK_PRESETS}


def get_preset(preset_id: str) -> Optional[QuickPreset]:
    return _PRESETS_BY_ID.get(preset_id)


def active_filter_count(config: FilterConfig) -> int:
    """Number of active knobs, for the UI badge."""
    flags = [
        config.no_explicit,
        config.prevent_artist_repetition and config.artist_cooldown_minutes > 0,
        config.era_filter_enabled,
        not is_full_range(config.energy_range),
        not is_full_range(config.danceability_range),
        not is_full_range(config.valence_range),
        config.vocal_focus,
        config.harmonic_flow,
    ]
    return sum(1 for flag in flags if flag)


def filter_summary(config: FilterConfig) -> List[str]:
    """Human-readable lines describing the active knobs."""
    summary: List[str] = []

    if config.no_explicit:
        summary.append("No explicit content")

    if config.prevent_artist_repetition and config.artist_cooldown_minutes > 0:
        summary.append(f"Artist cooldown: {config.artist_cooldown_minutes:g} min")

    if config.era_filter_enabled:
        summary.append(f"Era: {config.era_min_decade}s-{config.era_max_decade}s")

    for label, bounds in (
        ("Energy", config.energy_range),
        ("Danceability", config.danceability_range),
        ("Mood", config.valence_range),
    ):
        if not is_full_range(bounds):
            summary.append(f"{label}: {bounds[0]:.0f}%-{bounds[1]:.0f}%")

    if config.harmonic_flow:
        summary.append("Harmonic flow")
    elif config.vocal_focus:
        summary.append("Vocal showcase")

    return summary
