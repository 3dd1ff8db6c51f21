"""
Smart filter configuration.

All knobs default to "off": a default FilterConfig filters nothing.
Numeric ranges are (min, max) percentages with min <= max; the full
(0, 100) range is a disabled range.
"""

from dataclasses import dataclass
from typing import Tuple

from crowdset.errors import ConfigError

FULL_RANGE: Tuple[float, float] = (0.0, 100.0)


@dataclass(frozen=True)
class FilterConfig:
    """Knobs for the smart filter pipeline."""
    no_explicit: bool = False

    prevent_artist_repetition: bool = False
    artist_cooldown_minutes: float = 30.0

    era_filter_enabled: bool = False
    era_min_decade: int = 1960
    era_max_decade: int = 2020

    energy_range: Tuple[float, float] = FULL_RANGE
    danceability_range: Tuple[float, float] = FULL_RANGE
    valence_range: Tuple[float, float] = FULL_RANGE

    vocal_focus: bool = False
    harmonic_flow: bool = False

    def __post_init__(self):
        for name in ("energy_range", "danceability_range", "valence_range"):
            _check_range(name, getattr(self, name))

        if self.era_min_decade > self.era_max_decade:
            raise ConfigError(
                f"era_min_decade ({self.era_min_decade}) is after era_max_decade ({self.era_max_decade})"
            )
        if self.artist_cooldown_minutes < 0:
            raise ConfigError(
                f"artist_cooldown_minutes must be >= 0, got {self.artist_cooldown_minutes}"
            )


def _check_range(name: str, bounds: Tuple[float, float]):
    try:
        low, high = bounds
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a (min, max) pair, got {bounds!r}")

    if low > high:
        raise ConfigError(f"{name} has min {low} > max {high}")
    if low < 0 or high > 100:
        raise ConfigError(f"{name} must lie within [0, 100], got ({low}, {high})")


def is_full_range(bounds: Tuple[float, float]) -> bool:
    low, high = bounds
    return low <= FULL_RANGE[0] and high >= FULL_RANGE[1]
