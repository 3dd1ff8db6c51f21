"""
Camelot Wheel - key compatibility table for the live DJ set.

The Camelot Wheel organizes the 24 musical keys in a circle:
12 numeric positions x 2 modes.

Outer circle (B) = MAJOR keys
Inner circle (A) = MINOR keys

Only three relations count as mixable here:

| Relation     | Candidate vs anchor         | Example      |
|--------------|-----------------------------|--------------|
| Perfect      | same key                    | 8A -> 8A     |
| Energy Boost | same mode, one step up      | 8A -> 9A     |
| Energy Drop  | same mode, one step down    | 8A -> 7A     |

Relative (A <-> B) moves are not treated as compatible.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

CAMELOT_WHEEL = {
    # Minor keys (A) - inner circle
    "1A": "Abm", "2A": "Ebm", "3A": "Bbm", "4A": "Fm",
    "5A": "Cm", "6A": "Gm", "7A": "Dm", "8A": "Am",
    "9A": "Em", "10A": "Bm", "11A": "F#m", "12A": "C#m",
    # Major keys (B) - outer circle
    "1B": "B", "2B": "F#", "3B": "Db", "4B": "Ab",
    "5B": "Eb", "6B": "Bb", "7B": "F", "8B": "C",
    "9B": "G", "10B": "D", "11B": "A", "12B": "E",
}

_KEY_TO_CAMELOT = {name.lower(): camelot for camelot, name in CAMELOT_WHEEL.items()}

# Enharmonic spellings and long forms
_KEY_ALIASES = {
    "g#m": "1A", "d#m": "2A", "a#m": "3A", "gbm": "11A", "dbm": "12A",
    "ab minor": "1A", "g# minor": "1A",
    "eb minor": "2A", "d# minor": "2A",
    "bb minor": "3A", "a# minor": "3A",
    "f minor": "4A", "c minor": "5A", "g minor": "6A", "d minor": "7A",
    "a minor": "8A", "e minor": "9A", "b minor": "10A",
    "f# minor": "11A", "gb minor": "11A",
    "c# minor": "12A", "db minor": "12A",
    "cb": "1B", "gb": "2B", "c#": "3B", "g#": "4B", "d#": "5B", "a#": "6B",
    "b major": "1B", "cb major": "1B",
    "f# major": "2B", "gb major": "2B",
    "db major": "3B", "c# major": "3B",
    "ab major": "4B", "g# major": "4B",
    "eb major": "5B", "d# major": "5B",
    "bb major": "6B", "a# major": "6B",
    "f major": "7B", "c major": "8B", "g major": "9B",
    "d major": "10B", "a major": "11B", "e major": "12B",
}
_KEY_TO_CAMELOT.update(_KEY_ALIASES)

# Pitch class (0 = C ... 11 = B) to Camelot, as reported by audio-feature APIs
_PITCH_CLASS_MAJOR = ("8B", "3B", "10B", "5B", "12B", "7B", "2B", "9B", "4B", "11B", "6B", "1B")
_PITCH_CLASS_MINOR = ("5A", "12A", "7A", "2A", "9A", "4A", "11A", "6A", "1A", "8A", "3A", "10A")


class CompatibilityLabel(str, Enum):
    """Harmonic relation of a candidate key to an anchor key."""
    PERFECT_MATCH = "Perfect Match"
    ENERGY_BOOST = "Energy Boost"
    ENERGY_DROP = "Energy Drop"


HARMONIC_DESCRIPTIONS = {
    CompatibilityLabel.PERFECT_MATCH: "Same key. Will mix seamlessly.",
    CompatibilityLabel.ENERGY_BOOST: "One step up. Will raise the energy.",
    CompatibilityLabel.ENERGY_DROP: "One step down. Will mellow the vibe.",
}


@dataclass(frozen=True)
class CompatibleKeys:
    """The three keys that mix with a given key."""
    perfect: str
    energy_boost: str
    energy_drop: str


def parse_camelot(key: Optional[str]) -> Optional[Tuple[int, str]]:
    """
    Parse a key into (number, mode).

    Accepts Camelot notation in any case ("8a", " 8A ") and musical
    notation ("Am", "C major").

    Returns:
        Tuple of (1-12, "A" | "B"), or None when the key is unrecognized
    """
    camelot = get_camelot_from_key(key)
    if camelot is None:
        return None
    return int(camelot[:-1]), camelot[-1]


def get_camelot_from_key(key: Optional[str]) -> Optional[str]:
    """
    Convert a key to canonical Camelot notation.

    Args:
        key: Camelot ("8A") or musical key ("Am", "F# minor")

    Returns:
        Camelot notation (e.g., "8A") or None if not found
    """
    if not key or not isinstance(key, str):
        return None

    key_upper = key.strip().upper()
    if key_upper in CAMELOT_WHEEL:
        return key_upper

    # "08A" and similar zero-padded forms
    if len(key_upper) >= 2 and key_upper[:-1].isdigit() and key_upper[-1] in ("A", "B"):
        number = int(key_upper[:-1])
        if 1 <= number <= 12:
            return f"{number}{key_upper[-1]}"
        return None

    return _KEY_TO_CAMELOT.get(key.strip().lower())


def camelot_from_audio(pitch_class: Optional[int], mode: Optional[int]) -> Optional[str]:
    """
    Convert a pitch class and mode (1 = major, 0 = minor) to Camelot.

    Returns None for unknown pitch classes (-1) or modes.
    """
    if pitch_class is None or mode is None:
        return None
    if not 0 <= pitch_class <= 11 or mode not in (0, 1):
        return None
    table = _PITCH_CLASS_MAJOR if mode == 1 else _PITCH_CLASS_MINOR
    return table[pitch_class]


def compatible_keys(key: Optional[str]) -> Optional[CompatibleKeys]:
    """
    Get the harmonically compatible keys for mixing.

    Args:
        key: Camelot notation (e.g., "8A")

    Returns:
        CompatibleKeys (perfect, energy_boost, energy_drop), or None for
        a malformed key
    """
    parsed = parse_camelot(key)
    if parsed is None:
        return None

    number, mode = parsed
    next_number = (number % 12) + 1
    prev_number = ((number - 2) % 12) + 1

    return CompatibleKeys(
        perfect=f"{number}{mode}",
        energy_boost=f"{next_number}{mode}",
        energy_drop=f"{prev_number}{mode}",
    )


def describe_compatibility(
    candidate_key: Optional[str],
    anchor_key: Optional[str],
) -> Optional[CompatibilityLabel]:
    """
    Label how a candidate key mixes out of an anchor key.

    Returns:
        PERFECT_MATCH, ENERGY_BOOST, ENERGY_DROP, or None when the keys are
        incompatible or either key is malformed
    """
    candidate = get_camelot_from_key(candidate_key)
    keys = compatible_keys(anchor_key)
    if candidate is None or keys is None:
        return None

    if candidate == keys.perfect:
        return CompatibilityLabel.PERFECT_MATCH
    if candidate == keys.energy_boost:
        return CompatibilityLabel.ENERGY_BOOST
    if candidate == keys.energy_drop:
        return CompatibilityLabel.ENERGY_DROP
    return None
