"""
Signal strength and proximity helpers.

Stateless mappings from RSSI and distance estimates to display values.
"""

from __future__ import annotations

from enum import Enum

from .constants import (
    PROXIMITY_CATEGORY_THRESHOLDS,
    PROXIMITY_LEVEL_MAX,
    PROXIMITY_LEVEL_THRESHOLDS,
    PROXIMITY_LEVEL_UNKNOWN,
    SIGNAL_BAR_THRESHOLDS,
    SIGNAL_PERCENT_CEILING,
    SIGNAL_PERCENT_FLOOR,
    SIGNAL_QUALITY_THRESHOLDS,
    SIGNAL_VERY_WEAK,
)


class ProximityCategory(str, Enum):
    """Coarse distance categories."""
    UNKNOWN = 'unknown'
    IMMEDIATE = 'immediate'  # < 1m
    NEAR = 'near'            # 1-3m
    MEDIUM = 'medium'        # 3-10m
    FAR = 'far'              # 10m+

    def __str__(self) -> str:
        return self.value


# =============================================================================
# SIGNAL HELPERS
# =============================================================================


def signal_quality(rssi: float) -> str:
    """Human-readable signal quality label."""
    for threshold, label in SIGNAL_QUALITY_THRESHOLDS:
        if rssi >= threshold:
            return label
    return SIGNAL_VERY_WEAK


def signal_percent(rssi: float) -> int:
    """Map RSSI linearly onto 0-100% between -90 dBm and -30 dBm."""
    if rssi >= SIGNAL_PERCENT_CEILING:
        return 100
    if rssi <= SIGNAL_PERCENT_FLOOR:
        return 0
    span = SIGNAL_PERCENT_CEILING - SIGNAL_PERCENT_FLOOR
    return int((rssi - SIGNAL_PERCENT_FLOOR) * 100 / span)


def signal_bars(rssi: float) -> int:
    """Signal strength as 0-5 bars."""
    for threshold, bars in SIGNAL_BAR_THRESHOLDS:
        if rssi >= threshold:
            return bars
    return 0


# =============================================================================
# PROXIMITY HELPERS
# =============================================================================


def proximity_category(distance: float) -> ProximityCategory:
    """Classify a distance estimate; negative values are unknown."""
    if distance < 0:
        return ProximityCategory.UNKNOWN
    for bound, category in PROXIMITY_CATEGORY_THRESHOLDS:
        if distance < bound:
            return ProximityCategory(category)
    return ProximityCategory.FAR


def proximity_level(distance: float) -> int:
    """Granular proximity: 0 unknown, 1 immediate through 5 very far."""
    if distance < 0:
        return PROXIMITY_LEVEL_UNKNOWN
    for bound, level in PROXIMITY_LEVEL_THRESHOLDS:
        if distance < bound:
            return level
    return PROXIMITY_LEVEL_MAX
