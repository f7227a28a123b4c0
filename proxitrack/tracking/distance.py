"""
Distance estimation for tracked devices.

Provides segmented log-distance path-loss models per device class, the
generic single-bucket model, and path-loss calibration. The signal and
proximity helpers live in .proximity and are re-exported here.

Formula: d = 10^((tx_power - rssi) / (10 * n))
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

import numpy as np

from .constants import (
    BLE_SIMPLE_PATH_LOSS,
    BLE_SIMPLE_TX_POWER,
    BLUETOOTH_PATH_LOSS_BUCKETS,
    DEFAULT_PATH_LOSS_EXPONENT,
    DEFAULT_TX_POWER,
    PATH_LOSS_EXPONENT_FALLBACK,
    PATH_LOSS_EXPONENT_MAX,
    PATH_LOSS_EXPONENT_MIN,
    RSSI_CLAMP_MAX,
    RSSI_CLAMP_MIN,
    UNKNOWN_DISTANCE,
    WIFI_PATH_LOSS_BUCKETS,
    WIFI_SIMPLE_PATH_LOSS,
    WIFI_SIMPLE_TX_POWER,
    PathLossBucket,
)
from .models import DeviceClass
from .proximity import (  # noqa: F401
    ProximityCategory,
    proximity_category,
    proximity_level,
    signal_bars,
    signal_percent,
    signal_quality,
)


def _formula(rssi: float, tx_power: float, exponent: float) -> float:
    return 10 ** ((tx_power - rssi) / (10 * exponent))


def path_loss_distance(
    rssi: int,
    tx_power: int = DEFAULT_TX_POWER,
    exponent: float = DEFAULT_PATH_LOSS_EXPONENT,
) -> float:
    """
    Generic single-bucket path-loss model.

    Unlike the segmented estimator, RSSI is clamped into [-100, -1] first.

    Args:
        rssi: Received signal strength (dBm).
        tx_power: Calibrated RSSI at 1 meter.
        exponent: Path-loss exponent (n). 2.0 free space, 2.5 typical
            indoor, 3.0 obstructed, 4.0 dense indoor.

    Returns:
        Distance in meters, or UNKNOWN_DISTANCE for rssi == 0.
    """
    if rssi == 0:
        return UNKNOWN_DISTANCE

    rssi = max(RSSI_CLAMP_MIN, min(RSSI_CLAMP_MAX, rssi))
    return _formula(rssi, tx_power, exponent)


def estimate_wifi_simple(rssi: int) -> float:
    """Legacy single-bucket WiFi model."""
    return path_loss_distance(rssi, WIFI_SIMPLE_TX_POWER, WIFI_SIMPLE_PATH_LOSS)


def estimate_ble_simple(rssi: int) -> float:
    """Legacy single-bucket BLE model."""
    return path_loss_distance(rssi, BLE_SIMPLE_TX_POWER, BLE_SIMPLE_PATH_LOSS)


class DistanceEstimator:
    """
    Segmented path-loss distance estimator.

    Each device class has a table of RSSI buckets, strongest first; the first
    bucket whose min_rssi the reading meets supplies (tx_power, n) or a fixed
    distance. WiFi access points and clients share the WiFi table.
    """

    def __init__(
        self,
        wifi_buckets: Sequence[PathLossBucket] = WIFI_PATH_LOSS_BUCKETS,
        bluetooth_buckets: Sequence[PathLossBucket] = BLUETOOTH_PATH_LOSS_BUCKETS,
    ):
        """
        Initialize the distance estimator.

        Args:
            wifi_buckets: Bucket table for WiFi access points and clients.
            bluetooth_buckets: Bucket table for Bluetooth devices.
        """
        self.wifi_buckets = tuple(wifi_buckets)
        self.bluetooth_buckets = tuple(bluetooth_buckets)

    def buckets_for(self, device_class: DeviceClass) -> tuple[PathLossBucket, ...]:
        if device_class is DeviceClass.BLUETOOTH:
            return self.bluetooth_buckets
        return self.wifi_buckets

    def select_bucket(self, rssi: int, device_class: DeviceClass) -> Optional[PathLossBucket]:
        """Find the bucket covering rssi, or None if the table has no catch-all."""
        for bucket in self.buckets_for(device_class):
            if bucket.min_rssi is None or rssi >= bucket.min_rssi:
                return bucket
        return None

    def estimate(self, rssi: int, device_class: DeviceClass) -> float:
        """
        Estimate distance in meters for a reading of the given class.

        No clamping is applied here; out-of-range readings fall into the
        nearest or farthest bucket as-is.

        Returns:
            Distance in meters, or UNKNOWN_DISTANCE for rssi == 0.
        """
        if rssi == 0:
            return UNKNOWN_DISTANCE

        bucket = self.select_bucket(rssi, device_class)
        if bucket is None:
            return UNKNOWN_DISTANCE
        if bucket.fixed_distance is not None:
            return bucket.fixed_distance

        return _formula(rssi, bucket.tx_power, bucket.exponent)


# Module-level instance for convenience
_default_estimator: Optional[DistanceEstimator] = None


def get_distance_estimator() -> DistanceEstimator:
    """Get or create the default distance estimator instance."""
    global _default_estimator
    if _default_estimator is None:
        _default_estimator = DistanceEstimator()
    return _default_estimator


def estimate(rssi: int, device_class: DeviceClass) -> float:
    """Estimate distance with the default segmented tables."""
    return get_distance_estimator().estimate(rssi, device_class)


# =============================================================================
# CALIBRATION
# =============================================================================


def _clamp_exponent(exponent: float) -> float:
    return max(PATH_LOSS_EXPONENT_MIN, min(PATH_LOSS_EXPONENT_MAX, exponent))


def estimate_path_loss_exponent(
    distance1: float,
    rssi1: int,
    distance2: float,
    rssi2: int,
) -> float:
    """
    Estimate the path-loss exponent from two (distance, RSSI) samples.

    Returns the free-space default when the pair cannot determine a slope.
    """
    if distance1 <= 0 or distance2 <= 0 or distance1 == distance2:
        return PATH_LOSS_EXPONENT_FALLBACK

    exponent = (rssi1 - rssi2) / (10.0 * math.log10(distance2 / distance1))
    return _clamp_exponent(exponent)


def fit_path_loss(samples: Iterable[tuple[float, float]]) -> tuple[float, float]:
    """
    Least-squares fit of (tx_power, n) over calibration samples.

    Fits rssi = tx_power - 10 * n * log10(d).

    Args:
        samples: (distance_m, rssi) pairs.

    Returns:
        Tuple of (tx_power, exponent) with the exponent clamped to [1.5, 5.0].

    Raises:
        ValueError: If fewer than two distinct positive distances are given.
    """
    pairs = [(d, r) for d, r in samples if d > 0]
    distances = np.array([d for d, _ in pairs], dtype=float)
    rssis = np.array([r for _, r in pairs], dtype=float)

    if np.unique(distances).size < 2:
        raise ValueError('Need samples at two or more distinct positive distances')

    log_d = np.log10(distances)
    slope, intercept = np.polyfit(log_d, rssis, 1)
    exponent = _clamp_exponent(-slope / 10.0)
    return float(intercept), float(exponent)
