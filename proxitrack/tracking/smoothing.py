"""
Recursive smoothing for noisy scalar signals.

A one-dimensional Kalman filter intended for per-device distance (or RSSI)
streams. The state model is a random walk:

    x(k) = x(k-1) + w,  w ~ N(0, process_noise)
    z(k) = x(k) + v,    v ~ N(0, measurement_noise)
"""

from __future__ import annotations

from .constants import (
    FILTER_INITIAL_ERROR,
    FILTER_INITIAL_ESTIMATE,
    FILTER_MEASUREMENT_NOISE,
    FILTER_PROCESS_NOISE,
)


class DistanceFilter:
    """
    Scalar Kalman filter.

    The first measurement seeds the estimate; subsequent measurements are
    blended in by the Kalman gain.
    """

    def __init__(
        self,
        initial_estimate: float = FILTER_INITIAL_ESTIMATE,
        measurement_noise: float = FILTER_MEASUREMENT_NOISE,
        process_noise: float = FILTER_PROCESS_NOISE,
    ):
        """
        Initialize the filter.

        Args:
            initial_estimate: Estimate reported before the first update.
            measurement_noise: Variance of measurement noise. Larger values
                trust history more and smooth harder.
            process_noise: Variance of the underlying signal between updates.
                Larger values react faster to real movement.
        """
        if measurement_noise < 0 or process_noise < 0:
            raise ValueError('Noise parameters must be non-negative')

        self._estimate = float(initial_estimate)
        self.error_estimate = FILTER_INITIAL_ERROR
        self.measurement_noise = measurement_noise
        self.process_noise = process_noise
        self.initialized = False

    def update(self, measurement: float) -> float:
        """
        Incorporate a measurement and return the filtered estimate.
        """
        if not self.initialized:
            self._estimate = float(measurement)
            self.initialized = True
            return self._estimate

        # Predict
        self.error_estimate += self.process_noise

        # Update
        gain = self.error_estimate / (self.error_estimate + self.measurement_noise)
        self._estimate += gain * (measurement - self._estimate)
        self.error_estimate = (1.0 - gain) * self.error_estimate

        return self._estimate

    @property
    def estimate(self) -> float:
        return self._estimate

    def get_estimate(self) -> float:
        return self._estimate

    def reset(self) -> None:
        """Drop calibration; the next update reseeds the estimate."""
        self.initialized = False
        self.error_estimate = FILTER_INITIAL_ERROR
