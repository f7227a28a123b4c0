"""
Registry configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .constants import (
    BLUETOOTH_PATH_LOSS_BUCKETS,
    DEVICE_TIMEOUT_MS,
    FILTER_INITIAL_ESTIMATE,
    FILTER_MEASUREMENT_NOISE,
    FILTER_PROCESS_NOISE,
    WIFI_PATH_LOSS_BUCKETS,
    PathLossBucket,
)

ENV_TIMEOUT_MS = 'PROXITRACK_TIMEOUT_MS'
ENV_SMOOTHING = 'PROXITRACK_SMOOTHING'

_FALSE_VALUES = ('0', 'false', 'no', 'off')


@dataclass(frozen=True)
class RegistryConfig:
    """
    Settings consumed by DeviceRegistry at construction.

    Attributes
    ----------
    timeout_ms
        Idle time after which an entry is evicted on the next update.
    smoothing_enabled
        Whether each entry gets its own DistanceFilter.
    filter_initial_estimate, filter_measurement_noise, filter_process_noise
        Parameters for new per-entry filters.
    wifi_buckets, bluetooth_buckets
        Segmented path-loss tables.
    """
    timeout_ms:               int   = DEVICE_TIMEOUT_MS
    smoothing_enabled:        bool  = True
    filter_initial_estimate:  float = FILTER_INITIAL_ESTIMATE
    filter_measurement_noise: float = FILTER_MEASUREMENT_NOISE
    filter_process_noise:     float = FILTER_PROCESS_NOISE
    wifi_buckets:      tuple[PathLossBucket, ...] = field(default=WIFI_PATH_LOSS_BUCKETS)
    bluetooth_buckets: tuple[PathLossBucket, ...] = field(default=BLUETOOTH_PATH_LOSS_BUCKETS)

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError(f'timeout_ms must be positive, got {self.timeout_ms}')
        if self.filter_measurement_noise < 0 or self.filter_process_noise < 0:
            raise ValueError('Filter noise parameters must be non-negative')

    @classmethod
    def default(cls) -> 'RegistryConfig':
        """Preset with per-device smoothing."""
        return cls()

    @classmethod
    def raw(cls) -> 'RegistryConfig':
        """Preset without smoothing; smoothed_distance mirrors distance."""
        return cls(smoothing_enabled=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RegistryConfig':
        """
        Build a config from environment variables, falling back to defaults.

        Raises:
            ValueError: If PROXITRACK_TIMEOUT_MS is not an integer.
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        timeout = environ.get(ENV_TIMEOUT_MS)
        if timeout:
            kwargs['timeout_ms'] = int(timeout)

        smoothing = environ.get(ENV_SMOOTHING)
        if smoothing:
            kwargs['smoothing_enabled'] = smoothing.strip().lower() not in _FALSE_VALUES

        return cls(**kwargs)
