"""
Device tracking package for proxitrack.

Provides the device registry, segmented path-loss distance estimation,
per-device distance smoothing, and helpers for labelling devices.
"""

from .config import RegistryConfig
from .constants import (
    DEVICE_TIMEOUT_MS,
    UNKNOWN_DISTANCE,
    WIFI_PATH_LOSS_BUCKETS,
    BLUETOOTH_PATH_LOSS_BUCKETS,
    PathLossBucket,
)
from .device_type import (
    identify_device_type,
    is_audio_device,
    encryption_label,
    is_open_network,
)
from .distance import (
    DistanceEstimator,
    estimate,
    estimate_ble_simple,
    estimate_path_loss_exponent,
    estimate_wifi_simple,
    fit_path_loss,
    get_distance_estimator,
    path_loss_distance,
)
from .models import DeviceClass, Observation, RegistryStats, TrackedDevice
from .poller import ScanPoller
from .proximity import (
    ProximityCategory,
    proximity_category,
    proximity_level,
    signal_bars,
    signal_percent,
    signal_quality,
)
from .registry import DeviceRegistry
from .smoothing import DistanceFilter

__all__ = [
    # Registry
    'DeviceRegistry',
    'RegistryConfig',
    'ScanPoller',

    # Models
    'DeviceClass',
    'Observation',
    'TrackedDevice',
    'RegistryStats',

    # Distance estimation
    'DistanceEstimator',
    'ProximityCategory',
    'PathLossBucket',
    'estimate',
    'estimate_wifi_simple',
    'estimate_ble_simple',
    'get_distance_estimator',
    'path_loss_distance',
    'estimate_path_loss_exponent',
    'fit_path_loss',

    # Signal and proximity helpers
    'signal_quality',
    'signal_percent',
    'signal_bars',
    'proximity_category',
    'proximity_level',

    # Smoothing
    'DistanceFilter',

    # Labelling
    'identify_device_type',
    'is_audio_device',
    'encryption_label',
    'is_open_network',

    # Constants
    'DEVICE_TIMEOUT_MS',
    'UNKNOWN_DISTANCE',
    'WIFI_PATH_LOSS_BUCKETS',
    'BLUETOOTH_PATH_LOSS_BUCKETS',
]
