"""
Constants for device tracking and distance estimation.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

# =============================================================================
# REGISTRY SETTINGS
# =============================================================================

# Entry expiration time (milliseconds since last seen)
DEVICE_TIMEOUT_MS = 60_000  # 1 minute

# Default interval between scan cycles (seconds)
DEFAULT_SCAN_INTERVAL = 3.0

# =============================================================================
# DEVICE CLASSES
# =============================================================================

DEVICE_CLASS_WIFI_AP = 'wifi_ap'
DEVICE_CLASS_WIFI_CLIENT = 'wifi_client'
DEVICE_CLASS_BLUETOOTH = 'bluetooth'

# =============================================================================
# DISTANCE ESTIMATION SETTINGS
# =============================================================================

# Returned for invalid readings (RSSI == 0)
UNKNOWN_DISTANCE = -1.0

# Generic single-bucket model defaults
DEFAULT_TX_POWER = -59
DEFAULT_PATH_LOSS_EXPONENT = 2.0

# RSSI clamp applied by the generic model only
RSSI_CLAMP_MIN = -100
RSSI_CLAMP_MAX = -1

# Legacy single-bucket parameters
WIFI_SIMPLE_TX_POWER = -50
WIFI_SIMPLE_PATH_LOSS = 2.5
BLE_SIMPLE_TX_POWER = -59
BLE_SIMPLE_PATH_LOSS = 2.0

# Bounds for estimated path-loss exponents
PATH_LOSS_EXPONENT_MIN = 1.5
PATH_LOSS_EXPONENT_MAX = 5.0
PATH_LOSS_EXPONENT_FALLBACK = 2.0  # Free space


class PathLossBucket(NamedTuple):
    """
    One RSSI range of a segmented path-loss model.

    Applies when rssi >= min_rssi (None matches everything). A bucket with
    a fixed_distance skips the formula entirely.
    """
    min_rssi: Optional[int]
    tx_power: Optional[int] = None
    exponent: Optional[float] = None
    fixed_distance: Optional[float] = None


# Calibrated for 2.4 GHz access points, strongest bucket first
WIFI_PATH_LOSS_BUCKETS: tuple[PathLossBucket, ...] = (
    PathLossBucket(min_rssi=-30, fixed_distance=0.5),         # near-field saturation
    PathLossBucket(min_rssi=-50, tx_power=-40, exponent=2.2),  # close (1-3m)
    PathLossBucket(min_rssi=-70, tx_power=-45, exponent=2.7),  # medium (3-15m)
    PathLossBucket(min_rssi=None, tx_power=-50, exponent=3.5),  # far (15m+)
)

# Calibrated for phones, headphones and trackers
BLUETOOTH_PATH_LOSS_BUCKETS: tuple[PathLossBucket, ...] = (
    PathLossBucket(min_rssi=-35, fixed_distance=0.3),
    PathLossBucket(min_rssi=-59, tx_power=-59, exponent=2.0),
    PathLossBucket(min_rssi=-75, tx_power=-62, exponent=2.5),
    PathLossBucket(min_rssi=None, tx_power=-65, exponent=3.2),
)

# =============================================================================
# SIGNAL QUALITY
# =============================================================================

SIGNAL_EXCELLENT = 'Excellent'
SIGNAL_GOOD = 'Good'
SIGNAL_FAIR = 'Fair'
SIGNAL_WEAK = 'Weak'
SIGNAL_VERY_WEAK = 'Very Weak'

# (minimum rssi, label), strongest first
SIGNAL_QUALITY_THRESHOLDS = (
    (-50, SIGNAL_EXCELLENT),
    (-60, SIGNAL_GOOD),
    (-70, SIGNAL_FAIR),
    (-80, SIGNAL_WEAK),
)

# (minimum rssi, bars), strongest first; anything weaker is 0 bars
SIGNAL_BAR_THRESHOLDS = (
    (-50, 5),
    (-60, 4),
    (-70, 3),
    (-80, 2),
    (-90, 1),
)

# Percentage mapping endpoints (dBm)
SIGNAL_PERCENT_FLOOR = -90   # 0%
SIGNAL_PERCENT_CEILING = -30  # 100%

# =============================================================================
# PROXIMITY
# =============================================================================

# (upper distance bound in meters, category)
PROXIMITY_CATEGORY_THRESHOLDS = (
    (1.0, 'immediate'),
    (3.0, 'near'),
    (10.0, 'medium'),
)

# (upper distance bound in meters, level); beyond the last bound is level 5
PROXIMITY_LEVEL_THRESHOLDS = (
    (0.5, 1),
    (2.0, 2),
    (5.0, 3),
    (15.0, 4),
)
PROXIMITY_LEVEL_UNKNOWN = 0
PROXIMITY_LEVEL_MAX = 5

# =============================================================================
# SMOOTHING FILTER DEFAULTS
# =============================================================================

FILTER_INITIAL_ESTIMATE = 5.0
FILTER_INITIAL_ERROR = 1.0
FILTER_MEASUREMENT_NOISE = 1.0
FILTER_PROCESS_NOISE = 0.1

# =============================================================================
# WIFI SECURITY
# =============================================================================

ENCRYPTION_OPEN = 'open'

ENCRYPTION_LABELS = {
    'open': 'Open',
    'wep': 'WEP',
    'wpa_psk': 'WPA',
    'wpa2_psk': 'WPA2',
    'wpa_wpa2_psk': 'WPA/WPA2',
    'wpa2_enterprise': 'WPA2-E',
    'wpa3_psk': 'WPA3',
}

ENCRYPTION_UNKNOWN = 'Unknown'

# =============================================================================
# BLUETOOTH DEVICE TYPE IDENTIFICATION
# =============================================================================

# GAP appearance ranges (inclusive) -> label
APPEARANCE_RANGES = (
    (832, 895, 'Headphones/Earbuds'),
    (896, 959, 'Speaker'),
    (960, 1023, 'Headset'),
    (1024, 1087, 'Keyboard'),
    (1088, 1151, 'Mouse'),
    (1152, 1215, 'Gamepad'),
    (576, 576, 'Watch'),
    (577, 577, 'Fitness Tracker'),
    (704, 767, 'Display'),
    (256, 319, 'Phone'),
)

# 16-bit service UUIDs, checked in order
SERVICE_UUID_LABELS = (
    ('110B', 'Audio Source'),
    ('110A', 'Audio Sink'),
    ('180F', 'Battery Service'),
    ('1812', 'HID Device'),
    ('180A', 'Device Info'),
    ('181C', 'Fitness Device'),
)

COMPANY_ID_LABELS = {
    0x004C: 'Apple Device',
    0x0075: 'Samsung Device',
    0x00E0: 'Google Device',
    0x0006: 'Microsoft Device',
    0x0087: 'Garmin Device',
    0x0157: 'Bose Device',
    0x00A8: 'Sony Device',
}

UNKNOWN_BLE_LABEL = 'Unknown BLE'

AUDIO_LABEL_KEYWORDS = ('Headphones', 'Speaker', 'Headset', 'Audio', 'Earbuds')
