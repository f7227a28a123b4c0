"""
Data models for device tracking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import (
    DEVICE_CLASS_BLUETOOTH,
    DEVICE_CLASS_WIFI_AP,
    DEVICE_CLASS_WIFI_CLIENT,
    UNKNOWN_DISTANCE,
)
from .proximity import (
    proximity_category,
    proximity_level,
    signal_bars,
    signal_percent,
    signal_quality,
)


class DeviceClass(str, Enum):
    """Kinds of wireless emitter the registry tracks."""
    WIFI_AP = DEVICE_CLASS_WIFI_AP
    WIFI_CLIENT = DEVICE_CLASS_WIFI_CLIENT
    BLUETOOTH = DEVICE_CLASS_BLUETOOTH

    def __str__(self) -> str:
        return self.value

    @property
    def is_wifi(self) -> bool:
        return self is not DeviceClass.BLUETOOTH

    @property
    def label(self) -> str:
        return _CLASS_LABELS[self]


_CLASS_LABELS = {
    DeviceClass.WIFI_AP: 'WiFi AP',
    DeviceClass.WIFI_CLIENT: 'WiFi',
    DeviceClass.BLUETOOTH: 'BLE',
}


@dataclass(frozen=True)
class Observation:
    """A single reading of one device taken during one scan cycle."""
    identity: str
    rssi: int
    device_class: DeviceClass
    name: Optional[str] = None
    channel: Optional[int] = None
    encryption: Optional[str] = None


@dataclass
class TrackedDevice:
    """
    Registry entry for a device that is currently considered visible.

    Timestamps are milliseconds on the clock passed to DeviceRegistry.update().
    """
    identity: str
    device_class: DeviceClass
    rssi: int
    avg_rssi: float
    distance: float
    first_seen: int
    last_seen: int
    name: Optional[str] = None
    channel: Optional[int] = None
    encryption: Optional[str] = None
    smoothed_distance: Optional[float] = None
    seen_count: int = 1
    is_new: bool = True

    @property
    def has_distance(self) -> bool:
        """Whether distance holds a real estimate rather than the sentinel."""
        return self.distance != UNKNOWN_DISTANCE

    @property
    def age_ms(self) -> int:
        """Time between first and last sighting."""
        return self.last_seen - self.first_seen

    def idle_ms(self, now: int) -> int:
        return now - self.last_seen

    @property
    def display_name(self) -> str:
        return self.name or self.identity

    def to_summary_dict(self) -> dict:
        """Compact representation for device lists."""
        return {
            'identity': self.identity,
            'name': self.name,
            'device_class': self.device_class.value,
            'rssi': self.rssi,
            'avg_rssi': round(self.avg_rssi, 1),
            'distance_m': round(self.distance, 2) if self.has_distance else None,
            'smoothed_distance_m': (
                round(self.smoothed_distance, 2) if self.smoothed_distance is not None else None
            ),
            'proximity': str(proximity_category(self.distance)),
            'signal_quality': signal_quality(self.rssi),
            'seen_count': self.seen_count,
            'last_seen': self.last_seen,
            'is_new': self.is_new,
        }

    def to_dict(self) -> dict:
        """Full representation including timing and radio details."""
        data = self.to_summary_dict()
        data.update({
            'channel': self.channel,
            'encryption': self.encryption,
            'first_seen': self.first_seen,
            'age_ms': self.age_ms,
            'signal_percent': signal_percent(self.rssi),
            'signal_bars': signal_bars(self.rssi),
            'proximity_level': proximity_level(self.distance),
        })
        return data


@dataclass
class RegistryStats:
    """Point-in-time summary of registry contents."""
    total: int = 0
    by_class: dict[str, int] = field(default_factory=dict)
    closest: Optional[TrackedDevice] = None

    def to_dict(self) -> dict:
        return {
            'total': self.total,
            'by_class': dict(self.by_class),
            'closest': self.closest.to_summary_dict() if self.closest else None,
        }
