"""
Device registry for scan observations.

Merges each scan cycle's observations into a keyed set of tracked devices,
maintains running RSSI statistics and distance estimates, and evicts
devices that have gone unseen longer than the timeout.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import Iterable, Optional

from ..logging import get_logger
from .config import RegistryConfig
from .distance import DistanceEstimator
from .models import DeviceClass, Observation, RegistryStats, TrackedDevice
from .smoothing import DistanceFilter

logger = get_logger('proxitrack.registry')


def monotonic_ms() -> int:
    """Default clock for update(): monotonic milliseconds."""
    return int(time.monotonic() * 1000)


class DeviceRegistry:
    """
    Deduplicated set of currently visible devices.

    Entries are keyed by identity and kept in first-seen order. Eviction is
    lazy: it only happens as the final step of update(), so a long gap
    between scans leaves stale entries visible until the next update.

    Every public operation holds one lock, so a registry may be shared
    between a scanning thread and request handlers.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        estimator: Optional[DistanceEstimator] = None,
    ):
        self._config = config or RegistryConfig()
        self._timeout_ms = self._config.timeout_ms
        self._estimator = estimator or DistanceEstimator(
            wifi_buckets=self._config.wifi_buckets,
            bluetooth_buckets=self._config.bluetooth_buckets,
        )
        self._devices: dict[str, TrackedDevice] = {}
        # identity -> filter, created and dropped together with the entry
        self._filters: dict[str, DistanceFilter] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def init(self) -> None:
        """Reset to an empty registry."""
        with self._lock:
            self._devices.clear()
            self._filters.clear()
        logger.info("Device tracking initialized")

    def update(
        self,
        observations: Iterable[Observation],
        now: Optional[int] = None,
    ) -> list[str]:
        """
        Merge one scan cycle's observations, then sweep stale entries.

        Observations are applied in order. Repeated identities within one
        batch are merged one after another, so the last one wins and each
        increments the seen count.

        Args:
            observations: Observations from one or more producers.
            now: Current time in milliseconds (defaults to a monotonic clock).

        Returns:
            Identities evicted by the sweep.
        """
        if now is None:
            now = monotonic_ms()

        with self._lock:
            for device in self._devices.values():
                device.is_new = False

            merged = 0
            for observation in observations:
                self._merge(observation, now)
                merged += 1

            evicted = self._sweep(now)
            tracked = len(self._devices)

        logger.debug(
            "Merged %d observations, evicted %d, tracking %d",
            merged, len(evicted), tracked,
        )
        return evicted

    def _merge(self, observation: Observation, now: int) -> None:
        """Apply a single observation. Caller holds the lock."""
        identity = observation.identity
        distance = self._estimator.estimate(observation.rssi, observation.device_class)
        device = self._devices.get(identity)

        if device is None:
            device = TrackedDevice(
                identity=identity,
                device_class=observation.device_class,
                name=observation.name,
                rssi=observation.rssi,
                avg_rssi=float(observation.rssi),
                distance=distance,
                channel=observation.channel,
                encryption=observation.encryption,
                first_seen=now,
                last_seen=now,
                seen_count=1,
                is_new=True,
            )
            self._devices[identity] = device
            if self._config.smoothing_enabled:
                self._filters[identity] = DistanceFilter(
                    initial_estimate=self._config.filter_initial_estimate,
                    measurement_noise=self._config.filter_measurement_noise,
                    process_noise=self._config.filter_process_noise,
                )
            self._update_smoothed(device)

            logger.info(
                "[NEW] %s | %s | %s",
                device.device_class.label,
                device.display_name,
                f"{distance:.1f}m" if device.has_distance else "?",
            )
            return

        device.name = observation.name
        device.rssi = observation.rssi
        device.distance = distance
        if observation.channel is not None:
            device.channel = observation.channel
        if observation.encryption is not None:
            device.encryption = observation.encryption
        device.last_seen = max(device.last_seen, now)
        device.seen_count += 1

        # Incremental mean over every merged observation
        n = device.seen_count
        device.avg_rssi = (device.avg_rssi * (n - 1) + observation.rssi) / n

        self._update_smoothed(device)

    def _update_smoothed(self, device: TrackedDevice) -> None:
        """Feed the entry's filter. The unknown sentinel is never filtered."""
        distance_filter = self._filters.get(device.identity)
        if distance_filter is None:
            device.smoothed_distance = device.distance if device.has_distance else None
            return

        if device.has_distance:
            device.smoothed_distance = distance_filter.update(device.distance)

    def _sweep(self, now: int) -> list[str]:
        """Remove entries idle longer than the timeout. Caller holds the lock."""
        stale = [
            identity for identity, device in self._devices.items()
            if now - device.last_seen > self._timeout_ms
        ]
        for identity in stale:
            device = self._devices.pop(identity)
            self._filters.pop(identity, None)
            logger.info("[LOST] %s (%s)", device.name or '', identity)
        return stale

    def get_all(self) -> list[TrackedDevice]:
        """Independent copies of every entry."""
        with self._lock:
            return [replace(device) for device in self._devices.values()]

    def get_by_class(self, device_class: DeviceClass) -> list[TrackedDevice]:
        """Independent copies of entries of one class."""
        with self._lock:
            return [
                replace(device) for device in self._devices.values()
                if device.device_class == device_class
            ]

    def get_nearby(self, max_distance: float) -> list[TrackedDevice]:
        """
        Entries with distance <= max_distance, closest first.

        The sort is stable, so equal distances keep registry order. Entries
        holding the unknown-distance sentinel (-1) compare as closer than
        any real estimate and are included.
        """
        with self._lock:
            nearby = [
                replace(device) for device in self._devices.values()
                if device.distance <= max_distance
            ]
        nearby.sort(key=lambda d: d.distance)
        return nearby

    def get_by_identity(self, identity: str) -> Optional[TrackedDevice]:
        """The live entry for identity, or None if it is not tracked."""
        with self._lock:
            return self._devices.get(identity)

    def snapshot(self, identity: str) -> Optional[TrackedDevice]:
        """An independent copy of identity's entry, or None if it is not tracked."""
        with self._lock:
            device = self._devices.get(identity)
            return replace(device) if device is not None else None

    def get_filter(self, identity: str) -> Optional[DistanceFilter]:
        """The smoothing filter owned by identity's entry, if any."""
        with self._lock:
            return self._filters.get(identity)

    def count(self) -> int:
        with self._lock:
            return len(self._devices)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._devices

    def clear(self) -> None:
        """Remove all tracked devices."""
        with self._lock:
            self._devices.clear()
            self._filters.clear()
        logger.info("All tracked devices cleared")

    def stats(self) -> RegistryStats:
        """Counts per class and the closest device with a known distance."""
        with self._lock:
            by_class = {device_class.value: 0 for device_class in DeviceClass}
            closest: Optional[TrackedDevice] = None
            for device in self._devices.values():
                by_class[device.device_class.value] += 1
                if device.has_distance and (closest is None or device.distance < closest.distance):
                    closest = device

            return RegistryStats(
                total=len(self._devices),
                by_class=by_class,
                closest=replace(closest) if closest else None,
            )

    def log_stats(self) -> RegistryStats:
        """Write a statistics summary to the log and return it."""
        stats = self.stats()
        logger.info("=== Device Tracking Statistics ===")
        logger.info("Total devices: %d", stats.total)
        logger.info("WiFi APs: %d", stats.by_class[DeviceClass.WIFI_AP.value])
        logger.info("BLE Devices: %d", stats.by_class[DeviceClass.BLUETOOTH.value])
        logger.info("WiFi Clients: %d", stats.by_class[DeviceClass.WIFI_CLIENT.value])
        if stats.closest is not None:
            logger.info(
                "Closest device: %s (%.2fm)",
                stats.closest.display_name, stats.closest.distance,
            )
        return stats
