"""
Scan cycle driver.

Collects one batch per producer and merges them into a registry with a
single update() call per cycle. Runs in the caller's thread.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional, Sequence

from ..logging import get_logger
from .constants import DEFAULT_SCAN_INTERVAL
from .models import Observation
from .registry import DeviceRegistry

logger = get_logger('proxitrack.poller')

Producer = Callable[[], Iterable[Observation]]


class ScanPoller:
    """
    Drives periodic scan cycles against a registry.

    Producers are zero-argument callables returning one scan's observations,
    e.g. one for WiFi and one for Bluetooth. A failing producer is logged
    and contributes nothing to that cycle.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        producers: Sequence[Producer],
        interval_s: float = DEFAULT_SCAN_INTERVAL,
        clock: Optional[Callable[[], int]] = None,
    ):
        if interval_s < 0:
            raise ValueError('interval_s must be non-negative')
        self.registry = registry
        self.producers = list(producers)
        self.interval_s = interval_s
        self._clock = clock
        self.cycle_count = 0

    def _collect(self) -> list[Observation]:
        batch: list[Observation] = []
        for producer in self.producers:
            try:
                found = list(producer())
            except Exception:
                logger.exception("Producer %r failed, skipping this cycle", producer)
                continue
            logger.debug("Producer %r returned %d observations", producer, len(found))
            batch.extend(found)
        return batch

    def run_once(self, now: Optional[int] = None) -> list[str]:
        """
        Run one scan cycle.

        Returns:
            Identities evicted by this cycle's update.
        """
        batch = self._collect()
        if now is None and self._clock is not None:
            now = self._clock()

        evicted = self.registry.update(batch, now=now)
        self.cycle_count += 1
        logger.info(
            "Scan complete: %d observations, %d tracked",
            len(batch), self.registry.count(),
        )
        return evicted

    def run(self, stop_event: threading.Event, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles every interval_s until stop_event is set.

        Args:
            stop_event: Set from another thread to stop after the current cycle.
            max_cycles: Optional limit on the number of cycles.

        Returns:
            Number of cycles run.
        """
        cycles = 0
        while not stop_event.is_set():
            self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            stop_event.wait(self.interval_s)
        return cycles
