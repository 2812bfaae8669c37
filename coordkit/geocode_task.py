"""Batch geocoding task.

Addresses are processed strictly one after another with a fixed pause
between requests. A failing address is recorded and the batch moves on.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .geocoding_base import CoordkitError, GeocodeResult

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SEC = 0.5


@dataclass
class BatchItem:
    address: str
    success: bool
    result: Optional[GeocodeResult] = None
    error: str = ''

    @property
    def found(self) -> bool:
        return self.success and self.result is not None


class BatchGeocodeTask:
    def __init__(
        self,
        addresses: Sequence[str],
        geocode_fn: Callable[[str], List[GeocodeResult]],
        delay: float = DEFAULT_DELAY_SEC,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        finished_callback: Optional[Callable[[int, int, int], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.addresses = [a.strip() for a in addresses if a and a.strip()]
        self.geocode_fn = geocode_fn
        self.delay = delay
        self._progress_callback = progress_callback
        self._finished_callback = finished_callback
        self._sleep = sleep
        # counters
        self.added = 0
        self.failed = 0
        self.processed = 0
        self.items: List[BatchItem] = []

    def run(self) -> List[BatchItem]:
        total = len(self.addresses)
        for i, addr in enumerate(self.addresses):
            try:
                results = self.geocode_fn(addr)
            except CoordkitError as ex:
                logger.info("batch item %r failed: %s", addr, ex)
                self.items.append(BatchItem(addr, False, error=str(ex)))
                self.failed += 1
            else:
                item = BatchItem(addr, True, result=results[0] if results else None)
                self.items.append(item)
                if item.found:
                    self.added += 1
            self.processed += 1
            if self._progress_callback:
                self._progress_callback(i + 1, total)
            if i + 1 < total and self.delay > 0:
                self._sleep(self.delay)
        if self._finished_callback:
            self._finished_callback(self.added, self.failed, self.processed)
        return self.items
