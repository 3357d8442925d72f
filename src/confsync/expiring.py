import logging
import threading
import time
from datetime import timedelta
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExpiringValue(Generic[T]):
    """A single value recomputed by ``producer`` once it is older than ``ttl``.

    Recomputation only happens when ``value`` is read. The reading thread
    runs the producer while holding a lock, so concurrent readers of a
    stale value wait for that one recomputation and then share its result.
    """

    def __init__(self, producer: Callable[[], T], ttl: timedelta, clock: Callable[[], float] = time.monotonic):
        self._producer = producer
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._lock = threading.Lock()
        self._value: T | None = None
        self._computed_at: float | None = None

    def _is_stale(self) -> bool:
        return self._computed_at is None or self._clock() - self._computed_at >= self._ttl

    @property
    def value(self) -> T:
        if not self._is_stale():
            return self._value
        with self._lock:
            # another reader may have refreshed while we waited
            if self._is_stale():
                logger.debug("Recomputing expired value from %r", self._producer)
                self._value = self._producer()
                self._computed_at = self._clock()
            return self._value
