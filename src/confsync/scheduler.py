import logging
import threading
import time
from typing import Callable

from confsync.config import ScheduleType

logger = logging.getLogger(__name__)


class ScheduledRunner:
    """Runs a job periodically on one background thread.

    With ``FIXED_RATE`` the interval is measured from the start of a run,
    with ``FIXED_DELAY`` from its end. Runs never overlap: a run that takes
    longer than the interval delays the next one.
    """

    def __init__(
        self,
        job: Callable[[], object],
        schedule_type: ScheduleType = ScheduleType.FIXED_RATE,
        initial_delay: float = 0,
        duration: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.job = job
        self.schedule_type = schedule_type
        self.initial_delay = initial_delay
        self.duration = duration
        self._clock = clock
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        if self._thread is not None:
            raise RuntimeError("runner already started")
        self._thread = threading.Thread(target=self.run_forever, name="confsync-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None):
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def run_forever(self):
        if self._stopped.wait(self.initial_delay):
            return
        while not self._stopped.is_set():
            started = self._clock()
            self.run_once()
            if self.schedule_type is ScheduleType.FIXED_RATE:
                delay = max(0.0, self.duration - (self._clock() - started))
            else:
                delay = self.duration
            if self._stopped.wait(delay):
                return

    def run_once(self):
        try:
            self.job()
        except Exception:
            logger.exception("Scheduled job %r failed", self.job)
