import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional

from ashagames import socketio


logger = logging.getLogger(__name__)


class TimerHandle:
    """A pending callback. Cancelling it guarantees the callback never runs."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> bool:
        if not self.active:
            return False
        self.fired = True
        self.callback()
        return True


class Scheduler:
    """Clock plus delayed callbacks. Engines read time and schedule ticks only through this."""

    def time(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """Virtual clock stepped explicitly with advance()."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: list = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing everything that falls due on the way.

        Callbacks scheduled while advancing fire too if they are due before the
        target time. Returns the number of callbacks fired.
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = due
            handle.fire()
            fired += 1
        self.now = target
        return fired

    def pending(self) -> List[TimerHandle]:
        return [entry[2] for entry in self._queue if entry[2].active]


class BackgroundScheduler(Scheduler):
    """Runs each timer as a Socket.IO background task.

    The worker sleeps for the delay, then fires the handle under ``lock`` inside
    an app context. A handle cancelled while sleeping is dropped.
    """

    def __init__(self, app, lock, on_fired: Optional[Callable[[], None]] = None, label: str = ''):
        self.app = app
        self.lock = lock
        self.on_fired = on_fired
        self.label = label

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, callback)
        logger.debug(f"[timer-set] session={self.label} delay={delay}s")
        socketio.start_background_task(self._worker, handle)
        return handle

    def _sleep(self, delay: float) -> None:
        hb = int(self.app.config.get('TIMER_HEARTBEAT_SEC', 0) or 0)
        if hb <= 0:
            socketio.sleep(delay)
            return
        slept = 0.0
        while slept < delay:
            step = min(hb, delay - slept)
            socketio.sleep(step)
            slept += step
            logger.info(f"[timer-heartbeat] session={self.label} remaining={max(0.0, delay - slept)}s")

    def _worker(self, handle: TimerHandle) -> None:
        self._sleep(handle.delay)
        with self.lock:
            if not handle.active:
                logger.debug(f"[timer-abort] session={self.label} handle cancelled")
                return
            with self.app.app_context():
                handle.fire()
                if self.on_fired:
                    self.on_fired()
