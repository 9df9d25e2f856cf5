"""Shared lifecycle for the mini-games.

A ``GameEngine`` owns one play session at a time. The host drives it through
``start()``, ``submit_action()`` and ``close()``; the engine reports back only
through ``on_complete(score, duration)`` and ``on_close()``.

Rule sets subclass the engine and supply content generation (``reset``),
action handling (``handle_action``), the end bonus and their own view of the
state. Timing goes through the injected scheduler so that every pending
callback can be cancelled when the session ends or is discarded.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .scheduler import Scheduler, TimerHandle


logger = logging.getLogger(__name__)


class GameStateError(RuntimeError):
    """Raised on a lifecycle transition the transition table does not allow."""


class Phase(str, Enum):
    NOT_STARTED = 'not_started'
    RUNNING = 'running'
    ENDED = 'ended'
    CLOSED = 'closed'


TRANSITIONS = {
    Phase.NOT_STARTED: {Phase.RUNNING, Phase.CLOSED},
    Phase.RUNNING: {Phase.ENDED, Phase.CLOSED},
    Phase.ENDED: {Phase.RUNNING, Phase.CLOSED},
    Phase.CLOSED: set(),
}

# Finish reasons that mean the player did not get through the content
INCOMPLETE_REASONS = {'timeout', 'wrong_input'}


@dataclass
class ActionResult:
    accepted: bool
    feedback: Optional[str] = None
    points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'accepted': self.accepted, 'feedback': self.feedback, 'points': self.points}


@dataclass
class Outcome:
    score: int
    duration: int
    reason: str
    bonus: int = 0
    level: int = 1
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def completed(self) -> bool:
        """True when the player got through all of the content."""
        return self.reason not in INCOMPLETE_REASONS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completed': self.completed,
            'score': self.score,
            'duration': self.duration,
            'reason': self.reason,
            'bonus': self.bonus,
            'level': self.level,
            'summary': self.summary,
        }


def as_int(value: Any) -> Optional[int]:
    """Read a whole number from JSON input. Booleans and fractional floats are not numbers here."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def read_index(payload: Any, key: str, size: int) -> Optional[int]:
    """Return ``payload[key]`` as an index into a sequence of ``size``, or None."""
    if not isinstance(payload, dict):
        return None
    value = as_int(payload.get(key))
    if value is not None and 0 <= value < size:
        return value
    return None


class GameEngine:
    name = ''
    # Countdown length in seconds; None means no countdown.
    time_limit: Optional[int] = None
    tick_interval = 1.0
    ticks = True

    def __init__(self, on_complete: Callable[[int, int], None], on_close: Optional[Callable[[], None]] = None,
                 *, scheduler: Scheduler, rng: Optional[random.Random] = None):
        self.on_complete = on_complete
        self.on_close = on_close
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.phase = Phase.NOT_STARTED
        self.score = 0
        self.round_index = 0
        self.time_remaining = self.time_limit
        self.started_at: Optional[float] = None
        self.feedback: Optional[str] = None
        self.outcome: Optional[Outcome] = None
        self._tick_handle: Optional[TimerHandle] = None
        self._window_handle: Optional[TimerHandle] = None

    @classmethod
    def options_from_config(cls, config) -> Dict[str, Any]:
        """Constructor keyword arguments taken from the host's config."""
        return {}

    # ---- lifecycle ----

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def blocking(self) -> bool:
        return self._window_handle is not None

    def start(self) -> bool:
        if self.phase not in (Phase.NOT_STARTED, Phase.ENDED):
            logger.info(f"[game-start-skip] game={self.name} phase={self.phase.value}")
            return False
        self._cancel_timers()
        self._transition(Phase.RUNNING)
        self.score = 0
        self.round_index = 0
        self.time_remaining = self.time_limit
        self.feedback = None
        self.outcome = None
        self.started_at = self.scheduler.time()
        self.reset()
        self._schedule_tick()
        logger.info(f"[game-start] game={self.name} time_limit={self.time_limit}")
        return True

    def submit_action(self, payload: Any) -> ActionResult:
        if self.phase is not Phase.RUNNING:
            return ActionResult(False, 'The game is not running.')
        if self.blocking:
            return ActionResult(False, 'Please wait.')
        return self.handle_action(payload)

    def close(self) -> bool:
        if self.phase is Phase.CLOSED:
            return False
        self._cancel_timers()
        self._transition(Phase.CLOSED)
        logger.info(f"[game-close] game={self.name} score_reported={self.outcome is not None}")
        if self.on_close:
            self.on_close()
        return True

    def finish(self, reason: str) -> Optional[Outcome]:
        if self.phase is not Phase.RUNNING:
            return self.outcome
        self._cancel_timers()
        self._transition(Phase.ENDED)
        self.feedback = None
        self.before_finish()
        bonus = self.end_bonus()
        self.score = max(0, self.score + bonus)
        duration = max(0, int(self.scheduler.time() - self.started_at))
        self.outcome = Outcome(
            score=self.score,
            duration=duration,
            reason=reason,
            bonus=bonus,
            level=self.level_reached(),
            summary=self.summary(),
        )
        logger.info(f"[game-end] game={self.name} reason={reason} score={self.score} bonus={bonus} duration={duration}s")
        self.on_complete(self.score, duration)
        return self.outcome

    def _transition(self, target: Phase) -> None:
        if target not in TRANSITIONS[self.phase]:
            raise GameStateError(f'{self.name}: cannot go from {self.phase.value} to {target.value}')
        self.phase = target

    # ---- timers ----

    def _schedule_tick(self) -> None:
        if not self.ticks or self.phase is not Phase.RUNNING:
            return
        if self._tick_handle is not None or self._window_handle is not None:
            return
        self._tick_handle = self.scheduler.call_later(self.tick_interval, self._on_tick)

    def _on_tick(self) -> None:
        self._tick_handle = None
        if self.phase is not Phase.RUNNING:
            return
        self.tick()
        self._schedule_tick()

    def tick(self) -> None:
        if self.time_remaining is None:
            return
        self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.time_remaining = 0
            self.finish('timeout')

    def reset_countdown(self) -> None:
        self.time_remaining = self.time_limit

    def hold(self, seconds: float, then: Callable[[], None], message: Optional[str] = None) -> None:
        """Open a blocking window.

        The countdown is paused and actions are refused until the window
        closes; then ``then`` runs and ticking resumes.
        """
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self.feedback = message
        self._window_handle = self.scheduler.call_later(seconds, lambda: self._release(then))

    def _release(self, then: Callable[[], None]) -> None:
        self._window_handle = None
        if self.phase is not Phase.RUNNING:
            return
        self.feedback = None
        then()
        self._schedule_tick()

    def _cancel_timers(self) -> None:
        for handle in (self._tick_handle, self._window_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._window_handle = None

    # ---- rule set hooks ----

    def reset(self) -> None:
        """Regenerate content for a fresh session."""

    def handle_action(self, payload: Any) -> ActionResult:
        raise NotImplementedError

    def before_finish(self) -> None:
        pass

    def end_bonus(self) -> int:
        return 0

    def level_reached(self) -> int:
        return 1

    def summary(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'game': self.name,
            'phase': self.phase.value,
            'score': self.score,
            'round': self.round_index,
            'time_remaining': self.time_remaining,
            'feedback': self.feedback,
            'blocking': self.blocking,
            'outcome': self.outcome.to_dict() if self.outcome else None,
        }
        if self.started_at is not None:
            data.update(self.describe())
        return data
