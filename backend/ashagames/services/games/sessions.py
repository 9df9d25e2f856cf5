import logging
import random
import string
import threading
import time
from typing import Dict, Optional

from ashagames import socketio
from ashagames.models import Game
from .engine import Phase
from .generators import make_rng
from .minigames import GAME_TYPES
from .progress import record_session
from .scheduler import BackgroundScheduler, ManualScheduler, Scheduler


logger = logging.getLogger(__name__)

_live_sessions: Dict[str, 'LiveSession'] = {}


def session_room(code: str) -> str:
    return f"session:{code}"


def generate_session_code(length: int = 6) -> str:
    """Generate a short code not used by any live session."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _live_sessions:
            return code


class LiveSession:
    """One running mini-game owned by the server.

    Holds the engine, its scheduler and the lock that serialises HTTP actions
    with timer callbacks.
    """

    def __init__(self, app, code: str, game: Game, user_id: str):
        self.code = code
        self.game_id = game.id
        self.game_name = game.name
        self.user_id = user_id
        self.lock = threading.RLock()
        self.created_at = time.time()
        self.ended_at: Optional[float] = None
        self.scheduler = self._make_scheduler(app)
        seed = app.config.get('GAME_SEED')
        engine_cls = GAME_TYPES[game.name]
        self.engine = engine_cls(
            self._on_complete,
            self._on_close,
            scheduler=self.scheduler,
            rng=make_rng(int(seed) if seed is not None else None),
            **engine_cls.options_from_config(app.config),
        )

    def _make_scheduler(self, app) -> Scheduler:
        if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            return ManualScheduler()
        return BackgroundScheduler(app, self.lock, on_fired=self.push_state, label=self.code)

    def emit(self, event: str, payload: Optional[dict] = None) -> None:
        data = {'session_code': self.code}
        data.update(payload or {})
        socketio.emit(event, data, to=session_room(self.code), namespace='/ws')

    def push_state(self) -> None:
        self.emit('state_update', {'phase': self.engine.phase.value})

    def _on_complete(self, score: int, duration: int) -> None:
        outcome = self.engine.outcome
        self.ended_at = time.time()
        record_session(self.game_id, self.user_id, outcome)
        logger.info(f"[session-complete] session={self.code} game={self.game_name} user={self.user_id} score={score} duration={duration}s")
        self.emit('game_completed', {'score': score, 'duration': duration})

    def _on_close(self) -> None:
        _live_sessions.pop(self.code, None)
        logger.info(f"[session-closed] session={self.code} game={self.game_name}")
        self.emit('session_closed')

    def idle_since(self) -> Optional[float]:
        """When play last stopped, or None while the game is running or closed."""
        phase = self.engine.phase
        if phase is Phase.NOT_STARTED:
            return self.created_at
        if phase is Phase.ENDED:
            return self.ended_at
        return None

    def to_dict(self) -> dict:
        data = self.engine.to_dict()
        data.update({'session_code': self.code, 'user_id': self.user_id})
        return data


def create_session(app, game: Game, user_id: str) -> LiveSession:
    reap_idle(float(app.config.get('SESSION_IDLE_TTL_SEC', 600)))
    code = generate_session_code()
    live = LiveSession(app, code, game, user_id)
    _live_sessions[code] = live
    logger.info(f"[session-create] session={code} game={game.name} user={user_id}")
    return live


def get_session(code: str) -> Optional[LiveSession]:
    return _live_sessions.get((code or '').upper())


def close_session(code: str) -> bool:
    live = get_session(code)
    if not live:
        return False
    with live.lock:
        return live.engine.close()


def reap_idle(ttl: float, now: Optional[float] = None) -> int:
    """Close sessions left unstarted or finished for at least ``ttl`` seconds."""
    now = time.time() if now is None else now
    reaped = 0
    for code, live in list(_live_sessions.items()):
        with live.lock:
            since = live.idle_since()
            if since is None or now - since < ttl:
                continue
            logger.info(f"[session-reap] session={code} phase={live.engine.phase.value} idle={int(now - since)}s")
            live.engine.close()
        reaped += 1
    return reaped


def close_all() -> None:
    for code in list(_live_sessions):
        close_session(code)
