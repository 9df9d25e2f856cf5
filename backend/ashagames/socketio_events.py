from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from ashagames import socketio
from ashagames.services.games import sessions
from typing import Dict, Any
import time


_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_close_deadline: Dict[str, float] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # If this socket owned a session and no other owner remains, close the
    # session so its timers stop
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    code = ctx.get('session_code')
    if ctx.get('is_session_owner') and code:
        _owner_count[code] = max(0, _owner_count.get(code, 0) - 1)
        if current_app.config.get('TESTING') and not current_app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            if _owner_count.get(code, 0) == 0:
                _close_session(code)
            return
        _schedule_close_if_no_owner(code, float(current_app.config.get('SESSION_OWNER_GRACE_SEC', 2.0)))


def handle_join_session(data):
    code = (data or {}).get('session_code')
    is_session_owner = bool((data or {}).get('is_session_owner'))
    if not code:
        emit('error', {'message': 'session_code is required'})
        return
    code = code.upper()
    room = sessions.session_room(code)
    join_room(room)
    _sid_to_ctx[_get_sid()] = {'session_code': code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _close_deadline.pop(code, None)
    emit('joined', {'room': room})


def handle_leave_session(data):
    code = (data or {}).get('session_code')
    if not code:
        emit('error', {'message': 'session_code is required'})
        return
    code = code.upper()
    room = sessions.session_room(code)
    leave_room(room)
    emit('left', {'room': room})
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('session_code') == code:
        # Explicit quit by the owner closes immediately
        _close_session(code)


def handle_ping(data):
    emit('pong', data or {})


def _close_session(code: str) -> None:
    """Discard the live session without scoring and forget its owners."""
    sessions.close_session(code)
    _owner_count.pop(code, None)
    _close_deadline.pop(code, None)


def _schedule_close_if_no_owner(code: str, delay_sec: float) -> None:
    if _owner_count.get(code, 0) > 0:
        return
    _close_deadline[code] = time.time() + delay_sec
    app = current_app._get_current_object()

    def _runner(session_code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(session_code, 0) == 0 and _close_deadline.get(session_code) == deadline:
            with app.app_context():
                _close_session(session_code)

    socketio.start_background_task(_runner, code, _close_deadline[code])


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_session', handle_join_session, namespace=namespace)
        socketio.on_event('leave_session', handle_leave_session, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
