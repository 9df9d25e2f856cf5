import os
import random
import sys
import time
import pytest

# Ensure the backend root (containing the `ashagames` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from ashagames import create_app, db, socketio
from ashagames.services.games.scheduler import ManualScheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MEDICINE_HOUR_SEC = 1.0
    GAME_SEED = None
    SESSION_OWNER_GRACE_SEC = 0.0
    TIMER_HEARTBEAT_SEC = 0


class Recorder:
    """Stands in for the host: remembers every completion and close callback."""

    def __init__(self):
        self.completed = []
        self.closed = 0

    def on_complete(self, score, duration):
        self.completed.append((score, duration))

    def on_close(self):
        self.closed += 1


@pytest.fixture()
def flask_app():
    yield from _app_with(TestConfig)


class LiveTimerConfig(TestConfig):
    """Real background timers, with fast simulated hours and a short owner grace period."""
    ENABLE_SCHEDULER_IN_TESTS = True
    MEDICINE_HOUR_SEC = 0.01
    SESSION_OWNER_GRACE_SEC = 0.5


@pytest.fixture()
def timer_app():
    yield from _app_with(LiveTimerConfig)


def _app_with(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import ashagames.models  # noqa: F401
        from ashagames.services.games.catalog import ensure_catalog
        from ashagames.services.games import sessions
        db.create_all()
        ensure_catalog()
        yield application
        sessions.close_all()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def recorder():
    return Recorder()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def make_game(scheduler, recorder, rng):
    """Build a rule-set engine wired to the manual scheduler and the recorder."""
    def _make(cls, **kwargs):
        return cls(recorder.on_complete, recorder.on_close, scheduler=scheduler, rng=rng, **kwargs)
    return _make


@pytest.fixture()
def wait_for():
    """Poll a condition while background timers run; returns its final value."""
    def _wait(condition, timeout=5.0):
        deadline = time.time() + timeout
        while time.time() < deadline:
            if condition():
                return True
            time.sleep(0.02)
        return condition()
    return _wait
