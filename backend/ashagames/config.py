import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///ashagames.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Medicine-schedule game: wall-clock seconds per simulated hour
    MEDICINE_HOUR_SEC = float(os.environ.get('MEDICINE_HOUR_SEC', '1'))
    # Optional fixed seed for game content; unset means fresh randomness per session
    GAME_SEED = os.environ.get('GAME_SEED') or None
    # Grace period before a session whose owner disconnected is closed (seconds)
    SESSION_OWNER_GRACE_SEC = float(os.environ.get('SESSION_OWNER_GRACE_SEC', '2'))
    # Unstarted or finished sessions idle this long are closed when a new one is created
    SESSION_IDLE_TTL_SEC = float(os.environ.get('SESSION_IDLE_TTL_SEC', '600'))
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    # Run real background timers even when TESTING is set
    ENABLE_SCHEDULER_IN_TESTS = False
