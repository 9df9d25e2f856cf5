import json
from datetime import datetime, timezone

from ashagames import db
from ashagames.models import GameProgress, GameSession
from .engine import Outcome


def record_session(game_id: int, user_id: str, outcome: Outcome) -> GameSession:
    """Persist a finished session and fold it into the user's progress for the game."""
    session = GameSession(
        user_id=user_id,
        game_id=game_id,
        score=outcome.score,
        level=outcome.level,
        duration=outcome.duration,
        completed=outcome.completed,
        session_data=json.dumps({'reason': outcome.reason, 'bonus': outcome.bonus, 'summary': outcome.summary}),
    )
    db.session.add(session)

    progress = GameProgress.query.filter_by(user_id=user_id, game_id=game_id).first()
    if not progress:
        progress = GameProgress(user_id=user_id, game_id=game_id, level=0, score=0, high_score=0,
                                times_played=0, total_time_spent=0)
    progress.score = outcome.score
    progress.high_score = max(progress.high_score or 0, outcome.score)
    progress.level = max(progress.level or 0, outcome.level)
    progress.times_played = (progress.times_played or 0) + 1
    progress.total_time_spent = (progress.total_time_spent or 0) + outcome.duration
    progress.last_played_at = datetime.now(timezone.utc)
    db.session.add(progress)
    db.session.commit()
    return session
