from ashagames import db
import json


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(32), nullable=False)  # educational, health, cultural
    difficulty = db.Column(db.String(32), nullable=False, default='beginner')
    instructions = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'display_name': self.display_name,
            'description': self.description,
            'category': self.category,
            'difficulty': self.difficulty,
            'instructions': self.instructions,
            'is_active': self.is_active,
        }


class GameProgress(db.Model):
    __tablename__ = 'game_progress'
    __table_args__ = (db.UniqueConstraint('user_id', 'game_id', name='uq_game_progress_user_game'),)
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False)
    level = db.Column(db.Integer, default=1)
    score = db.Column(db.Integer, default=0)
    high_score = db.Column(db.Integer, default=0)
    times_played = db.Column(db.Integer, default=0)
    total_time_spent = db.Column(db.Integer, default=0)  # seconds
    last_played_at = db.Column(db.DateTime, nullable=True)
    game = db.relationship('Game')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'game_id': self.game_id,
            'game': self.game.name if self.game else None,
            'level': self.level,
            'score': self.score,
            'high_score': self.high_score,
            'times_played': self.times_played,
            'total_time_spent': self.total_time_spent,
            'last_played_at': self.last_played_at.isoformat() if self.last_played_at else None,
        }


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    level = db.Column(db.Integer, nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    completed = db.Column(db.Boolean, default=False)
    session_data = db.Column(db.Text, nullable=True)  # JSON-encoded outcome summary
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    game = db.relationship('Game')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'game_id': self.game_id,
            'game': self.game.name if self.game else None,
            'score': self.score,
            'level': self.level,
            'duration': self.duration,
            'completed': self.completed,
            'session_data': json.loads(self.session_data) if self.session_data else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
