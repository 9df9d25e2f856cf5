from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from ashagames.config import Config

db = SQLAlchemy()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from ashagames.main import main
    flask_app.register_blueprint(main)

    from ashagames.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from ashagames.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the game catalog."""
        from ashagames.services.games.catalog import ensure_catalog
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            added = ensure_catalog()
            print(f'Database has been reset and seeded with {added} games!')

    @click.command('seed-games')
    def seed_games_command():
        """Adds any missing catalog games without touching existing data."""
        from ashagames.services.games.catalog import ensure_catalog
        with flask_app.app_context():
            db.create_all()
            print(f'Added {ensure_catalog()} games.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_games_command)

    return flask_app
