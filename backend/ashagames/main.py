from flask import Blueprint, request, jsonify
from .models import Game, GameProgress, GameSession

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the ASHA games server!'})


@main.route('/api/users/<string:user_id>/game-progress', methods=['GET'])
def get_user_game_progress(user_id):
    progress = (
        GameProgress.query.filter_by(user_id=user_id)
        .order_by(GameProgress.last_played_at.desc())
        .all()
    )
    return jsonify([p.to_dict() for p in progress])


@main.route('/api/users/<string:user_id>/games/<string:name>/progress', methods=['GET'])
def get_user_progress_for_game(user_id, name):
    game = Game.query.filter_by(name=name).first()
    if not game:
        return jsonify({'error': 'Game not found'}), 404
    progress = GameProgress.query.filter_by(user_id=user_id, game_id=game.id).first()
    if not progress:
        return jsonify({'error': 'Game progress not found'}), 404
    return jsonify(progress.to_dict())


@main.route('/api/users/<string:user_id>/game-sessions', methods=['GET'])
def get_user_game_sessions(user_id):
    query = GameSession.query.filter_by(user_id=user_id)
    game_name = request.args.get('game')
    if game_name:
        game = Game.query.filter_by(name=game_name).first()
        if not game:
            return jsonify({'error': 'Game not found'}), 404
        query = query.filter_by(game_id=game.id)
    played = query.order_by(GameSession.created_at.desc(), GameSession.id.desc()).all()
    return jsonify([s.to_dict() for s in played])
