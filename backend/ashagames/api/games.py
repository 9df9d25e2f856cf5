from flask import Blueprint, jsonify, request, current_app
from ashagames.models import Game
from ashagames.services.games import sessions
from ashagames.services.games.minigames import GAME_TYPES


games = Blueprint('games', __name__)


def _live_or_404(session_code):
    live = sessions.get_session(session_code)
    if not live:
        return None, (jsonify({'error': 'Session not found'}), 404)
    return live, None


@games.route('/', methods=['GET'])
def list_games():
    catalog = Game.query.filter_by(is_active=True).order_by(Game.name).all()
    return jsonify([g.to_dict() for g in catalog])


@games.route('/<string:name>', methods=['GET'])
def get_game(name):
    game = Game.query.filter_by(name=name).first_or_404()
    return jsonify(game.to_dict())


@games.route('/<string:name>/sessions', methods=['POST'])
def create_session(name):
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    if user_id is None or str(user_id).strip() == '':
        return jsonify({'error': 'user_id is required'}), 400

    game = Game.query.filter_by(name=name, is_active=True).first()
    if not game or game.name not in GAME_TYPES:
        return jsonify({'error': 'Game not found'}), 404

    live = sessions.create_session(current_app._get_current_object(), game, str(user_id))
    return jsonify({
        'message': 'New session created!',
        'session_code': live.code,
        'state': live.to_dict(),
    }), 201


@games.route('/sessions/<string:session_code>/state', methods=['GET'])
def get_session_state(session_code):
    live, error = _live_or_404(session_code)
    if error:
        return error
    with live.lock:
        return jsonify(live.to_dict())


@games.route('/sessions/<string:session_code>/start', methods=['POST'])
def start_session(session_code):
    live, error = _live_or_404(session_code)
    if error:
        return error
    with live.lock:
        if not live.engine.start():
            return jsonify({'error': 'Game is already running'}), 400
        current_app.logger.info(f"[start] session={live.code} game={live.game_name}")
        state = live.to_dict()
    live.push_state()
    return jsonify(state)


@games.route('/sessions/<string:session_code>/action', methods=['POST'])
def submit_action(session_code):
    data = request.get_json(silent=True) or {}
    payload = data.get('payload')
    if not isinstance(payload, dict):
        return jsonify({'error': 'payload object is required'}), 400

    live, error = _live_or_404(session_code)
    if error:
        return error
    with live.lock:
        result = live.engine.submit_action(payload)
        body = result.to_dict()
        body['state'] = live.to_dict()
    live.push_state()
    return jsonify(body)


@games.route('/sessions/<string:session_code>/close', methods=['POST'])
def close_session(session_code):
    live, error = _live_or_404(session_code)
    if error:
        return error
    with live.lock:
        live.engine.close()
        state = live.to_dict()
    current_app.logger.info(f"[close] session={live.code} phase={state['phase']}")
    return jsonify(state)
