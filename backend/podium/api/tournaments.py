from flask import Blueprint, jsonify, request, current_app
from podium.services.tournaments import commands, errors, queries
from podium.services.tournaments.state import TournamentState


tournaments = Blueprint('tournaments', __name__)

_STATUS_BY_FAMILY = (
    (errors.ValidationError, 400),
    (errors.StateConflict, 409),
    (errors.NotFound, 404),
    (errors.StoreFailure, 503),
)


@tournaments.errorhandler(errors.TournamentError)
def handle_tournament_error(exc: errors.TournamentError):
    status = 400
    for family, code in _STATUS_BY_FAMILY:
        if isinstance(exc, family):
            status = code
            break
    if status >= 500:
        current_app.logger.error(f"[store] {exc.message}")
    return jsonify({'error': exc.message, 'code': exc.code}), status


def _int_field(data: dict, key: str, error_cls, required: bool = True):
    value = data.get(key)
    if value is None:
        if required:
            raise error_cls(f'{key} is required')
        return None
    # Whole numbers only: no bools, no floats, digit strings allowed
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise error_cls(f'{key} must be an integer')


def _snapshot(state: TournamentState) -> dict:
    payload = state.to_dict()
    payload['leaderboard'] = _leaderboard(state)
    payload['progress'] = queries.round_progress(state)
    payload['round_mvps'] = _round_mvps(state)
    payload['poll_interval_sec'] = int(current_app.config.get('POLL_INTERVAL_SEC', 5))
    return payload


def _round_mvps(state: TournamentState) -> list:
    mvps = []
    for rnd in state.rounds:
        player = queries.mvp_of_round(state, rnd)
        if player is not None:
            mvps.append({'round': rnd.id, 'player_id': player.id, 'nickname': player.nickname})
    return mvps


def _leaderboard(state: TournamentState) -> list:
    return [
        dict(p.to_dict(), rank=rank)
        for rank, p in enumerate(queries.leaderboard(state.players), start=1)
    ]


@tournaments.route('', methods=['POST'])
def create_tournament():
    data = request.get_json(silent=True) or {}
    participant_count = _int_field(data, 'participant_count', errors.InvalidCapacity, required=False)
    state = commands.create_tournament(data.get('name'), participant_count)
    return jsonify(_snapshot(state)), 201


@tournaments.route('', methods=['GET'])
def list_tournaments():
    include_deleted = request.args.get('include_deleted', '').lower() in ('1', 'true', 'yes')
    rows = commands.get_store().list(include_deleted=include_deleted)
    return jsonify([
        {
            'id': t.id,
            'name': t.name,
            'invite_code': t.invite_code,
            'status': t.status,
            'participant_count': t.participant_count,
            'player_count': len(t.players),
            'created_at': t.created_at.isoformat() if t.created_at else None,
        }
        for t in rows
    ])


@tournaments.route('/<int:tournament_id>', methods=['GET'])
def get_tournament(tournament_id):
    return jsonify(_snapshot(commands.get_store().get(tournament_id)))


@tournaments.route('/invite/<string:invite_code>', methods=['GET'])
def get_by_invite_code(invite_code):
    return jsonify(_snapshot(commands.get_store().get_by_invite_code(invite_code)))


@tournaments.route('/invite/<string:invite_code>/join', methods=['POST'])
def join_tournament(invite_code):
    data = request.get_json(silent=True) or {}
    state, player = commands.join_tournament(invite_code, data.get('nickname'))
    payload = player.to_dict()
    payload['tournament_id'] = state.id
    return jsonify(payload), 201


@tournaments.route('/<int:tournament_id>/start', methods=['POST'])
def start_tournament(tournament_id):
    return jsonify(_snapshot(commands.start_tournament(tournament_id)))


@tournaments.route('/<int:tournament_id>/positions', methods=['POST'])
def submit_position(tournament_id):
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    if not player_id:
        raise errors.PlayerNotFound('player_id is required')
    position = _int_field(data, 'position', errors.InvalidPosition)
    round_id = _int_field(data, 'round', errors.InvalidRound, required=False)
    state = commands.submit_position(tournament_id, str(player_id), position, round_id=round_id)
    return jsonify(_snapshot(state))


@tournaments.route('/<int:tournament_id>/mvp', methods=['POST'])
def submit_mvp_vote(tournament_id):
    data = request.get_json(silent=True) or {}
    voter_id = data.get('voter_id')
    target_id = data.get('target_id')
    if not voter_id:
        raise errors.PlayerNotFound('voter_id is required')
    if not target_id:
        raise errors.UnknownTarget('target_id is required')
    round_id = _int_field(data, 'round', errors.InvalidRound, required=False)
    state = commands.submit_mvp_vote(tournament_id, str(voter_id), str(target_id), round_id=round_id)
    return jsonify(_snapshot(state))


@tournaments.route('/<int:tournament_id>/end-round', methods=['POST'])
def end_round(tournament_id):
    data = request.get_json(silent=True) or {}
    round_id = _int_field(data, 'round', errors.InvalidRound, required=False)
    return jsonify(_snapshot(commands.end_round(tournament_id, round_id=round_id)))


@tournaments.route('/<int:tournament_id>/close', methods=['POST'])
def close_tournament(tournament_id):
    return jsonify(_snapshot(commands.close_tournament(tournament_id)))


@tournaments.route('/<int:tournament_id>', methods=['DELETE'])
def delete_tournament(tournament_id):
    state = commands.delete_tournament(tournament_id)
    return jsonify({'id': state.id, 'status': state.status})


@tournaments.route('/<int:tournament_id>/leaderboard', methods=['GET'])
def get_leaderboard(tournament_id):
    return jsonify(_leaderboard(commands.get_store().get(tournament_id)))


@tournaments.route('/<int:tournament_id>/players/<string:player_id>', methods=['GET'])
def get_player_status(tournament_id, player_id):
    state = commands.get_store().get(tournament_id)
    player = state.player(player_id)
    if player is None:
        raise errors.PlayerNotFound(f'Player {player_id} is not in this tournament')
    rnd = queries.current_round(state)
    payload = player.to_dict()
    payload['has_submitted_position'] = queries.has_submitted_position(rnd, player_id)
    payload['has_voted'] = queries.has_voted(rnd, player_id)
    payload['available_positions'] = queries.available_positions(state)
    return jsonify(payload)
