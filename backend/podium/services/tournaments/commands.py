"""Serialized tournament mutations.

Each command reads the latest snapshot, runs the engine operation on it and
writes the result back with a version check. If another client wrote in
between, the command is re-run on the fresh snapshot, up to
``CONFLICT_RETRIES`` times. Point settlement is part of that same write, so
it lands at most once no matter how many clients race to complete a round.
"""

from typing import Any, Callable, Optional, Tuple

from flask import current_app

from podium import socketio
from . import engine, errors
from .state import PlayerState, TournamentState
from .store import TournamentStore


def get_store() -> TournamentStore:
    return TournamentStore(invite_code_length=int(current_app.config.get('INVITE_CODE_LENGTH', 6)))


def broadcast(state: TournamentState) -> None:
    socketio.emit(
        'state_update',
        {'tournament_id': state.id, 'invite_code': state.invite_code, 'version': state.version},
        to=f"tournament:{state.invite_code}",
        namespace='/ws',
    )


def _apply(tournament_id: int, operation: Callable[..., Any], *args, **kwargs) -> Tuple[TournamentState, Any]:
    store = get_store()
    retries = int(current_app.config.get('CONFLICT_RETRIES', 3))
    attempt = 0
    while True:
        state = store.get(tournament_id)
        result = operation(state, *args, **kwargs)
        updated, extra = result if isinstance(result, tuple) else (result, None)
        if updated is state:
            return state, extra
        try:
            saved = store.save(updated)
        except errors.Conflict:
            attempt += 1
            if attempt > retries:
                current_app.logger.warning(f"[conflict] tournament={tournament_id} op={operation.__name__} gave up after {retries} retries")
                raise
            current_app.logger.info(f"[conflict] tournament={tournament_id} op={operation.__name__} retry={attempt}")
            continue
        broadcast(saved)
        return saved, extra


def create_tournament(name: str, participant_count: Optional[int] = None) -> TournamentState:
    cfg = current_app.config
    if participant_count is None:
        participant_count = int(cfg.get('DEFAULT_PARTICIPANT_COUNT', engine.DEFAULT_PARTICIPANT_COUNT))
    state = engine.new_tournament(
        name,
        participant_count,
        max_participants=int(cfg.get('MAX_PARTICIPANTS', engine.MAX_PARTICIPANTS)),
    )
    saved = get_store().create(state)
    current_app.logger.info(f"[create] tournament={saved.id} code={saved.invite_code} capacity={saved.participant_count}")
    return saved


def join_tournament(invite_code: str, nickname: str) -> Tuple[TournamentState, PlayerState]:
    tournament_id = get_store().get_by_invite_code(invite_code).id
    state, player = _apply(tournament_id, engine.join, nickname)
    current_app.logger.info(f"[join] tournament={state.id} player={player.id} nickname={player.nickname!r} players={len(state.players)}/{state.participant_count}")
    return state, player


def start_tournament(tournament_id: int) -> TournamentState:
    min_players = int(current_app.config.get('MIN_PLAYERS', 1))
    state, _ = _apply(tournament_id, engine.start_tournament, min_players=min_players)
    current_app.logger.info(f"[start] tournament={state.id} players={len(state.players)}")
    return state


def submit_position(tournament_id: int, player_id: str, position: int, round_id: Optional[int] = None) -> TournamentState:
    state, _ = _apply(tournament_id, engine.submit_position, player_id, position, round_id=round_id)
    rnd = state.rounds[state.current_round]
    current_app.logger.info(f"[position] tournament={state.id} round={rnd.id} player={player_id} position={position} submitted={len(rnd.positions)}/{len(state.players)}")
    if rnd.completed:
        current_app.logger.info(f"[settle] tournament={state.id} round={rnd.id} positions settled")
    return state


def submit_mvp_vote(tournament_id: int, voter_id: str, target_id: str, round_id: Optional[int] = None) -> TournamentState:
    state, _ = _apply(tournament_id, engine.submit_mvp_vote, voter_id, target_id, round_id=round_id)
    rnd = state.rounds[state.current_round]
    current_app.logger.info(f"[mvp] tournament={state.id} round={rnd.id} voter={voter_id} target={target_id} voted={len(rnd.mvp_votes)}/{len(state.players)}")
    if rnd.votes_settled:
        current_app.logger.info(f"[settle] tournament={state.id} round={rnd.id} mvp={rnd.mvp_player_id}")
    return state


def end_round(tournament_id: int, round_id: Optional[int] = None) -> TournamentState:
    state, _ = _apply(tournament_id, engine.end_round, round_id=round_id)
    current_app.logger.info(f"[end_round] tournament={state.id} current_round={state.current_round}")
    return state


def close_tournament(tournament_id: int) -> TournamentState:
    state, _ = _apply(tournament_id, engine.close_tournament)
    current_app.logger.info(f"[close] tournament={state.id} rounds={len(state.rounds)}")
    return state


def delete_tournament(tournament_id: int) -> TournamentState:
    state, _ = _apply(tournament_id, engine.delete_tournament)
    current_app.logger.info(f"[delete] tournament={state.id}")
    return state
