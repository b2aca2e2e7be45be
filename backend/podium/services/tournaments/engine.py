"""Tournament and round state transitions.

Every operation validates first, then applies its effect to a deep copy of
the given snapshot and returns the copy. The caller's snapshot is never
touched, so a failed or retried command leaves nothing half-applied.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from . import errors
from .scoring import settle_mvp_votes, settle_positions
from .state import (
    ACTIVE,
    COMPLETED,
    DELETED,
    WAITING,
    PlayerState,
    RoundState,
    TournamentState,
)

DEFAULT_PARTICIPANT_COUNT = 8
MAX_PARTICIPANTS = 50


def _require_open(tournament: TournamentState) -> None:
    if tournament.is_terminal:
        raise errors.TournamentClosed(f'Tournament is {tournament.status}')


def _open_round(tournament: TournamentState, round_id: Optional[int]) -> RoundState:
    _require_open(tournament)
    if tournament.status != ACTIVE or not tournament.rounds:
        raise errors.InvalidRound('No active round')
    if round_id is not None and round_id != tournament.current_round:
        raise errors.InvalidRound(f'Round {round_id} is not the current round')
    return tournament.rounds[tournament.current_round]


def _require_player(tournament: TournamentState, player_id: str) -> PlayerState:
    player = tournament.player(player_id)
    if player is None:
        raise errors.PlayerNotFound(f'Player {player_id} is not in this tournament')
    return player


def _new_player_id(tournament: TournamentState) -> str:
    while True:
        candidate = uuid.uuid4().hex[:12]
        if tournament.player(candidate) is None:
            return candidate


def new_tournament(name: str, participant_count: int = DEFAULT_PARTICIPANT_COUNT,
                   invite_code: str = '', created_at: datetime = None,
                   max_participants: int = MAX_PARTICIPANTS) -> TournamentState:
    if name is not None and not isinstance(name, str):
        raise errors.InvalidName('Tournament name must be text')
    name = (name or '').strip()
    if not name:
        raise errors.InvalidName()
    if isinstance(participant_count, bool) or not isinstance(participant_count, int):
        raise errors.InvalidCapacity('Participant count must be an integer')
    if not 1 <= participant_count <= max_participants:
        raise errors.InvalidCapacity(f'Participant count must be between 1 and {max_participants}')
    return TournamentState(
        name=name,
        participant_count=participant_count,
        invite_code=invite_code,
        created_at=created_at or datetime.now(timezone.utc),
    )


def join(tournament: TournamentState, nickname: str) -> Tuple[TournamentState, PlayerState]:
    """Register a new player. Returns the updated snapshot and the new player."""
    if nickname is not None and not isinstance(nickname, str):
        raise errors.InvalidNickname('Nickname must be text')
    nickname = (nickname or '').strip()
    if not nickname:
        raise errors.InvalidNickname()
    if tournament.status != WAITING:
        raise errors.AlreadyStarted()
    if len(tournament.players) >= tournament.participant_count:
        raise errors.Full()
    folded = nickname.casefold()
    if any(p.nickname.casefold() == folded for p in tournament.players):
        raise errors.DuplicateNickname(f'Nickname "{nickname}" is already taken')

    updated = copy.deepcopy(tournament)
    player = PlayerState(id=_new_player_id(updated), nickname=nickname)
    updated.players.append(player)
    return updated, player


def start_tournament(tournament: TournamentState, min_players: int = 1) -> TournamentState:
    _require_open(tournament)
    if len(tournament.players) < max(1, min_players):
        raise errors.InsufficientPlayers(f'At least {max(1, min_players)} players are required to start')
    if tournament.status != WAITING:
        raise errors.NotWaiting()

    updated = copy.deepcopy(tournament)
    updated.status = ACTIVE
    updated.rounds = [RoundState(id=0)]
    updated.current_round = 0
    return updated


def submit_position(tournament: TournamentState, player_id: str, position: int,
                    round_id: Optional[int] = None) -> TournamentState:
    """Record a self-reported finishing position for the current round.

    The submission that completes the round also settles its points.
    """
    rnd = _open_round(tournament, round_id)
    _require_player(tournament, player_id)
    total = len(tournament.players)
    if isinstance(position, bool) or not isinstance(position, int) or not 1 <= position <= total:
        raise errors.InvalidPosition(f'Position must be between 1 and {total}')
    if player_id in rnd.positions:
        raise errors.AlreadySubmitted()
    if position in rnd.positions.values():
        raise errors.PositionTaken(f'Position {position} is already taken')

    updated = copy.deepcopy(tournament)
    rnd = updated.rounds[updated.current_round]
    rnd.positions[player_id] = position
    if len(rnd.positions) == len(updated.players):
        rnd.completed = True
        settle_positions(updated, rnd)
    return updated


def submit_mvp_vote(tournament: TournamentState, voter_id: str, target_id: str,
                    round_id: Optional[int] = None) -> TournamentState:
    """Record an MVP vote; the last vote of the round awards the MVP bonus."""
    rnd = _open_round(tournament, round_id)
    _require_player(tournament, voter_id)
    if target_id == voter_id:
        raise errors.SelfVote()
    if voter_id in rnd.mvp_votes:
        raise errors.AlreadyVoted()
    if tournament.player(target_id) is None:
        raise errors.UnknownTarget()

    updated = copy.deepcopy(tournament)
    rnd = updated.rounds[updated.current_round]
    rnd.mvp_votes[voter_id] = target_id
    if len(rnd.mvp_votes) == len(updated.players):
        settle_mvp_votes(updated, rnd)
    return updated


def end_round(tournament: TournamentState, round_id: Optional[int] = None) -> TournamentState:
    """Advance to a fresh round once the current one is complete.

    Passing the ``round_id`` the caller means to end makes a repeated call
    harmless: if that round is already behind us the snapshot is returned
    as-is.
    """
    if round_id is not None and tournament.status == ACTIVE and round_id < tournament.current_round:
        return tournament
    rnd = _open_round(tournament, round_id)
    if not rnd.completed:
        raise errors.RoundIncomplete(
            f'{len(rnd.positions)}/{len(tournament.players)} positions submitted'
        )

    updated = copy.deepcopy(tournament)
    settle_positions(updated, updated.rounds[updated.current_round])
    updated.rounds.append(RoundState(id=len(updated.rounds)))
    updated.current_round = len(updated.rounds) - 1
    return updated


def close_tournament(tournament: TournamentState) -> TournamentState:
    """Mark an active tournament completed.

    A partially reported current round is settled on the way out, with
    missing players scoring nothing.
    """
    _require_open(tournament)
    if tournament.status != ACTIVE:
        raise errors.NotActive()

    updated = copy.deepcopy(tournament)
    rnd = updated.rounds[updated.current_round]
    if rnd.positions and not rnd.positions_settled:
        settle_positions(updated, rnd)
    updated.status = COMPLETED
    return updated


def delete_tournament(tournament: TournamentState) -> TournamentState:
    if tournament.status == DELETED:
        raise errors.TournamentClosed('Tournament is already deleted')
    updated = copy.deepcopy(tournament)
    updated.status = DELETED
    return updated
