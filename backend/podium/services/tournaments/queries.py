from typing import Dict, List, Optional

from .state import ACTIVE, COMPLETED, PlayerState, RoundState, TournamentState


def leaderboard(players: List[PlayerState]) -> List[PlayerState]:
    """Players by total points, then MVP votes; ties keep join order."""
    return sorted(players, key=lambda p: (-p.total_points, -p.mvp_votes))


def current_round(tournament: TournamentState) -> Optional[RoundState]:
    if tournament.status not in (ACTIVE, COMPLETED) or not tournament.rounds:
        return None
    return tournament.rounds[tournament.current_round]


def has_submitted_position(rnd: Optional[RoundState], player_id: str) -> bool:
    return rnd is not None and player_id in rnd.positions


def has_voted(rnd: Optional[RoundState], player_id: str) -> bool:
    return rnd is not None and player_id in rnd.mvp_votes


def available_positions(tournament: TournamentState) -> List[int]:
    """Positions 1..N not yet claimed in the current round."""
    rnd = current_round(tournament)
    taken = set(rnd.positions.values()) if rnd else set()
    return [i for i in range(1, len(tournament.players) + 1) if i not in taken]


def round_progress(tournament: TournamentState) -> Dict[str, int]:
    rnd = current_round(tournament)
    return {
        'round': rnd.id if rnd else None,
        'submitted': len(rnd.positions) if rnd else 0,
        'voted': len(rnd.mvp_votes) if rnd else 0,
        'total': len(tournament.players),
    }


def mvp_of_round(tournament: TournamentState, rnd: RoundState) -> Optional[PlayerState]:
    if not rnd.votes_settled or rnd.mvp_player_id is None:
        return None
    return tournament.player(rnd.mvp_player_id)
