from collections import Counter
from typing import Dict, List, Optional, Tuple

from .state import NO_POSITION, PlayerState, RoundState, TournamentState


def points_for_position(position: int, total_players: int) -> int:
    """Points for finishing ``position`` out of ``total_players``.

    1st place earns ``2 * total_players`` and each place below it two fewer,
    never dropping under 1.
    """
    return max(1, total_players * 2 - (position - 1) * 2)


def tally_mvp(votes: Dict[str, str], players: List[PlayerState]) -> Tuple[Dict[str, int], Optional[str]]:
    """Count MVP votes per candidate and pick the round's MVP.

    Returns ``(counts, winner_id)``. Ties go to the candidate who joined
    the tournament first. ``winner_id`` is None when there are no votes.
    """
    counts = Counter(votes.values())
    if not counts:
        return {}, None
    top = max(counts.values())
    winner_id = None
    for p in players:
        if counts.get(p.id) == top:
            winner_id = p.id
            break
    return dict(counts), winner_id


def settle_positions(tournament: TournamentState, rnd: RoundState) -> None:
    """Apply finishing-position points for ``rnd`` to player totals.

    Mutates ``tournament`` in place. Players without a submission score 0
    and get NO_POSITION recorded. No-op if the round was already settled.
    """
    if rnd.positions_settled:
        return
    total = len(tournament.players)
    for p in tournament.players:
        position = rnd.positions.get(p.id)
        if position is None:
            p.positions.append(NO_POSITION)
            continue
        p.total_points += points_for_position(position, total)
        p.positions.append(position)
    rnd.positions_settled = True


def settle_mvp_votes(tournament: TournamentState, rnd: RoundState) -> None:
    """Credit raw MVP votes to every player and +1 point to the round MVP.

    Mutates ``tournament`` in place. No-op if already settled.
    """
    if rnd.votes_settled:
        return
    counts, winner_id = tally_mvp(rnd.mvp_votes, tournament.players)
    for p in tournament.players:
        p.mvp_votes += counts.get(p.id, 0)
        if p.id == winner_id:
            p.total_points += 1
    rnd.mvp_player_id = winner_id
    rnd.votes_settled = True
