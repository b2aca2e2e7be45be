from podium.services.tournaments.scoring import (
    points_for_position,
    settle_mvp_votes,
    settle_positions,
    tally_mvp,
)
from podium.services.tournaments.state import PlayerState, RoundState, TournamentState


def _tournament(*names):
    t = TournamentState(name='Cup', participant_count=8, invite_code='ABC123', status='active')
    t.players = [PlayerState(id=n.lower(), nickname=n) for n in names]
    t.rounds = [RoundState(id=0)]
    return t


def test_points_for_position_examples():
    assert points_for_position(1, 8) == 16
    assert points_for_position(8, 8) == 2
    assert points_for_position(4, 6) == 6
    # Only positions past the field size hit the floor
    assert points_for_position(9, 8) == 1
    assert points_for_position(20, 8) == 1


def test_points_non_increasing_with_floor_of_one():
    for total in range(1, 51):
        points = [points_for_position(pos, total) for pos in range(1, total + 1)]
        assert all(p >= 1 for p in points)
        assert all(a >= b for a, b in zip(points, points[1:]))


def test_tally_counts_and_breaks_ties_by_join_order():
    t = _tournament('Alice', 'Bob', 'Cara')
    # Cara received her vote first, but Bob joined earlier
    votes = {'alice': 'cara', 'bob': 'alice', 'cara': 'bob'}
    counts, winner = tally_mvp(votes, t.players)
    assert counts == {'cara': 1, 'alice': 1, 'bob': 1}
    assert winner == 'alice'

    votes = {'alice': 'cara', 'bob': 'cara', 'cara': 'bob'}
    counts, winner = tally_mvp(votes, t.players)
    assert winner == 'cara'
    assert counts['cara'] == 2


def test_tally_with_no_votes():
    assert tally_mvp({}, []) == ({}, None)


def test_settle_positions_applies_once():
    t = _tournament('Alice', 'Bob', 'Cara')
    rnd = t.rounds[0]
    rnd.positions = {'alice': 2, 'bob': 1, 'cara': 3}
    settle_positions(t, rnd)
    assert [p.total_points for p in t.players] == [4, 6, 2]
    assert [p.positions for p in t.players] == [[2], [1], [3]]

    # Running settlement again must not double-award
    settle_positions(t, rnd)
    assert [p.total_points for p in t.players] == [4, 6, 2]
    assert [p.positions for p in t.players] == [[2], [1], [3]]


def test_settle_positions_scores_missing_players_zero():
    t = _tournament('Alice', 'Bob')
    rnd = t.rounds[0]
    rnd.positions = {'bob': 1}
    settle_positions(t, rnd)
    alice, bob = t.players
    assert alice.total_points == 0
    assert alice.positions == [0]
    assert bob.total_points == 4


def test_settle_mvp_votes_credits_raw_votes_and_bonus():
    t = _tournament('Alice', 'Bob', 'Cara')
    rnd = t.rounds[0]
    rnd.mvp_votes = {'alice': 'bob', 'bob': 'cara', 'cara': 'bob'}
    settle_mvp_votes(t, rnd)
    alice, bob, cara = t.players
    assert (alice.mvp_votes, bob.mvp_votes, cara.mvp_votes) == (0, 2, 1)
    assert (alice.total_points, bob.total_points, cara.total_points) == (0, 1, 0)
    assert rnd.mvp_player_id == 'bob'

    settle_mvp_votes(t, rnd)
    assert bob.total_points == 1
    assert bob.mvp_votes == 2
