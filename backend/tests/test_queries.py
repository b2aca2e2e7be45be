from podium.services.tournaments import engine, queries
from podium.services.tournaments.state import PlayerState


def test_leaderboard_orders_by_points_then_mvp_votes():
    players = [
        PlayerState(id='p1', nickname='P1', total_points=10, mvp_votes=2),
        PlayerState(id='p2', nickname='P2', total_points=10, mvp_votes=1),
        PlayerState(id='p3', nickname='P3', total_points=5, mvp_votes=9),
    ]
    assert [p.id for p in queries.leaderboard(players)] == ['p1', 'p2', 'p3']
    # Reversed input still sorts on the keys
    assert [p.id for p in queries.leaderboard(players[::-1])] == ['p1', 'p2', 'p3']


def test_leaderboard_keeps_join_order_on_full_ties():
    players = [
        PlayerState(id='late', nickname='Late', total_points=3, mvp_votes=1),
        PlayerState(id='early', nickname='Early', total_points=3, mvp_votes=1),
    ]
    assert [p.id for p in queries.leaderboard(players)] == ['late', 'early']
    # Pure projection: input order unchanged
    assert [p.id for p in players] == ['late', 'early']


def test_derived_round_queries():
    t = engine.new_tournament('Cup', 4)
    t, a = engine.join(t, 'Alice')
    t, b = engine.join(t, 'Bob')
    t, c = engine.join(t, 'Cara')
    assert queries.current_round(t) is None
    assert queries.has_submitted_position(None, a.id) is False
    assert queries.available_positions(t) == [1, 2, 3]

    t = engine.start_tournament(t)
    t = engine.submit_position(t, b.id, 2)
    t = engine.submit_mvp_vote(t, a.id, b.id)
    rnd = queries.current_round(t)
    assert queries.has_submitted_position(rnd, b.id) is True
    assert queries.has_submitted_position(rnd, a.id) is False
    assert queries.has_voted(rnd, a.id) is True
    assert queries.has_voted(rnd, b.id) is False
    assert queries.available_positions(t) == [1, 3]
    assert queries.round_progress(t) == {'round': 0, 'submitted': 1, 'voted': 1, 'total': 3}
    assert queries.mvp_of_round(t, rnd) is None

    t = engine.submit_mvp_vote(t, b.id, c.id)
    t = engine.submit_mvp_vote(t, c.id, b.id)
    assert queries.mvp_of_round(t, t.rounds[0]).id == b.id
