import pytest

from podium.services.tournaments import commands, engine, errors
from podium.services.tournaments.store import TournamentStore


@pytest.fixture()
def lobby(flask_app):
    return commands.create_tournament('Kart Cup', 4)


def test_join_retries_after_rival_write(lobby, monkeypatch):
    real_save = TournamentStore.save
    calls = []

    def save_after_rival(self, state):
        calls.append(state.version)
        if len(calls) == 1:
            # Another client joins between our read and our write
            rival, _ = engine.join(self.get(state.id), 'Rival')
            real_save(self, rival)
        return real_save(self, state)

    monkeypatch.setattr(TournamentStore, 'save', save_after_rival)

    state, player = commands.join_tournament(lobby.invite_code, 'Alice')

    # First attempt was built on version 0, the retry on the rival's version 1
    assert calls == [0, 1]
    assert [p.nickname for p in state.players] == ['Rival', 'Alice']
    assert player.nickname == 'Alice'
    stored = commands.get_store().get(lobby.id)
    assert [p.nickname for p in stored.players] == ['Rival', 'Alice']
    assert stored.version == 2


def test_retry_reevaluates_rules_on_fresh_snapshot(lobby, monkeypatch):
    real_save = TournamentStore.save
    calls = []

    def save_after_rival(self, state):
        calls.append(state.version)
        if len(calls) == 1:
            rival, _ = engine.join(self.get(state.id), 'alice')
            real_save(self, rival)
        return real_save(self, state)

    monkeypatch.setattr(TournamentStore, 'save', save_after_rival)

    # The rival took the nickname first; the re-run must see that
    with pytest.raises(errors.DuplicateNickname):
        commands.join_tournament(lobby.invite_code, 'Alice')
    assert [p.nickname for p in commands.get_store().get(lobby.id).players] == ['alice']


def test_gives_up_after_configured_retries(flask_app, lobby, monkeypatch):
    calls = []

    def always_conflict(self, state):
        calls.append(state.version)
        raise errors.Conflict()

    monkeypatch.setattr(TournamentStore, 'save', always_conflict)

    with pytest.raises(errors.Conflict):
        commands.join_tournament(lobby.invite_code, 'Alice')
    assert len(calls) == flask_app.config['CONFLICT_RETRIES'] + 1
    assert commands.get_store().get(lobby.id).players == []


def test_noop_end_round_does_not_write(lobby, monkeypatch):
    commands.join_tournament(lobby.invite_code, 'Alice')
    commands.start_tournament(lobby.id)
    commands.submit_position(lobby.id, commands.get_store().get(lobby.id).players[0].id, 1)
    ended = commands.end_round(lobby.id, round_id=0)

    def fail_save(self, state):
        raise AssertionError('no write expected')

    monkeypatch.setattr(TournamentStore, 'save', fail_save)
    again = commands.end_round(lobby.id, round_id=0)
    assert again.version == ended.version
    assert again.current_round == 1
