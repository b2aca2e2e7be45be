import os
import sys
import pytest

# Ensure the backend root (containing the `podium` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from podium import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    MIN_PLAYERS = 1
    MAX_PARTICIPANTS = 50
    DEFAULT_PARTICIPANT_COUNT = 8
    INVITE_CODE_LENGTH = 6
    CONFLICT_RETRIES = 3
    POLL_INTERVAL_SEC = 5


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import podium.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def make_tournament(client):
    """Create a tournament over HTTP and join the given nicknames."""
    def _make(names=('Alice', 'Bob', 'Cara'), capacity=4, start=False):
        created = client.post('/api/tournaments', json={'name': 'Kart Cup', 'participant_count': capacity}).get_json()
        players = []
        for name in names:
            res = client.post(f"/api/tournaments/invite/{created['invite_code']}/join", json={'nickname': name})
            assert res.status_code == 201
            players.append(res.get_json())
        if start:
            assert client.post(f"/api/tournaments/{created['id']}/start").status_code == 200
        return created, players
    return _make
