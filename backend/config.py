import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///podium.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated list of frontend origins allowed by CORS / Socket.IO
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
    ).split(',') if o.strip()]
    # Minimum players needed to start a tournament
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '1'))
    # Capacity bounds for new tournaments
    MAX_PARTICIPANTS = int(os.environ.get('MAX_PARTICIPANTS', '50'))
    DEFAULT_PARTICIPANT_COUNT = int(os.environ.get('DEFAULT_PARTICIPANT_COUNT', '8'))
    INVITE_CODE_LENGTH = int(os.environ.get('INVITE_CODE_LENGTH', '6'))
    # Compare-and-set retries when two clients write the same tournament
    CONFLICT_RETRIES = int(os.environ.get('CONFLICT_RETRIES', '3'))
    # Refresh period advertised to polling clients (sec)
    POLL_INTERVAL_SEC = int(os.environ.get('POLL_INTERVAL_SEC', '5'))
