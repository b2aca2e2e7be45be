from datetime import datetime, timezone
import random
import string

from podium import db


def _utcnow():
    return datetime.now(timezone.utc)


def generate_invite_code(length=6):
    """Generate a unique, short invite code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not Tournament.query.filter_by(invite_code=code).first():
            return code


class Tournament(db.Model):
    __tablename__ = 'tournament'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    participant_count = db.Column(db.Integer, nullable=False, default=8)
    invite_code = db.Column(db.String(16), unique=True, index=True, nullable=False)
    status = db.Column(db.String(16), nullable=False, default='waiting')  # waiting, active, completed, deleted
    current_round = db.Column(db.Integer, nullable=False, default=0)
    # Serialized PlayerState / RoundState lists, in join / round order
    players = db.Column(db.JSON, nullable=False, default=list)
    rounds = db.Column(db.JSON, nullable=False, default=list)
    # Bumped on every write; updates compare against it
    version = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __init__(self, **kwargs):
        super(Tournament, self).__init__(**kwargs)
        if not self.invite_code:
            self.invite_code = generate_invite_code()

