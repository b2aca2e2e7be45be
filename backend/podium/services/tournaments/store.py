"""Tournament Store backed by Flask-SQLAlchemy.

Rows hold players and rounds as JSON; reads return ``TournamentState``
snapshots. Writes are compare-and-set on the row's ``version`` column.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from podium import db
from podium.models import Tournament, generate_invite_code
from . import errors
from .state import DELETED, PlayerState, RoundState, TournamentState

_UPDATABLE = ('name', 'participant_count', 'status', 'current_round', 'players', 'rounds')


def _to_state(row: Tournament) -> TournamentState:
    return TournamentState(
        id=row.id,
        name=row.name,
        participant_count=row.participant_count,
        invite_code=row.invite_code,
        status=row.status,
        current_round=row.current_round or 0,
        players=[PlayerState.from_dict(p) for p in row.players or []],
        rounds=[RoundState.from_dict(r) for r in row.rounds or []],
        created_at=row.created_at,
        version=row.version or 0,
    )


def state_fields(state: TournamentState) -> Dict[str, Any]:
    """Column values for every mutable field of ``state``."""
    return {
        'name': state.name,
        'participant_count': state.participant_count,
        'status': state.status,
        'current_round': state.current_round,
        'players': [p.to_dict() for p in state.players],
        'rounds': [r.to_dict() for r in state.rounds],
    }


class TournamentStore:

    def __init__(self, invite_code_length: int = 6):
        self.invite_code_length = invite_code_length

    def get(self, tournament_id: int) -> TournamentState:
        try:
            row = Tournament.query.filter_by(id=tournament_id).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise errors.StoreFailure(str(exc)) from exc
        if row is None:
            raise errors.TournamentNotFound(f'Tournament {tournament_id} not found')
        return _to_state(row)

    def get_by_invite_code(self, code: str) -> TournamentState:
        try:
            row = Tournament.query.filter_by(invite_code=(code or '').strip().upper()).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise errors.StoreFailure(str(exc)) from exc
        if row is None:
            raise errors.TournamentNotFound(f'No tournament with invite code {code}')
        return _to_state(row)

    def create(self, state: TournamentState) -> TournamentState:
        try:
            row = Tournament(
                name=state.name,
                participant_count=state.participant_count,
                invite_code=(state.invite_code or generate_invite_code(self.invite_code_length)).upper(),
                status=state.status,
                current_round=state.current_round,
                players=[p.to_dict() for p in state.players],
                rounds=[r.to_dict() for r in state.rounds],
                created_at=state.created_at or datetime.now(timezone.utc),
            )
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise errors.StoreFailure(str(exc)) from exc
        return _to_state(row)

    def update(self, tournament_id: int, fields: Dict[str, Any],
               expected_version: Optional[int] = None) -> TournamentState:
        """Write ``fields`` to the tournament and bump its version.

        With ``expected_version`` the write only lands if nobody else wrote
        since that version was read; otherwise ``Conflict`` is raised.
        """
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f'Cannot update fields: {sorted(unknown)}')
        values = dict(fields)
        values['version'] = Tournament.version + 1
        values['updated_at'] = datetime.now(timezone.utc)
        try:
            query = Tournament.query.filter_by(id=tournament_id)
            if expected_version is not None:
                query = query.filter_by(version=expected_version)
            changed = query.update(values, synchronize_session=False)
            if not changed:
                db.session.rollback()
                if Tournament.query.filter_by(id=tournament_id).first() is None:
                    raise errors.TournamentNotFound(f'Tournament {tournament_id} not found')
                raise errors.Conflict(f'Tournament {tournament_id} changed since version {expected_version}')
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise errors.StoreFailure(str(exc)) from exc
        return self.get(tournament_id)

    def save(self, state: TournamentState) -> TournamentState:
        """Persist a full snapshot produced from version ``state.version``."""
        return self.update(state.id, state_fields(state), expected_version=state.version)

    def list(self, include_deleted: bool = False) -> List[TournamentState]:
        try:
            query = Tournament.query
            if not include_deleted:
                query = query.filter(Tournament.status != DELETED)
            rows = query.order_by(Tournament.created_at.desc(), Tournament.id.desc()).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise errors.StoreFailure(str(exc)) from exc
        return [_to_state(r) for r in rows]
