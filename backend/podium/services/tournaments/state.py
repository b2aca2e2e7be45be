"""In-memory tournament snapshot used by the engine.

These are plain dataclasses; the store converts them to and from the JSON
columns of the ``tournament`` table and the API serializes them with
``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

WAITING = 'waiting'
ACTIVE = 'active'
COMPLETED = 'completed'
DELETED = 'deleted'

TERMINAL_STATUSES = (COMPLETED, DELETED)

# Recorded in PlayerState.positions for a round the player never reported
NO_POSITION = 0


@dataclass
class PlayerState:
    id: str
    nickname: str
    total_points: int = 0
    mvp_votes: int = 0
    positions: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'nickname': self.nickname,
            'total_points': self.total_points,
            'mvp_votes': self.mvp_votes,
            'positions': list(self.positions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerState':
        return cls(
            id=str(data['id']),
            nickname=data['nickname'],
            total_points=int(data.get('total_points') or 0),
            mvp_votes=int(data.get('mvp_votes') or 0),
            positions=[int(p) for p in data.get('positions') or []],
        )


@dataclass
class RoundState:
    """One round of play.

    ``positions`` maps player id -> finishing position and ``mvp_votes``
    maps voter id -> voted player id. A key is present only once the player
    has submitted. The two ``*_settled`` flags record that the round's
    points (resp. MVP bonus) were applied to player totals, so neither is
    ever applied twice.
    """

    id: int
    positions: Dict[str, int] = field(default_factory=dict)
    mvp_votes: Dict[str, str] = field(default_factory=dict)
    completed: bool = False
    positions_settled: bool = False
    votes_settled: bool = False
    mvp_player_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'positions': dict(self.positions),
            'mvp_votes': dict(self.mvp_votes),
            'completed': self.completed,
            'positions_settled': self.positions_settled,
            'votes_settled': self.votes_settled,
            'mvp_player_id': self.mvp_player_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoundState':
        return cls(
            id=int(data['id']),
            positions={str(k): int(v) for k, v in (data.get('positions') or {}).items()},
            mvp_votes={str(k): str(v) for k, v in (data.get('mvp_votes') or {}).items()},
            completed=bool(data.get('completed')),
            positions_settled=bool(data.get('positions_settled')),
            votes_settled=bool(data.get('votes_settled')),
            mvp_player_id=data.get('mvp_player_id'),
        )


@dataclass
class TournamentState:
    name: str
    participant_count: int
    invite_code: str
    id: Optional[int] = None
    status: str = WAITING
    current_round: int = 0
    players: List[PlayerState] = field(default_factory=list)
    rounds: List[RoundState] = field(default_factory=list)
    created_at: Optional[datetime] = None
    version: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def player(self, player_id: str) -> Optional[PlayerState]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'participant_count': self.participant_count,
            'invite_code': self.invite_code,
            'status': self.status,
            'current_round': self.current_round,
            'players': [p.to_dict() for p in self.players],
            'rounds': [r.to_dict() for r in self.rounds],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'version': self.version,
        }
