"""Typed failures raised by the tournament engine and store.

Four families, each telling the caller what to do next:

- ``ValidationError``: malformed input, re-prompt the user.
- ``StateConflict``: valid input but wrong moment, refresh and maybe retry.
- ``NotFound``: unknown tournament / player, re-navigate.
- ``StoreFailure``: backing store unavailable, retryable at the caller.
"""


class TournamentError(Exception):
    """Base class. ``code`` is a stable machine-readable identifier."""

    default_message = 'Tournament error'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationError(TournamentError):
    default_message = 'Invalid input'


class StateConflict(TournamentError):
    default_message = 'Operation not allowed in the current state'


class NotFound(TournamentError):
    default_message = 'Not found'


class StoreFailure(TournamentError):
    default_message = 'Tournament store unavailable'


# ---- validation ----

class InvalidName(ValidationError):
    default_message = 'Tournament name is required'


class InvalidCapacity(ValidationError):
    default_message = 'Participant count is out of range'


class InvalidNickname(ValidationError):
    default_message = 'Nickname is required'


class InvalidPosition(ValidationError):
    default_message = 'Position is out of range'


# ---- state conflicts ----

class AlreadyStarted(StateConflict):
    default_message = 'Tournament has already started'


class Full(StateConflict):
    default_message = 'Tournament is full'


class DuplicateNickname(StateConflict):
    default_message = 'Nickname already taken'


class NotWaiting(StateConflict):
    default_message = 'Tournament is not waiting for players'


class NotActive(StateConflict):
    default_message = 'Tournament is not active'


class InsufficientPlayers(StateConflict):
    default_message = 'Not enough players to start'


class InvalidRound(StateConflict):
    default_message = 'No such active round'


class PositionTaken(StateConflict):
    default_message = 'Another player has already claimed this position'


class AlreadySubmitted(StateConflict):
    default_message = 'Position already submitted this round'


class SelfVote(StateConflict):
    default_message = 'You cannot vote for yourself'


class AlreadyVoted(StateConflict):
    default_message = 'MVP vote already submitted this round'


class RoundIncomplete(StateConflict):
    default_message = 'Wait for all players to submit their positions'


class TournamentClosed(StateConflict):
    default_message = 'Tournament is closed'


class Conflict(StateConflict):
    default_message = 'Tournament was modified concurrently'


# ---- not found ----

class TournamentNotFound(NotFound):
    default_message = 'Tournament not found'


class PlayerNotFound(NotFound):
    default_message = 'Player not found'


class UnknownTarget(NotFound):
    default_message = 'MVP candidate is not a player in this tournament'
