"""
Custom exceptions.

Every command rejection is raised before the game state gets touched, so callers can simply report the error back
to whoever sent the command.
"""


class GameError(Exception):
    """Top level exception for anything going wrong while handling a game."""


# --- REQUEST / BOUNDARY ---
class InvalidRequestError(GameError):
    """Request could not be interpreted."""


# --- PERSISTENCE ---
class RepositoryError(GameError):
    """Storage layer could not fulfil the request."""


class GameNotFoundError(RepositoryError):
    """No game stored under the requested ID."""


class StaleGameError(RepositoryError):
    """Stored game changed after it was loaded (concurrent update)."""


# --- DOMAIN ---
class GameStateError(GameError):
    """Command does not fit the current state of the game."""


class GameFinishedError(GameStateError):
    """Game already has a winner. No more commands accepted."""


class PlayerError(GameError):
    """Problem registering / finding a player."""


class NotYourTurnError(GameError):
    """Acting player is not the one whose turn it is."""


class AlreadyRolledError(GameError):
    """The dice were already rolled this turn."""


class PieceNotFoundError(GameError):
    """Player does not own a piece with the requested ID."""


class InvalidMoveError(GameError):
    """Piece cannot move with the current dice value (overshoot, blocked, still at base)."""
