"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status


def _not_blank(value: str) -> str:
    if not value.strip():
        raise InvalidRequestError("User ID and username cannot be blank.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    user_id: str
    username: str
    room_id: Optional[str] = None

    @field_validator(*["user_id", "username"])
    @classmethod
    def validate_identity(cls, value: str) -> str:
        return _not_blank(value)


class JoinGameRequest(BaseModel):
    game_id: UUID
    user_id: str
    username: str

    @field_validator(*["user_id", "username"])
    @classmethod
    def validate_identity(cls, value: str) -> str:
        return _not_blank(value)


class ReadyRequest(BaseModel):
    game_id: UUID
    user_id: str
    is_ready: bool = True


class StartGameRequest(BaseModel):
    game_id: UUID
    user_id: str


class Participant(BaseModel):
    user_id: str
    username: str

    @field_validator(*["user_id", "username"])
    @classmethod
    def validate_identity(cls, value: str) -> str:
        return _not_blank(value)


class StartMatchRequest(BaseModel):
    """Matchmaking assembled a full table: create the game and start playing immediately."""

    room_id: Optional[str] = None
    participants: list[Participant]

    @field_validator("participants")
    @classmethod
    def validate_participants(cls, value: list[Participant]) -> list[Participant]:
        if not 2 <= len(value) <= len(Color):
            raise InvalidRequestError(
                f"A match needs 2 to {len(Color)} participants, got {len(value)}."
            )
        user_ids = [participant.user_id for participant in value]
        if len(set(user_ids)) != len(user_ids):
            raise InvalidRequestError(f"Participants must be unique: {user_ids}")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class RollRequest(BaseModel):
    game_id: UUID
    user_id: str


class MoveRequest(BaseModel):
    game_id: UUID
    user_id: str
    piece_id: int


class LegalMovesRequest(BaseModel):
    game_id: UUID
    user_id: str


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    id: int
    position: int
    is_home: bool
    is_safe: bool


class PlayerResponse(BaseModel):
    user_id: str
    username: str
    color: Color
    pieces: list[PieceResponse]
    is_ready: bool


class GameResponse(BaseModel):
    """Full game snapshot, broadcast to every participant after each command."""

    game_id: UUID
    room_id: Optional[str]
    players: list[PlayerResponse]
    current_turn: int
    dice_value: int
    has_rolled_dice: bool
    can_move: bool
    winner: Optional[str]
    status: Status


class CapturedPieceResponse(BaseModel):
    user_id: str
    color: Color
    piece_id: int


class RollResponse(BaseModel):
    game_id: UUID
    user_id: str
    dice_value: int
    can_move: bool
    turn_advanced: bool
    next_user_id: str
    game: GameResponse


class MoveResponse(BaseModel):
    game_id: UUID
    user_id: str
    piece_id: int
    from_position: int
    to_position: int
    captured_piece: Optional[CapturedPieceResponse]
    winner: Optional[str]
    turn_advanced: bool
    next_user_id: str
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: UUID
    user_id: str
    color: Color
    dice_value: int
    movable_pieces: list[int]
