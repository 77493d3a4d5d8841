"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)

All fields are plain data (str / int / bool / list / dict), so a GameModel can be dumped straight to JSON.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Self

# Type aliases to make GameModel easier to read
PieceColor = str
UserId = str


@dataclass
class PieceModel:
    id: int
    position: int = -1
    is_home: bool = True
    is_safe: bool = False


@dataclass
class PlayerModel:
    user_id: UserId
    username: str
    color: PieceColor
    pieces: list[PieceModel] = field(default_factory=list)
    is_ready: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Inverse of dataclasses.asdict (used when reading JSON columns)."""
        return cls(
            user_id=data["user_id"],
            username=data["username"],
            color=data["color"],
            pieces=[PieceModel(**piece) for piece in data.get("pieces", [])],
            is_ready=data.get("is_ready", False),
        )


@dataclass
class GameModel:
    """Transport-safe representation of a Ludo game (the game snapshot) used between API, Service, DB, and Game layers."""

    players: list[PlayerModel]
    current_turn: int
    dice_value: int
    has_rolled_dice: bool
    can_move: bool
    winner: Optional[UserId]
    status: str
    room_id: Optional[str] = None
    # Bumped by the repository on every write. Used to detect concurrent updates.
    version: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
