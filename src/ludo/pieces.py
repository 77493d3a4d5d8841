"""A player's pieces and the player itself"""

from dataclasses import dataclass, field
from typing import Self

from src.core.shared_types import Color
from src.ludo.board import BASE_POSITION, is_safe_cell, terminal_cell

PIECES_PER_PLAYER = 4


@dataclass
class Piece:
    id: int
    position: int = BASE_POSITION
    # NOTE: True both at base and once arrived on the terminal cell. Use 'position' to tell them apart.
    is_home: bool = True
    is_safe: bool = False

    @property
    def at_base(self) -> bool:
        return self.position == BASE_POSITION

    def send_to_base(self) -> None:
        """Captured: back to the start."""
        self.position = BASE_POSITION
        self.is_home = True
        self.is_safe = False

    def place(self, position: int, color: Color) -> None:
        """Put the piece on a board cell and update its flags."""
        self.position = position
        if position == terminal_cell(color):
            self.is_home = True
            self.is_safe = True
        else:
            self.is_home = False
            self.is_safe = is_safe_cell(position, color)


@dataclass
class Player:
    user_id: str
    username: str
    color: Color
    pieces: list[Piece] = field(default_factory=list)
    is_ready: bool = False

    @classmethod
    def new(cls, user_id: str, username: str, color: Color, is_ready: bool = False) -> Self:
        """Player with all pieces at base."""
        pieces = [Piece(id=piece_id) for piece_id in range(PIECES_PER_PLAYER)]
        return cls(user_id, username, color, pieces, is_ready)

    def piece(self, piece_id: int) -> Piece | None:
        return next((piece for piece in self.pieces if piece.id == piece_id), None)

    def has_arrived(self, piece: Piece) -> bool:
        return piece.is_home and piece.position == terminal_cell(self.color)

    def has_won(self) -> bool:
        """All pieces sit on the terminal cell."""
        return len(self.pieces) == PIECES_PER_PLAYER and all(
            self.has_arrived(piece) for piece in self.pieces
        )
