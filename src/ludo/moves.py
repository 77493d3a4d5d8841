"""
Movement and capturing rules on top of the board geometry

Legality is checked per piece here. Game decides whose turn it is and what happens to the turn afterwards.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.shared_types import Color
from src.ludo.board import target_position
from src.ludo.pieces import Piece, Player


@dataclass(frozen=True)
class CapturedPiece:
    """Opponent piece sent back to base by a move."""

    user_id: str
    color: Color
    piece_id: int


@dataclass(frozen=True)
class RollOutcome:
    """What happened when the dice got rolled."""

    user_id: str
    dice_value: int
    can_move: bool
    turn_advanced: bool
    next_user_id: str


@dataclass(frozen=True)
class MoveOutcome:
    """Snapshot of an accepted move."""

    user_id: str
    piece_id: int
    from_position: int
    to_position: int
    captured_piece: Optional[CapturedPiece]
    winner: Optional[str]
    turn_advanced: bool
    next_user_id: str


def is_blocked_by_own_piece(player: Player, piece: Piece, target: int) -> bool:
    """Own pieces never share a cell. Pieces that arrived (or sit at base) do not block."""
    return any(
        other.id != piece.id and not other.is_home and other.position == target
        for other in player.pieces
    )


def legal_target(player: Player, piece: Piece, die: int) -> Optional[int]:
    """Target cell for the piece, or None when it cannot move with this die."""
    if player.has_arrived(piece):
        return None
    target = target_position(player.color, piece.position, die)
    if target is None or is_blocked_by_own_piece(player, piece, target):
        return None
    return target


def movable_pieces(player: Player, die: int) -> list[int]:
    """IDs of the pieces that have a legal target."""
    return [
        piece.id for piece in player.pieces if legal_target(player, piece, die) is not None
    ]


def find_capture(
    players: Sequence[Player], mover: Player, target: int
) -> Optional[tuple[Player, Piece]]:
    """
    First opponent piece on the target cell (player order, then piece order).

    NOTE: safe cells do not protect against captures. Only pieces at base are out of reach.
    """
    for opponent in players:
        if opponent is mover:
            continue
        for piece in opponent.pieces:
            if not piece.at_base and piece.position == target:
                return opponent, piece
    return None
