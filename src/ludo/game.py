"""
The Game class will be the entrypoint into the domain layer for the service layer.
It owns the state of one Ludo game and applies the players' commands (roll, move) to it -->
every accepted command returns an outcome, which the service layer passes onwards together with the new state.

Every check happens before anything is mutated: a rejected command leaves the game exactly as it was.
"""

from dataclasses import dataclass
from typing import Optional, Self, Sequence

from loguru import logger

from src.core.config import Config
from src.core.exceptions import (
    AlreadyRolledError,
    GameFinishedError,
    GameStateError,
    InvalidMoveError,
    NotYourTurnError,
    PieceNotFoundError,
    PlayerError,
)
from src.core.models import GameModel, PieceModel, PlayerModel
from src.core.shared_types import COLOR_ORDER, Color, Status
from src.ludo.board import DIE_FACES, ENTRY_ROLL, is_valid_position
from src.ludo.dice import Dice
from src.ludo.moves import (
    CapturedPiece,
    MoveOutcome,
    RollOutcome,
    find_capture,
    legal_target,
    movable_pieces,
)
from src.ludo.pieces import PIECES_PER_PLAYER, Piece, Player

# (user_id, username) pairs handed over by matchmaking
Participant = tuple[str, str]


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    players: list[Player]
    current_turn: int
    dice_value: int
    has_rolled_dice: bool
    can_move: bool
    winner: Optional[str]
    status: Status
    room_id: Optional[str] = None
    version: int = 0

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        players = [_player_from_model(player) for player in model.players]
        if players and not 0 <= model.current_turn < len(players):
            raise GameStateError(
                f"Turn index {model.current_turn} out of range for {len(players)} players."
            )
        colors = [player.color for player in players]
        if len(set(colors)) != len(colors):
            raise GameStateError(f"Colors must be unique per game: {colors}")

        return cls(
            players=players,
            current_turn=model.current_turn,
            dice_value=model.dice_value,
            has_rolled_dice=model.has_rolled_dice,
            can_move=model.can_move,
            winner=model.winner,
            status=Status(model.status),
            room_id=model.room_id,
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses (a copy, so readers cannot touch the live state)"""

        return GameModel(
            players=[
                PlayerModel(
                    user_id=player.user_id,
                    username=player.username,
                    color=player.color.value,
                    pieces=[
                        PieceModel(
                            id=piece.id,
                            position=piece.position,
                            is_home=piece.is_home,
                            is_safe=piece.is_safe,
                        )
                        for piece in player.pieces
                    ],
                    is_ready=player.is_ready,
                )
                for player in self.players
            ],
            current_turn=self.current_turn,
            dice_value=self.dice_value,
            has_rolled_dice=self.has_rolled_dice,
            can_move=self.can_move,
            winner=self.winner,
            status=self.status.value,
            room_id=self.room_id,
            version=self.version,
        )

    @classmethod
    def new_game(cls, user_id: str, username: str, room_id: Optional[str] = None) -> Self:
        """Open a game with a single (host) player. Others join via register_player."""
        host = Player.new(user_id, username, COLOR_ORDER[0])
        return cls(
            players=[host],
            current_turn=0,
            dice_value=0,
            has_rolled_dice=False,
            can_move=False,
            winner=None,
            status=Status.WAITING,
            room_id=room_id,
        )

    @classmethod
    def from_players(
        cls, participants: Sequence[Participant], room_id: Optional[str] = None
    ) -> Self:
        """
        Matchmaking assembled the players: start playing right away.
        Colors are handed out in join order, the first participant has the first turn.
        """
        if not Config.MIN_PLAYERS <= len(participants) <= Config.MAX_PLAYERS:
            raise PlayerError(
                f"A game needs {Config.MIN_PLAYERS} to {Config.MAX_PLAYERS} players, got {len(participants)}."
            )
        user_ids = [user_id for user_id, _ in participants]
        if len(set(user_ids)) != len(user_ids):
            raise PlayerError(f"Players must be unique: {user_ids}")

        players = [
            Player.new(user_id, username, color, is_ready=True)
            for (user_id, username), color in zip(participants, COLOR_ORDER)
        ]
        game = cls(
            players=players,
            current_turn=0,
            dice_value=0,
            has_rolled_dice=False,
            can_move=False,
            winner=None,
            status=Status.PLAYING,
            room_id=room_id,
        )
        logger.info(f"Game started for room {room_id!r} with players {user_ids}")
        return game

    @property
    def current_player(self) -> Player:
        return self.players[self.current_turn]

    # --- LOBBY ---
    def register_player(self, user_id: str, username: str) -> Player:
        """Join an open game. Gets the first color not taken yet."""
        self._assert_status(Status.WAITING, "Cannot join this game")
        if self._find_player(user_id) is not None:
            raise PlayerError(f"Player {user_id!r} already joined this game.")
        if len(self.players) >= Config.MAX_PLAYERS:
            raise PlayerError(f"Game is full ({Config.MAX_PLAYERS} players).")

        taken = {player.color for player in self.players}
        color = next(color for color in COLOR_ORDER if color not in taken)
        player = Player.new(user_id, username, color)
        self.players.append(player)
        logger.info(f"Player {user_id!r} joined with color {color}")
        return player

    def set_ready(self, user_id: str, is_ready: bool = True) -> None:
        self._assert_status(Status.WAITING, "Cannot change readiness")
        self._get_player(user_id).is_ready = is_ready

    def start(self, user_id: str) -> None:
        """Any seated player can start once enough players joined and all of them are ready."""
        self._assert_status(Status.WAITING, "Cannot start this game")
        self._get_player(user_id)
        if len(self.players) < Config.MIN_PLAYERS:
            raise GameStateError(
                f"Need at least {Config.MIN_PLAYERS} players to start, have {len(self.players)}."
            )
        not_ready = [player.user_id for player in self.players if not player.is_ready]
        if not_ready:
            raise GameStateError(f"Players not ready yet: {not_ready}")

        self.current_turn = 0
        self._reset_roll()
        self._change_status(Status.PLAYING)
        logger.info(f"Game started by {user_id!r} with {len(self.players)} players")

    # --- TURN COMMANDS ---
    def roll(self, user_id: str, dice: Dice) -> RollOutcome:
        """
        Roll the dice for the current player.
        ----

        1. Check the game is in progress, it is your turn and you did not roll yet
        2. Roll, and check if any of your pieces can move with this value
        3. No move possible?
            * rolled a 6 --> you keep the turn and roll again
            * otherwise --> the turn passes to the next player immediately
        """
        self._assert_playing()
        self._assert_your_turn(user_id)
        if self.has_rolled_dice:
            raise AlreadyRolledError(
                f"Already rolled a {self.dice_value}. Move a piece first."
            )

        value = dice.roll()
        if value not in DIE_FACES:
            raise GameStateError(f"Dice produced an impossible value: {value!r}")

        player = self.current_player
        can_move = bool(movable_pieces(player, value))
        self.dice_value = value
        self.has_rolled_dice = True
        self.can_move = can_move

        turn_advanced = False
        if not can_move:
            # Nothing to move: clear the roll. Without a 6, the next player is up.
            self._reset_roll()
            if value != ENTRY_ROLL:
                self._advance_turn()
                turn_advanced = True

        logger.debug(
            f"{user_id!r} rolled {value} (can_move={can_move}, turn_advanced={turn_advanced})"
        )
        return RollOutcome(
            user_id=user_id,
            dice_value=value,
            can_move=can_move,
            turn_advanced=turn_advanced,
            next_user_id=self.current_player.user_id,
        )

    def move(self, user_id: str, piece_id: int) -> MoveOutcome:
        """
        Attempt to move one of your pieces by the rolled value
        -----

        1. compute the target cell (reject if off the board or blocked by your own piece)
        2. capture an opponent piece standing on the target
        3. move the piece
        4. check if you won
        5. rolled a 6? keep the turn. Otherwise pass it on.
        """
        self._assert_playing()
        self._assert_your_turn(user_id)
        if not self.has_rolled_dice:
            raise GameStateError("Roll the dice before moving a piece.")
        if not self.can_move:
            raise GameStateError(f"No piece can move with a {self.dice_value}.")

        player = self.current_player
        piece = player.piece(piece_id)
        if piece is None:
            raise PieceNotFoundError(f"Player {user_id!r} has no piece {piece_id!r}.")

        target = legal_target(player, piece, self.dice_value)
        if target is None:
            raise InvalidMoveError(
                f"Piece {piece_id} cannot move {self.dice_value} from position {piece.position}."
            )

        from_position = piece.position
        captured = self._capture(player, target)
        piece.place(target, player.color)

        turn_advanced = False
        if player.has_won():
            self.winner = player.user_id
            self._reset_roll()
            self._change_status(Status.FINISHED)
            logger.info(f"Player {user_id!r} ({player.color}) won the game")
        else:
            rolled_six = self.dice_value == ENTRY_ROLL
            self._reset_roll()
            if not rolled_six:
                self._advance_turn()
                turn_advanced = True

        logger.debug(f"{user_id!r} moved piece {piece_id}: {from_position} -> {target}")
        return MoveOutcome(
            user_id=user_id,
            piece_id=piece_id,
            from_position=from_position,
            to_position=target,
            captured_piece=captured,
            winner=self.winner,
            turn_advanced=turn_advanced,
            next_user_id=self.current_player.user_id,
        )

    def movable_pieces(self, user_id: str) -> list[int]:
        """
        Pieces the current player may pick after rolling.
        ----
        Can be used by a frontend to highlight the options.
        """
        self._assert_playing()
        self._assert_your_turn(user_id)
        if not self.has_rolled_dice:
            raise GameStateError("Roll the dice first.")
        return movable_pieces(self.current_player, self.dice_value)

    # -- PRIVATE HELPERS ---
    def _find_player(self, user_id: str) -> Optional[Player]:
        return next((player for player in self.players if player.user_id == user_id), None)

    def _get_player(self, user_id: str) -> Player:
        player = self._find_player(user_id)
        if player is None:
            raise PlayerError(f"Player {user_id!r} is not part of this game.")
        return player

    def _assert_status(self, status: Status, action: str) -> None:
        if self.status == Status.FINISHED:
            raise GameFinishedError(f"{action}. Game finished, winner: {self.winner!r}")
        if self.status != status:
            raise GameStateError(f"{action}. status: {self.status}")

    def _assert_playing(self) -> None:
        self._assert_status(Status.PLAYING, "Game is not in progress")

    def _assert_your_turn(self, user_id: str) -> None:
        """Only the player whose turn it is can roll / move."""
        turn_player = self.current_player
        if user_id != turn_player.user_id:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {turn_player.username!r} to play first."
            )

    def _capture(self, mover: Player, target: int) -> Optional[CapturedPiece]:
        found = find_capture(self.players, mover, target)
        if found is None:
            return None
        opponent, piece = found
        piece.send_to_base()
        logger.debug(f"{mover.user_id!r} captured {opponent.color} piece {piece.id}")
        return CapturedPiece(
            user_id=opponent.user_id, color=opponent.color, piece_id=piece.id
        )

    def _advance_turn(self) -> None:
        self.current_turn = (self.current_turn + 1) % len(self.players)

    def _reset_roll(self) -> None:
        self.dice_value = 0
        self.has_rolled_dice = False
        self.can_move = False

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status


def _player_from_model(model: PlayerModel) -> Player:
    """Rebuild a Player, validating the stored data."""
    if model.color not in {color.value for color in Color}:
        raise GameStateError(f"Invalid color: {model.color!r}")
    color = Color(model.color)

    piece_ids = sorted(piece.id for piece in model.pieces)
    if piece_ids != list(range(PIECES_PER_PLAYER)):
        raise GameStateError(
            f"Player {model.user_id!r} must have pieces 0-{PIECES_PER_PLAYER - 1} exactly once, got {piece_ids}"
        )
    for piece in model.pieces:
        if not is_valid_position(piece.position, color):
            raise GameStateError(
                f"Piece {piece.id} of {model.user_id!r} on invalid cell {piece.position} for {color}"
            )

    pieces = [
        Piece(id=p.id, position=p.position, is_home=p.is_home, is_safe=p.is_safe)
        for p in model.pieces
    ]
    return Player(model.user_id, model.username, color, pieces, model.is_ready)
