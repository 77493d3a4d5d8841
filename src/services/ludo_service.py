"""Orchestration of communication from API/transport layer to business logic and persistence layers (and the reverse direction)."""

from typing import Callable, Optional, TypeVar
from uuid import UUID

from loguru import logger

from src.api.models import (
    CapturedPieceResponse,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PieceResponse,
    PlayerResponse,
    ReadyRequest,
    RollRequest,
    RollResponse,
    StartGameRequest,
    StartMatchRequest,
)
from src.core.exceptions import GameError, GameNotFoundError
from src.core.models import GameModel
from src.db.repository import GameRepository
from src.ludo.dice import Dice, RandomDice
from src.ludo.game import Game
from src.services.locks import GameLocks

T = TypeVar("T")


class LudoService:
    """
    Orchestration of layers for Ludo games.
    ----

    Every command follows the same steps while holding the game's lock:
    load the GameModel --> rebuild the Game --> apply the command --> store the new GameModel --> respond.
    A rejected command raises before anything gets stored.
    """

    def __init__(
        self,
        repository: GameRepository,
        dice: Optional[Dice] = None,
        locks: Optional[GameLocks] = None,
    ) -> None:
        self.repo = repository
        self.dice = dice if dice is not None else RandomDice()
        self.locks = locks if locks is not None else GameLocks()

    # -- LOBBY ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game."""
        new_game = Game.new_game(request.user_id, request.username, request.room_id)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info(f"Game {game_id} created by {request.user_id!r}")
        return self._create_game_response(game_id, stored_game)

    def start_match(self, request: StartMatchRequest) -> GameResponse:
        """Matchmaking handed over a complete set of players: game starts right away."""
        participants = [(p.user_id, p.username) for p in request.participants]
        game = Game.from_players(participants, room_id=request.room_id)
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info(f"Game {game_id} started for room {request.room_id!r}")
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Another player requested to join a game."""
        return self._apply(
            request.game_id,
            lambda game: game.register_player(request.user_id, request.username),
        )[0]

    def set_ready(self, request: ReadyRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            lambda game: game.set_ready(request.user_id, request.is_ready),
        )[0]

    def start_game(self, request: StartGameRequest) -> GameResponse:
        return self._apply(request.game_id, lambda game: game.start(request.user_id))[0]

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    # -- TURN COMMANDS ---
    def roll_dice(self, request: RollRequest) -> RollResponse:
        """Roll for the player whose turn it is."""
        game_response, outcome = self._apply(
            request.game_id, lambda game: game.roll(request.user_id, self.dice)
        )
        return RollResponse(
            game_id=request.game_id,
            user_id=outcome.user_id,
            dice_value=outcome.dice_value,
            can_move=outcome.can_move,
            turn_advanced=outcome.turn_advanced,
            next_user_id=outcome.next_user_id,
            game=game_response,
        )

    def move_piece(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt."""
        game_response, outcome = self._apply(
            request.game_id, lambda game: game.move(request.user_id, request.piece_id)
        )
        captured = outcome.captured_piece
        return MoveResponse(
            game_id=request.game_id,
            user_id=outcome.user_id,
            piece_id=outcome.piece_id,
            from_position=outcome.from_position,
            to_position=outcome.to_position,
            captured_piece=(
                CapturedPieceResponse(
                    user_id=captured.user_id,
                    color=captured.color,
                    piece_id=captured.piece_id,
                )
                if captured
                else None
            ),
            winner=outcome.winner,
            turn_advanced=outcome.turn_advanced,
            next_user_id=outcome.next_user_id,
            game=game_response,
        )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Pieces the current player may move with the rolled value."""
        game = Game.from_model(self._fetch_game(request.game_id))
        pieces = game.movable_pieces(request.user_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            user_id=request.user_id,
            color=game.current_player.color,
            dice_value=game.dice_value,
            movable_pieces=pieces,
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.locks.hold(request.game_id):
            self.repo.delete_game(request.game_id)
        self.locks.discard(request.game_id)

    # -- Internal helpers --
    def _apply(
        self, game_id: UUID, command: Callable[[Game], T]
    ) -> tuple[GameResponse, T]:
        """Run a command on the stored game and persist the result (serialized per game)."""
        with self.locks.hold(game_id):
            game = Game.from_model(self._fetch_game(game_id))
            try:
                result = command(game)
            except GameError as exc:
                logger.warning(f"Game {game_id}: rejected {type(exc).__name__}: {exc}")
                raise
            updated = game.to_model()
            stored = self.repo.update_game(game_id, updated)
            if stored is None:
                raise GameNotFoundError(f"Game with {game_id=} not found.")
        return self._create_game_response(game_id, stored), result

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            room_id=model.room_id,
            players=[
                PlayerResponse(
                    user_id=player.user_id,
                    username=player.username,
                    color=player.color,
                    pieces=[
                        PieceResponse(
                            id=piece.id,
                            position=piece.position,
                            is_home=piece.is_home,
                            is_safe=piece.is_safe,
                        )
                        for piece in player.pieces
                    ],
                    is_ready=player.is_ready,
                )
                for player in model.players
            ],
            current_turn=model.current_turn,
            dice_value=model.dice_value,
            has_rolled_dice=model.has_rolled_dice,
            can_move=model.can_move,
            winner=model.winner,
            status=model.status,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
