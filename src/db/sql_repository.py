"""Implementation of (Game)Repository using SQLAlchemy"""

from dataclasses import asdict
from uuid import UUID, uuid4

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from src.core.exceptions import StaleGameError
from src.core.models import GameModel, PlayerModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_state(game, game_db)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Add new info to existing record.

        NOTE: the version the caller loaded must still be the stored one. Otherwise someone else wrote in between.
        """
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        if game_db.version != game.version:
            raise StaleGameError(
                f"Game {game_id} changed concurrently (loaded version {game.version}, stored {game_db.version})."
            )
        self._copy_state(game, game_db)
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            raise StaleGameError(f"Game {game_id} changed concurrently.") from exc
        self.db.refresh(game_db)
        logger.debug(f"Stored game {game_id} at version {game_db.version}")
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        # populate_existing: always read the latest committed row, not the copy cached in this session
        query = (
            select(DBGame)
            .where(DBGame.id == game_id)
            .execution_options(populate_existing=True)
        )
        return self.db.scalar(query)

    def _copy_state(self, game: GameModel, game_db: DBGame) -> None:
        game_db.room_id = game.room_id
        game_db.players = [asdict(player) for player in game.players]
        game_db.current_turn = game.current_turn
        game_db.dice_value = game.dice_value
        game_db.has_rolled_dice = game.has_rolled_dice
        game_db.can_move = game.can_move
        game_db.winner = game.winner
        game_db.status = game.status

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            players=[PlayerModel.from_dict(player) for player in game_db.players],
            current_turn=game_db.current_turn,
            dice_value=game_db.dice_value,
            has_rolled_dice=game_db.has_rolled_dice,
            can_move=game_db.can_move,
            winner=game_db.winner,
            status=game_db.status,
            room_id=game_db.room_id,
            version=game_db.version,
        )
