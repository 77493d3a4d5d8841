"""
Wiring for a host process (e.g. a socket server).

The transport adapter resolves the user's identity, builds a request model, calls the service and broadcasts the
response to everyone in the game. Errors only go back to the sender.
"""

from typing import Optional

from sqlalchemy.orm import Session

from src.core.config import Config
from src.core.log import setup_logging
from src.db.sql_repository import SQLGameRepository
from src.ludo.dice import Dice
from src.services.ludo_service import LudoService


def create_service(db_session: Session, dice: Optional[Dice] = None) -> LudoService:
    setup_logging(Config.LOG_LEVEL)
    return LudoService(SQLGameRepository(db_session), dice=dice)
