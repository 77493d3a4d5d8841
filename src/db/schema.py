"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    room_id: Mapped[Optional[str]] = mapped_column(index=True)
    players: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    current_turn: Mapped[int] = mapped_column(default=0)
    dice_value: Mapped[int] = mapped_column(default=0)
    has_rolled_dice: Mapped[bool] = mapped_column(default=False)
    can_move: Mapped[bool] = mapped_column(default=False)
    winner: Mapped[Optional[str]]
    status: Mapped[str] = mapped_column(default=Status.WAITING.value)
    # Optimistic locking: SQLAlchemy adds "WHERE version = <loaded>" to every UPDATE
    version: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    __mapper_args__ = {"version_id_col": version}
