"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBBoardSession(Base):
    __tablename__ = "board_sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[Optional[str]]
    moves_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    selected_square: Mapped[Optional[str]]
    pending_promotion: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
