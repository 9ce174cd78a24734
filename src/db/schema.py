"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBRoom(Base):
    __tablename__ = "rooms"
    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str]
    host_id: Mapped[str]
    host_name: Mapped[str]
    guest_id: Mapped[Optional[str]]
    guest_name: Mapped[Optional[str]]
    status: Mapped[str]
    board: Mapped[list] = mapped_column(JSON)
    player_to_move: Mapped[str]
    captured_white: Mapped[int] = mapped_column(default=0)
    captured_black: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
