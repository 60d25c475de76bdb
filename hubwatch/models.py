"""ORM models for stored servers and their player history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class ServerRow(Base):
    __tablename__ = "servers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    site_url: Mapped[str] = mapped_column(String(1024), default="")
    game_url: Mapped[str] = mapped_column(String(1024), default="")
    last_seen: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    players: Mapped[int] = mapped_column(Integer, default=0)


class PointRow(Base):
    """One player-count sample. No foreign key: history outlives evicted servers."""

    __tablename__ = "server_points"
    __table_args__ = (
        UniqueConstraint("server_id", "time", name="uix_point_server_time"),
        Index("ix_point_server", "server_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    server_id: Mapped[str] = mapped_column(String(32), nullable=False)
    players: Mapped[int] = mapped_column(Integer, default=0)
