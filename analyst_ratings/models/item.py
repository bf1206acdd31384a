"""Analyst rating-change item model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from analyst_ratings.db.base import Base
from analyst_ratings.db.types import MoneyType, utcnow


class Item(Base):
    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ticker: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    target_from: Mapped[float] = mapped_column(MoneyType, nullable=False)
    target_to: Mapped[float] = mapped_column(MoneyType, nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(128), nullable=False)
    brokerage: Mapped[str | None] = mapped_column(String(255), nullable=True, default="")
    rating_from: Mapped[str] = mapped_column(String(64), nullable=False)
    rating_to: Mapped[str] = mapped_column(String(64), nullable=False)
    time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=utcnow(),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Item {self.ticker} {self.rating_from}->{self.rating_to} {self.id}>"


__all__ = ["Item"]
