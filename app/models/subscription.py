"""Subscription ORM — a remote URL polled on a cron schedule.

Invariants:
    - url is unique
    - cron is validated before it reaches the table (core/cron.py)
    - last_fetch stamped by SubscriptionFetcher; last_check and node counters
      are reserved for health checking and stay at their defaults
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    last_check: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_fetch: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    total_nodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    alive_nodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cron: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    auto_update: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
