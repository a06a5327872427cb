import uuid
from datetime import datetime, timezone
from typing import Annotated

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Rows are keyed by a UUID string generated on insert.
Identifier = Annotated[str, mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))]

# Set in Python at sub-second resolution; the first settings row per user is chosen by created_at.
CreatedAt = Annotated[datetime, mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)]


class Base(DeclarativeBase):
    pass


class RecordTimestamps:
    """``created_at`` / ``updated_at`` for every persisted row."""

    created_at: Mapped[CreatedAt]
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
