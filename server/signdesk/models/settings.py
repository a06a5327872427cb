from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from signdesk.db.base import Base, Identifier, RecordTimestamps


class SenderSettings(RecordTimestamps, Base):
    __tablename__ = "settings"

    id: Mapped[Identifier]
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    sender_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    # Receiver config in any of its stored shapes: {"entries": [...]}, [...], or a bare address.
    receiver_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_provider: Mapped[str | None] = mapped_column(String(40), nullable=True)
    # Credential blob: API key, app password, or JSON for multi-field providers.
    email_api_key: Mapped[str | None] = mapped_column(Text, nullable=True)
