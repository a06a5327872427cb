from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from signdesk.db.base import Base, Identifier, RecordTimestamps


class SignableDocument(RecordTimestamps, Base):
    """An uploaded PDF awaiting a client's signature.

    Position columns hold a JSON-encoded position, the legacy ``"bottom"``
    sentinel, or NULL; all three are read by the position resolver.
    """

    __tablename__ = "documents"

    id: Mapped[Identifier]
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    signature_position: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_position: Mapped[str | None] = mapped_column(Text, nullable=True)
