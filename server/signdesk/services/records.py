"""
Read-only views of the two collaborator rows the dispatch core consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from signdesk.core.config import Settings
from signdesk.core.exceptions import ConfigError
from signdesk.models.document import SignableDocument
from signdesk.models.settings import SenderSettings
from signdesk.schemas.receivers import DispatchMode, ReceiverConfig
from signdesk.services.receiver_config import decode_receiver_config


@dataclass(frozen=True)
class DocumentRecord:
    id: str
    name: str
    file_path: str
    owner_id: str
    signature_position: Optional[str] = None
    date_position: Optional[str] = None

    @classmethod
    def from_model(cls, document: SignableDocument) -> "DocumentRecord":
        return cls(
            id=document.id,
            name=document.name,
            file_path=document.file_path,
            owner_id=document.user_id,
            signature_position=document.signature_position,
            date_position=document.date_position,
        )


@dataclass(frozen=True)
class SettingsRecord:
    sender_email: str
    receivers: ReceiverConfig
    provider: str
    credential_blob: str = field(repr=False)

    @classmethod
    def from_model(cls, row: SenderSettings, settings: Settings) -> "SettingsRecord":
        sender = (row.sender_email or "").strip()
        if not sender:
            raise ConfigError("missing sender")
        blob = row.email_api_key or ""
        if not blob.strip():
            raise ConfigError("missing credential")
        return cls(
            sender_email=sender,
            receivers=decode_receiver_config(row.receiver_email),
            provider=(row.email_provider or "").strip() or settings.default_provider,
            credential_blob=blob,
        )

    def dispatch_mode(self, requested: Optional[DispatchMode], settings: Settings) -> DispatchMode:
        """Request wins over the stored mode, which wins over the configured default."""
        if requested is not None:
            return requested
        if self.receivers.multi_send_mode is not None:
            return self.receivers.multi_send_mode
        return DispatchMode(settings.default_dispatch_mode)
