"""
Single entry point for sending one message through whichever provider the
credential belongs to.
"""

from typing import Dict, Optional

import httpx

from signdesk.core.config import Settings, get_settings
from signdesk.core.exceptions import SignDeskError
from signdesk.core.logging import get_logger

from .base import EmailMessage, EmailProvider, EmailSender, EmailSenderFactory
from .credentials import Credential

logger = get_logger(__name__)


class EmailDispatcher:
    """Routes ``send(message, credential)`` to the provider's sender."""

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()
        self._senders: Dict[EmailProvider, EmailSender] = {}

    def sender_for(self, provider: EmailProvider) -> EmailSender:
        if provider not in self._senders:
            self._senders[provider] = EmailSenderFactory.create_sender(
                provider, client=self.client, settings=self.settings
            )
        return self._senders[provider]

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        provider = credential.provider
        sender = self.sender_for(provider)
        try:
            await sender.send(message, credential)
        except SignDeskError as exc:
            logger.warning(
                "email.provider_failed",
                provider=provider.value,
                to=message.to,
                error=exc.message,
            )
            raise
        logger.info(
            "email.sent",
            provider=provider.value,
            to=message.to,
            cc_count=len(message.cc),
            has_attachment=message.attachment is not None,
        )
