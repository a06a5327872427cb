"""
Brevo sender: JSON REST authenticated with an ``api-key`` header.
"""

import base64
from typing import Any, Dict

import httpx

from signdesk.core.config import Settings

from .base import EmailMessage, EmailProvider, post_to_provider, require_credential
from .credentials import ApiKeyCredential, Credential


class BrevoSender:
    provider = EmailProvider.BREVO

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def build_payload(self, message: EmailMessage) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "sender": {"email": message.sender, "name": self.settings.sender_display_name},
            "to": [{"email": message.to}],
            "subject": message.subject,
            "htmlContent": message.html,
        }
        if message.cc:
            payload["cc"] = [{"email": address} for address in message.cc]
        if message.attachment is not None:
            payload["attachment"] = [
                {
                    "content": base64.b64encode(message.attachment.content).decode("ascii"),
                    "name": message.attachment.filename,
                }
            ]
        return payload

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        api_key = require_credential(credential, ApiKeyCredential, self.provider).api_key
        await post_to_provider(
            self.client,
            self.provider,
            self.settings.brevo_url,
            json=self.build_payload(message),
            headers={"api-key": api_key},
        )
