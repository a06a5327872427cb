"""
SendGrid sender: JSON REST, bearer API key, base64 attachments.
"""

import base64
from typing import Any, Dict

import httpx

from signdesk.core.config import Settings

from .base import EmailMessage, EmailProvider, post_to_provider, require_credential
from .credentials import ApiKeyCredential, Credential


class SendGridSender:
    provider = EmailProvider.SENDGRID

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def build_payload(self, message: EmailMessage) -> Dict[str, Any]:
        personalization: Dict[str, Any] = {"to": [{"email": message.to}]}
        if message.cc:
            personalization["cc"] = [{"email": address} for address in message.cc]
        payload: Dict[str, Any] = {
            "personalizations": [personalization],
            "from": {"email": message.sender, "name": self.settings.sender_display_name},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }
        if message.attachment is not None:
            payload["attachments"] = [
                {
                    "content": base64.b64encode(message.attachment.content).decode("ascii"),
                    "filename": message.attachment.filename,
                    "type": message.attachment.content_type,
                    "disposition": "attachment",
                }
            ]
        return payload

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        api_key = require_credential(credential, ApiKeyCredential, self.provider).api_key
        await post_to_provider(
            self.client,
            self.provider,
            self.settings.sendgrid_url,
            json=self.build_payload(message),
            headers={"Authorization": f"Bearer {api_key}"},
        )
