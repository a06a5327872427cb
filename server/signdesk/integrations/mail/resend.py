"""
Resend sender: JSON REST, bearer API key, base64 attachments.
"""

import base64
from typing import Any, Dict

import httpx

from signdesk.core.config import Settings

from .base import EmailMessage, EmailProvider, post_to_provider, require_credential
from .credentials import ApiKeyCredential, Credential


class ResendSender:
    provider = EmailProvider.RESEND

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def build_payload(self, message: EmailMessage) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
        }
        if message.cc:
            payload["cc"] = list(message.cc)
        if message.attachment is not None:
            payload["attachments"] = [
                {
                    "filename": message.attachment.filename,
                    "content": base64.b64encode(message.attachment.content).decode("ascii"),
                }
            ]
        return payload

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        api_key = require_credential(credential, ApiKeyCredential, self.provider).api_key
        await post_to_provider(
            self.client,
            self.provider,
            self.settings.resend_url,
            json=self.build_payload(message),
            headers={"Authorization": f"Bearer {api_key}"},
        )
