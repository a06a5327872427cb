"""
Mailgun sender: multipart form, HTTP Basic ``api:<key>``.

Mailgun has no separately configured sending domain here; it is the domain
part of the sender address.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from signdesk.core.config import Settings
from signdesk.core.exceptions import ConfigError

from .base import EmailMessage, EmailProvider, post_to_provider, require_credential
from .credentials import ApiKeyCredential, Credential


def sending_domain(sender: str) -> str:
    _, at, domain = sender.rpartition("@")
    if not at or not domain.strip():
        raise ConfigError(f"sender address has no domain: {sender}")
    return domain.strip()


class MailgunSender:
    provider = EmailProvider.MAILGUN

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def messages_url(self, sender: str) -> str:
        return f"{self.settings.mailgun_base_url.rstrip('/')}/{sending_domain(sender)}/messages"

    def build_form(self, message: EmailMessage) -> Tuple[Dict[str, str], Optional[Dict[str, Any]]]:
        data = {"from": message.sender, "to": message.to}
        if message.cc:
            data["cc"] = ",".join(message.cc)
        data["subject"] = message.subject
        data["html"] = message.html
        files = None
        if message.attachment is not None:
            files = {
                "attachment": (
                    message.attachment.filename,
                    message.attachment.content,
                    message.attachment.content_type,
                )
            }
        return data, files

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        api_key = require_credential(credential, ApiKeyCredential, self.provider).api_key
        data, files = self.build_form(message)
        await post_to_provider(
            self.client,
            self.provider,
            self.messages_url(message.sender),
            data=data,
            files=files,
            auth=("api", api_key),
        )
