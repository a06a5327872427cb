"""
Gmail app-password sender over an SMTP session (STARTTLS on 587).

smtplib is blocking, so the whole session runs in a worker thread.
"""

import asyncio
import smtplib
import ssl

import httpx

from signdesk.core.config import Settings
from signdesk.core.exceptions import ProviderError

from .base import EmailMessage, EmailProvider, require_credential
from .credentials import Credential, SmtpPasswordCredential
from .mime import build_mime_message


class GmailSmtpSender:
    provider = EmailProvider.GMAIL

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        # The HTTP client is unused; every sender shares one constructor shape.
        self.client = client
        self.settings = settings

    def _deliver(self, message: EmailMessage, password: str) -> None:
        mime = build_mime_message(message)
        recipients = [message.to, *message.cc]
        context = ssl.create_default_context()
        with smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.http_timeout_seconds,
        ) as server:
            server.ehlo()
            server.starttls(context=context)
            server.ehlo()
            server.login(message.sender, password)
            server.send_message(mime, from_addr=message.sender, to_addrs=recipients)

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        password = require_credential(credential, SmtpPasswordCredential, self.provider).password
        try:
            await asyncio.to_thread(self._deliver, message, password)
        except smtplib.SMTPResponseException as exc:
            body = exc.smtp_error.decode("utf-8", "replace") if isinstance(exc.smtp_error, bytes) else str(exc.smtp_error)
            raise ProviderError(self.provider.value, exc.smtp_code, body) from exc
        except smtplib.SMTPRecipientsRefused as exc:
            raise ProviderError(self.provider.value, None, f"recipients refused: {', '.join(exc.recipients)}") from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise ProviderError(self.provider.value, None, str(exc)) from exc
