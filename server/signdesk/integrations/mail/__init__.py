"""
Outbound mail integration.

Provides one sender per supported provider behind a single dispatch call,
plus the credential parsing and token minting those senders rely on.
"""

from .base import (
    Attachment,
    EmailMessage,
    EmailProvider,
    EmailSender,
    EmailSenderFactory,
)
from .brevo import BrevoSender
from .credentials import (
    ApiKeyCredential,
    Credential,
    OAuth2Credential,
    ServiceAccountCredential,
    ServiceAccountKey,
    SmtpPasswordCredential,
    resolve_credential,
)
from .dispatcher import EmailDispatcher
from .gmail_api import GmailOAuth2Sender, GmailServiceAccountSender
from .gmail_smtp import GmailSmtpSender
from .mailgun import MailgunSender
from .resend import ResendSender
from .sendgrid import SendGridSender


def _register_builtin_senders() -> None:
    """Register built-in sender implementations."""
    EmailSenderFactory.register_sender(EmailProvider.SENDGRID, SendGridSender)
    EmailSenderFactory.register_sender(EmailProvider.RESEND, ResendSender)
    EmailSenderFactory.register_sender(EmailProvider.MAILGUN, MailgunSender)
    EmailSenderFactory.register_sender(EmailProvider.BREVO, BrevoSender)
    EmailSenderFactory.register_sender(EmailProvider.GMAIL, GmailSmtpSender)
    EmailSenderFactory.register_sender(EmailProvider.GMAIL_API_OAUTH2, GmailOAuth2Sender)
    EmailSenderFactory.register_sender(EmailProvider.GMAIL_API_SERVICE, GmailServiceAccountSender)


_register_builtin_senders()

__all__ = [
    "Attachment",
    "EmailMessage",
    "EmailProvider",
    "EmailSender",
    "EmailSenderFactory",
    "EmailDispatcher",
    "ApiKeyCredential",
    "SmtpPasswordCredential",
    "OAuth2Credential",
    "ServiceAccountCredential",
    "ServiceAccountKey",
    "Credential",
    "resolve_credential",
]
