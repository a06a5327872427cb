from __future__ import annotations

from typing import Optional

from signdesk.core.exceptions import ConfigError
from signdesk.core.logging import get_logger
from signdesk.integrations.mail import EmailDispatcher, EmailMessage, resolve_credential
from signdesk.services import email_templates
from signdesk.services.records import SettingsRecord

logger = get_logger(__name__)

# Sent by the settings screen instead of a credential to mean "the one already stored".
SAVED_CREDENTIAL_PLACEHOLDER = "__use_saved__"


def resolve_test_credential_blob(raw: str, saved: Optional[SettingsRecord]) -> str:
    if raw != SAVED_CREDENTIAL_PLACEHOLDER:
        return raw
    if saved is None:
        raise ConfigError("no saved credential to use")
    return saved.credential_blob


async def send_test_message(
    dispatcher: EmailDispatcher,
    *,
    provider: str,
    credential_blob: str,
    sender_email: str,
    receiver_email: str,
) -> None:
    """Send one check message through the dispatcher, without any document."""
    if not sender_email.strip():
        raise ConfigError("missing sender")
    if not receiver_email.strip():
        raise ConfigError("no receivers")
    credential = resolve_credential(provider, credential_blob)
    message = EmailMessage(
        sender=sender_email.strip(),
        to=receiver_email.strip(),
        subject=email_templates.CHECK_MESSAGE_SUBJECT,
        html=email_templates.check_message_html(credential.provider.value),
    )
    await dispatcher.send(message, credential)
    logger.info("email.test_sent", provider=credential.provider.value, to=message.to)


async def send_signing_link(
    dispatcher: EmailDispatcher,
    settings_record: SettingsRecord,
    *,
    to: str,
    document_name: str,
    link: str,
) -> None:
    """Invite a client to sign ``document_name`` at ``link``."""
    credential = resolve_credential(settings_record.provider, settings_record.credential_blob)
    message = EmailMessage(
        sender=settings_record.sender_email,
        to=to,
        subject=email_templates.signing_link_subject(document_name),
        html=email_templates.signing_link_html(document_name, link),
    )
    await dispatcher.send(message, credential)
    logger.info("email.link_sent", provider=credential.provider.value, to=to)
