from __future__ import annotations

import asyncio
import base64
import binascii
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from signdesk.core.config import Settings, get_settings
from signdesk.core.logging import get_logger
from signdesk.integrations.mail import Attachment, EmailDispatcher, EmailMessage, resolve_credential
from signdesk.schemas.receivers import DispatchMode
from signdesk.services import email_templates
from signdesk.services.fanout_service import FanoutReport, MessageTemplate, fan_out, plan_deliveries
from signdesk.services.records import DocumentRecord, SettingsRecord
from signdesk.services.stamping_service import format_signing_date, stamp_document
from signdesk.services.storage_service import DocumentStorage

logger = get_logger(__name__)


def decode_signature_data_uri(data_uri: Optional[str]) -> Optional[bytes]:
    """
    Decode a ``data:image/...;base64,...`` capture into raw image bytes.

    Anything that is not an image data URI means "no signature image".
    """
    if not data_uri or not data_uri.startswith("data:image"):
        return None
    _, _, encoded = data_uri.partition(",")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("signature data is not valid base64") from exc


async def dispatch_signed_document(
    document: DocumentRecord,
    settings_record: SettingsRecord,
    *,
    client_name: str,
    signature_image: Optional[bytes],
    storage: DocumentStorage,
    dispatcher: EmailDispatcher,
    dispatch_mode: Optional[DispatchMode] = None,
    signed_at: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> FanoutReport:
    """
    Stamp the client's signature onto the document and mail the signed copy
    to every active receiver.

    Configuration is validated before the document is read, so a missing
    receiver or credential fails without touching storage.
    """
    settings = settings or get_settings()
    mode = settings_record.dispatch_mode(dispatch_mode, settings)
    deliveries = plan_deliveries(settings_record.receivers.entries, mode)
    credential = resolve_credential(settings_record.provider, settings_record.credential_blob)

    pdf_bytes = await storage.read(document.file_path)
    moment = signed_at or datetime.now(ZoneInfo(settings.signature_timezone))
    date_text = format_signing_date(moment)
    # pypdf, reportlab and Pillow are all CPU-bound; keep them off the event loop.
    signed_pdf = await asyncio.to_thread(
        stamp_document,
        pdf_bytes,
        signature_position=document.signature_position,
        date_position=document.date_position,
        signature_image=signature_image,
        date_text=date_text,
    )

    template = MessageTemplate(
        sender=settings_record.sender_email,
        subject=email_templates.signed_document_subject(document.name, client_name),
        html=email_templates.signed_document_html(document.name, client_name, date_text),
        attachment=Attachment(
            content=signed_pdf,
            filename=email_templates.signed_document_filename(document.name, client_name),
        ),
    )

    async def send(message: EmailMessage) -> None:
        await dispatcher.send(message, credential)

    report = await fan_out(template, deliveries, send, stop_on_error=settings.fanout_stop_on_error)
    logger.info(
        "signature.dispatched",
        document_id=document.id,
        provider=credential.provider.value,
        mode=mode.value,
        deliveries=len(report.outcomes),
        failed=len(report.failed),
    )
    return report
