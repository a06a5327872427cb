from collections.abc import AsyncIterator

import httpx

from signdesk.core.config import get_settings
from signdesk.integrations.mail import EmailDispatcher
from signdesk.services.storage_service import DocumentStorage, LocalDocumentStorage


async def get_dispatcher() -> AsyncIterator[EmailDispatcher]:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield EmailDispatcher(client, settings)


def get_document_storage() -> DocumentStorage:
    return LocalDocumentStorage(get_settings().storage_root)
