from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from signdesk.models.document import SignableDocument
from signdesk.models.settings import SenderSettings


async def get_document(session: AsyncSession, document_id: str) -> Optional[SignableDocument]:
    result = await session.execute(select(SignableDocument).where(SignableDocument.id == document_id))
    return result.scalars().first()


async def get_sender_settings(session: AsyncSession, user_id: str) -> Optional[SenderSettings]:
    result = await session.execute(
        select(SenderSettings)
        .where(SenderSettings.user_id == user_id)
        .order_by(SenderSettings.created_at)
        .limit(1)
    )
    return result.scalars().first()
