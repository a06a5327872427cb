from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from signdesk.api.dependencies.auth import get_current_user_id, get_optional_user_id
from signdesk.api.dependencies.database import get_db
from signdesk.api.dependencies.mail import get_dispatcher
from signdesk.api.errors import to_http_exception
from signdesk.core.config import get_settings
from signdesk.core.exceptions import SignDeskError
from signdesk.integrations.mail import EmailDispatcher
from signdesk.schemas.dispatch import EmailTestRequest, SigningLinkRequest, SuccessRead
from signdesk.services.document_service import get_sender_settings
from signdesk.services.notification_service import (
    SAVED_CREDENTIAL_PLACEHOLDER,
    resolve_test_credential_blob,
    send_signing_link,
    send_test_message,
)
from signdesk.services.records import SettingsRecord


router = APIRouter(prefix="/emails", tags=["emails"])


@router.post("/test", response_model=SuccessRead)
async def send_test_email_endpoint(
    payload: EmailTestRequest,
    session: AsyncSession = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    user_id: str | None = Depends(get_optional_user_id),
) -> SuccessRead:
    saved = None
    if payload.api_key == SAVED_CREDENTIAL_PLACEHOLDER:
        if user_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        row = await get_sender_settings(session, user_id)
        if row is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found")
        try:
            saved = SettingsRecord.from_model(row, get_settings())
        except SignDeskError as exc:
            raise to_http_exception(exc) from exc

    try:
        await send_test_message(
            dispatcher,
            provider=payload.provider,
            credential_blob=resolve_test_credential_blob(payload.api_key, saved),
            sender_email=str(payload.sender_email),
            receiver_email=str(payload.receiver_email),
        )
    except SignDeskError as exc:
        raise to_http_exception(exc) from exc
    return SuccessRead()


@router.post("/link", response_model=SuccessRead)
async def send_signing_link_endpoint(
    payload: SigningLinkRequest,
    session: AsyncSession = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    user_id: str = Depends(get_current_user_id),
) -> SuccessRead:
    row = await get_sender_settings(session, user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found")
    try:
        await send_signing_link(
            dispatcher,
            SettingsRecord.from_model(row, get_settings()),
            to=str(payload.to),
            document_name=payload.document_name,
            link=payload.link,
        )
    except SignDeskError as exc:
        raise to_http_exception(exc) from exc
    return SuccessRead()
