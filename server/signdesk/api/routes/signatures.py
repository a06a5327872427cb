from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from signdesk.api.dependencies.database import get_db
from signdesk.api.dependencies.mail import get_dispatcher, get_document_storage
from signdesk.api.errors import to_http_exception
from signdesk.core.config import get_settings
from signdesk.core.exceptions import SignDeskError
from signdesk.integrations.mail import EmailDispatcher
from signdesk.schemas.dispatch import DeliveryRead, SignatureDispatchRead, SignatureSubmission
from signdesk.services.document_service import get_document, get_sender_settings
from signdesk.services.records import DocumentRecord, SettingsRecord
from signdesk.services.signature_service import decode_signature_data_uri, dispatch_signed_document
from signdesk.services.storage_service import DocumentStorage


router = APIRouter(prefix="/documents", tags=["signatures"])


@router.post("/{document_id}/signatures", response_model=SignatureDispatchRead)
async def submit_signature_endpoint(
    document_id: str,
    payload: SignatureSubmission,
    session: AsyncSession = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    storage: DocumentStorage = Depends(get_document_storage),
) -> SignatureDispatchRead:
    # Signing happens through a shared link, so the caller is the client, not the owner.
    settings = get_settings()
    document = await get_document(session, document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    row = await get_sender_settings(session, document.user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found")

    try:
        report = await dispatch_signed_document(
            DocumentRecord.from_model(document),
            SettingsRecord.from_model(row, settings),
            client_name=payload.client_name,
            signature_image=decode_signature_data_uri(payload.signature_data),
            storage=storage,
            dispatcher=dispatcher,
            dispatch_mode=payload.multi_send_mode,
            settings=settings,
        )
    except SignDeskError as exc:
        raise to_http_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    return SignatureDispatchRead(
        success=report.all_delivered,
        deliveries=[
            DeliveryRead(
                to=outcome.delivery.to,
                cc=list(outcome.delivery.cc),
                delivered=outcome.delivered,
                error=outcome.error,
            )
            for outcome in report.outcomes
        ],
    )
