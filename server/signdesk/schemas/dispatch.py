import base64
import binascii
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from signdesk.schemas.common import CamelModel
from signdesk.schemas.receivers import DispatchMode


class SignatureSubmission(CamelModel):
    client_name: str = Field(alias="clientName", min_length=1, max_length=255)
    signature_data: Optional[str] = Field(default=None, alias="signatureData")
    multi_send_mode: Optional[DispatchMode] = Field(default=None, alias="multiSendMode")

    @field_validator("signature_data")
    @classmethod
    def check_signature_data(cls, value: Optional[str]) -> Optional[str]:
        if value and value.startswith("data:image"):
            _, _, encoded = value.partition(",")
            try:
                base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ValueError("signatureData is not valid base64") from exc
        return value


class DeliveryRead(CamelModel):
    to: str
    cc: List[str] = Field(default_factory=list)
    delivered: bool
    error: Optional[str] = None


class SignatureDispatchRead(CamelModel):
    success: bool
    deliveries: List[DeliveryRead] = Field(default_factory=list)


class EmailTestRequest(CamelModel):
    provider: str = Field(min_length=1)
    api_key: str = Field(alias="apiKey", min_length=1)
    sender_email: EmailStr = Field(alias="senderEmail")
    receiver_email: EmailStr = Field(alias="receiverEmail")


class SigningLinkRequest(CamelModel):
    to: EmailStr
    document_name: str = Field(alias="documentName", min_length=1, max_length=255)
    link: str = Field(min_length=1)


class SuccessRead(CamelModel):
    success: bool = True
