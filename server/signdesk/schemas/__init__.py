from signdesk.schemas.dispatch import (
    DeliveryRead,
    EmailTestRequest,
    SignatureDispatchRead,
    SignatureSubmission,
    SigningLinkRequest,
    SuccessRead,
)
from signdesk.schemas.position import SignaturePosition
from signdesk.schemas.receivers import DispatchMode, ReceiverConfig, ReceiverEntry

__all__ = [
    "DeliveryRead",
    "DispatchMode",
    "EmailTestRequest",
    "ReceiverConfig",
    "ReceiverEntry",
    "SignatureDispatchRead",
    "SignaturePosition",
    "SignatureSubmission",
    "SigningLinkRequest",
    "SuccessRead",
]
