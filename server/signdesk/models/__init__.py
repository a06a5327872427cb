from signdesk.models.document import SignableDocument
from signdesk.models.settings import SenderSettings

__all__ = [
    "SignableDocument",
    "SenderSettings",
]
