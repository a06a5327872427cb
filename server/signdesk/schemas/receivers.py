from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, validate_email

from signdesk.schemas.common import CamelModel


class DispatchMode(str, Enum):
    SINGLE = "single"  # one message to the first receiver, the rest as CC
    MULTIPLE = "multiple"  # one independent message per receiver


class ReceiverEntry(CamelModel):
    email: str = ""
    enabled: bool = True

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        """Blank is allowed (the entry is simply inactive); anything else must be one address."""
        address = value.strip()
        if address:
            validate_email(address)
        return address

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.email)


class ReceiverConfig(CamelModel):
    entries: List[ReceiverEntry] = Field(default_factory=list)
    multi_send_mode: Optional[DispatchMode] = Field(default=None, alias="multiSendMode")

    def active_emails(self) -> List[str]:
        return [entry.email for entry in self.entries if entry.is_active]
