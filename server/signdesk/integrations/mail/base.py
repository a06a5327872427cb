"""
Outbound Mail Base Classes and Interfaces

Defines the message value types, the sender contract every provider
implements, and the factory that maps a provider tag to its sender.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Tuple, Type, runtime_checkable

import httpx

from signdesk.core.config import Settings
from signdesk.core.exceptions import ConfigError, ProviderError

if TYPE_CHECKING:
    from .credentials import Credential


class EmailProvider(str, Enum):
    """Supported outbound mail providers, keyed by their stored tag."""
    SENDGRID = "sendgrid"
    RESEND = "resend"
    MAILGUN = "mailgun"
    BREVO = "brevo"
    GMAIL = "gmail"
    GMAIL_API_OAUTH2 = "gmail-api-oauth2"
    GMAIL_API_SERVICE = "gmail-api-service"


@dataclass(frozen=True)
class Attachment:
    """A file attached to an outgoing message."""
    content: bytes = field(repr=False)
    filename: str
    content_type: str = "application/pdf"


@dataclass(frozen=True)
class EmailMessage:
    """A fully addressed message. Built once per send and never mutated."""
    sender: str
    to: str
    subject: str
    html: str
    cc: Tuple[str, ...] = ()
    attachment: Optional[Attachment] = None


@runtime_checkable
class EmailSender(Protocol):
    """Capability every provider implementation offers."""

    provider: EmailProvider

    async def send(self, message: EmailMessage, credential: "Credential") -> None:
        """
        Deliver one message.

        Raises:
            ConfigError: credential variant does not belong to this provider
            TokenError: token exchange rejected (Gmail API variants)
            ProviderError: provider rejected the message or was unreachable
        """
        ...


def require_credential(credential: Any, expected: Type[Any], provider: EmailProvider) -> Any:
    """Reject a credential variant that does not belong to ``provider``."""
    if not isinstance(credential, expected) or credential.provider is not provider:
        raise ConfigError(
            f"credential {type(credential).__name__} does not match provider '{provider.value}'"
        )
    return credential


async def post_to_provider(
    client: httpx.AsyncClient,
    provider: EmailProvider,
    url: str,
    **kwargs: Any,
) -> httpx.Response:
    """POST to a provider endpoint and turn any non-2xx answer into a ProviderError."""
    try:
        response = await client.post(url, **kwargs)
    except httpx.HTTPError as exc:
        raise ProviderError(provider.value, None, str(exc)) from exc
    if not response.is_success:
        raise ProviderError(provider.value, response.status_code, response.text)
    return response


class EmailSenderFactory:
    """Tagged dispatch table from provider tag to sender implementation."""

    _senders: Dict[EmailProvider, type] = {}

    @classmethod
    def register_sender(cls, provider: EmailProvider, sender_class: type) -> None:
        """Register the sender implementation for a provider tag."""
        cls._senders[provider] = sender_class

    @classmethod
    def create_sender(
        cls,
        provider: EmailProvider,
        *,
        client: httpx.AsyncClient,
        settings: Settings,
    ) -> EmailSender:
        """Create the sender for ``provider`` bound to a shared HTTP client."""
        if provider not in cls._senders:
            raise ConfigError(f"unknown email provider: {provider}")
        return cls._senders[provider](client=client, settings=settings)

    @classmethod
    def get_supported_providers(cls) -> list[EmailProvider]:
        """Get list of registered provider tags."""
        return list(cls._senders.keys())
