"""
Credential resolution.

The stored credential blob is untyped: a bare API key or app password for
single-field providers, a JSON object for the Gmail API variants. It is parsed
here, once, into one typed variant; nothing past this module sees the blob.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from signdesk.core.exceptions import ConfigError

from .base import EmailProvider

API_KEY_PROVIDERS = frozenset(
    {EmailProvider.SENDGRID, EmailProvider.RESEND, EmailProvider.MAILGUN, EmailProvider.BREVO}
)


@dataclass(frozen=True)
class ApiKeyCredential:
    provider: EmailProvider
    api_key: str = field(repr=False)


@dataclass(frozen=True)
class SmtpPasswordCredential:
    password: str = field(repr=False)
    provider: EmailProvider = field(default=EmailProvider.GMAIL, init=False)


@dataclass(frozen=True)
class OAuth2Credential:
    client_id: str
    client_secret: str = field(repr=False)
    refresh_token: str = field(repr=False)
    provider: EmailProvider = field(default=EmailProvider.GMAIL_API_OAUTH2, init=False)


@dataclass(frozen=True)
class ServiceAccountKey:
    client_email: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class ServiceAccountCredential:
    key: ServiceAccountKey
    delegated_email: Optional[str] = None
    provider: EmailProvider = field(default=EmailProvider.GMAIL_API_SERVICE, init=False)

    @property
    def subject(self) -> str:
        """Mailbox the minted token acts for."""
        return self.delegated_email or self.key.client_email


Credential = Union[ApiKeyCredential, SmtpPasswordCredential, OAuth2Credential, ServiceAccountCredential]


def parse_provider(tag: Union[str, EmailProvider]) -> EmailProvider:
    try:
        return EmailProvider(tag)
    except ValueError as exc:
        raise ConfigError(f"unknown email provider: {tag}") from exc


def _load_object(raw: Union[str, Dict[str, Any]], what: str) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{what} is not valid JSON") from exc
    if not isinstance(decoded, dict):
        raise ConfigError(f"{what} is not a JSON object")
    return decoded


def _required(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"missing field: {name}")
    return value


def _service_account_key(raw: Union[str, Dict[str, Any]]) -> ServiceAccountKey:
    data = _load_object(raw, "serviceAccountJson")
    client_email = _required(data, "client_email").strip()
    # Keys pasted through a form often keep their newlines as literal "\n".
    private_key = _required(data, "private_key").replace("\\n", "\n")
    return ServiceAccountKey(client_email=client_email, private_key=private_key)


def resolve_credential(provider_tag: Union[str, EmailProvider], blob: Optional[str]) -> Credential:
    """
    Parse a stored credential blob for a provider tag.

    Raises:
        ConfigError: unknown tag, blank blob, or a multi-field blob missing a field
    """
    provider = parse_provider(provider_tag)
    if blob is None or not blob.strip():
        raise ConfigError("missing credential")

    if provider in API_KEY_PROVIDERS:
        return ApiKeyCredential(provider=provider, api_key=blob.strip())

    if provider is EmailProvider.GMAIL:
        return SmtpPasswordCredential(password=blob.strip())

    data = _load_object(blob, "credential")

    if provider is EmailProvider.GMAIL_API_OAUTH2:
        return OAuth2Credential(
            client_id=_required(data, "clientId"),
            client_secret=_required(data, "clientSecret"),
            refresh_token=_required(data, "refreshToken"),
        )

    service_account = data.get("serviceAccountJson")
    if isinstance(service_account, str):
        if not service_account.strip():
            raise ConfigError("missing field: serviceAccountJson")
    elif not isinstance(service_account, dict):
        raise ConfigError("missing field: serviceAccountJson")

    delegated = data.get("delegatedEmail")
    if delegated is not None and not isinstance(delegated, str):
        raise ConfigError("delegatedEmail must be a string")
    return ServiceAccountCredential(
        key=_service_account_key(service_account),
        delegated_email=delegated.strip() if delegated and delegated.strip() else None,
    )
