"""
Error taxonomy shared by the mail dispatcher, the stamper and the HTTP layer.
"""

from typing import Optional


class SignDeskError(Exception):
    """Base class for every error this service raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(SignDeskError):
    """Settings or credentials are incomplete or inconsistent. Never retried."""


class NotFoundError(SignDeskError):
    """A document, settings row or stored file does not exist."""


class TokenError(SignDeskError):
    """The OAuth2 / JWT-bearer token exchange was rejected."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class ProviderError(SignDeskError):
    """An email provider rejected the message, or could not be reached."""

    def __init__(self, provider: str, status: Optional[int] = None, body: str = ""):
        label = status if status is not None else "unreachable"
        super().__init__(f"{provider} error: {label} {body}".rstrip())
        self.provider = provider
        self.status = status
        self.body = body
