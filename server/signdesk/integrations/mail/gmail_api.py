"""
Gmail API senders.

Both variants post the same base64url raw RFC-822 message; they differ only
in how the bearer token is minted.
"""

from dataclasses import replace

import httpx

from signdesk.core.config import Settings

from .base import EmailMessage, EmailProvider, post_to_provider, require_credential
from .credentials import Credential, OAuth2Credential, ServiceAccountCredential
from .mime import encode_raw_message
from .tokens import AccessToken, mint_oauth2_token, mint_service_account_token


async def send_raw_message(
    client: httpx.AsyncClient,
    settings: Settings,
    provider: EmailProvider,
    token: AccessToken,
    message: EmailMessage,
) -> None:
    await post_to_provider(
        client,
        provider,
        settings.gmail_api_send_url,
        json={"raw": encode_raw_message(message)},
        headers={"Authorization": f"Bearer {token.access_token}"},
    )


class GmailOAuth2Sender:
    provider = EmailProvider.GMAIL_API_OAUTH2

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        oauth = require_credential(credential, OAuth2Credential, self.provider)
        token = await mint_oauth2_token(self.client, oauth, token_url=self.settings.oauth_token_url)
        await send_raw_message(self.client, self.settings, self.provider, token, message)


class GmailServiceAccountSender:
    provider = EmailProvider.GMAIL_API_SERVICE

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def send(self, message: EmailMessage, credential: Credential) -> None:
        account = require_credential(credential, ServiceAccountCredential, self.provider)
        token = await mint_service_account_token(
            self.client,
            account,
            token_url=self.settings.oauth_token_url,
            scope=self.settings.gmail_send_scope,
        )
        # The token acts for one mailbox; the message must go out from it.
        outgoing = replace(message, sender=account.subject)
        await send_raw_message(self.client, self.settings, self.provider, token, outgoing)
