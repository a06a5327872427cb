"""
Short-lived bearer tokens for the Gmail API variants.

Two flows, both against the same OAuth token endpoint:

* refresh-token grant for a personal account's OAuth2 client;
* RS256-signed JWT-bearer grant for a Workspace service account, where
  domain-wide delegation is expressed only through the ``sub`` claim.

Nothing is cached: every send mints its own token.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from jose import jwt
from jose.exceptions import JOSEError

from signdesk.core.exceptions import ConfigError, TokenError
from signdesk.core.logging import get_logger

from .credentials import OAuth2Credential, ServiceAccountCredential

logger = get_logger(__name__)

TOKEN_LIFETIME_SECONDS = 3600
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"


@dataclass(frozen=True)
class AccessToken:
    access_token: str = field(repr=False)
    expires_in: int = TOKEN_LIFETIME_SECONDS


def build_service_account_claims(
    credential: ServiceAccountCredential,
    *,
    scope: str,
    audience: str,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    issued_at = int(time.time()) if now is None else now
    return {
        "iss": credential.key.client_email,
        "sub": credential.subject,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME_SECONDS,
    }


def sign_service_account_assertion(
    credential: ServiceAccountCredential,
    *,
    scope: str,
    audience: str,
    now: Optional[int] = None,
) -> str:
    """Build and RS256-sign the JWT used as the authorization grant."""
    claims = build_service_account_claims(credential, scope=scope, audience=audience, now=now)
    try:
        return jwt.encode(claims, credential.key.private_key, algorithm="RS256")
    except (JOSEError, ValueError) as exc:
        raise ConfigError("service account private_key is not a usable RSA key") from exc


async def _exchange(client: httpx.AsyncClient, token_url: str, form: Dict[str, str], flow: str) -> AccessToken:
    try:
        response = await client.post(
            token_url,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    except httpx.HTTPError as exc:
        raise TokenError(f"{flow} token error: {exc}", None, str(exc)) from exc

    if not response.is_success:
        logger.warning("token.rejected", flow=flow, status=response.status_code)
        raise TokenError(
            f"{flow} token error: {response.status_code} {response.text}",
            response.status_code,
            response.text,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise TokenError(f"{flow} token error: response is not JSON", response.status_code, response.text) from exc
    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not access_token:
        raise TokenError(f"{flow} token error: no access_token in response", response.status_code, response.text)

    logger.info("token.minted", flow=flow)
    return AccessToken(access_token=access_token, expires_in=int(payload.get("expires_in", TOKEN_LIFETIME_SECONDS)))


async def mint_oauth2_token(
    client: httpx.AsyncClient,
    credential: OAuth2Credential,
    *,
    token_url: str,
) -> AccessToken:
    return await _exchange(
        client,
        token_url,
        {
            "client_id": credential.client_id,
            "client_secret": credential.client_secret,
            "refresh_token": credential.refresh_token,
            "grant_type": "refresh_token",
        },
        flow="OAuth2",
    )


async def mint_service_account_token(
    client: httpx.AsyncClient,
    credential: ServiceAccountCredential,
    *,
    token_url: str,
    scope: str,
    now: Optional[int] = None,
) -> AccessToken:
    assertion = sign_service_account_assertion(credential, scope=scope, audience=token_url, now=now)
    return await _exchange(
        client,
        token_url,
        {"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
        flow="Service Account",
    )
