from datetime import datetime, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from signdesk.core.config import get_settings

# Tokens are issued by the surrounding account service; this service only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _decode_subject(token: str) -> str:
    settings = get_settings()
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except JWTError as exc:
        raise credentials_exception from exc
    subject: str | None = payload.get("sub")
    exp = payload.get("exp")
    if subject is None or exp is None:
        raise credentials_exception
    if datetime.fromtimestamp(exp, tz=timezone.utc) < datetime.now(timezone.utc):
        raise credentials_exception
    return subject


async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    return _decode_subject(token)


async def get_optional_user_id(token: str | None = Depends(optional_oauth2_scheme)) -> str | None:
    if token is None:
        return None
    return _decode_subject(token)
