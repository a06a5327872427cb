from fastapi import HTTPException, status

from signdesk.core.exceptions import ConfigError, NotFoundError, ProviderError, SignDeskError, TokenError


def to_http_exception(exc: SignDeskError) -> HTTPException:
    """Translate a service error into the response the caller sees."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, ConfigError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    if isinstance(exc, (TokenError, ProviderError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
