"""JWT helpers for tokens issued by the external auth provider."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from piggybank.core.config import Settings

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(owner_id: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token shaped like the provider's; used by tooling and tests."""
    now = datetime.now(timezone.utc)
    expire_delta = expires_delta or timedelta(minutes=settings.auth.access_token_expire_minutes)
    payload = {
        "sub": owner_id,
        "iat": now,
        "exp": now + expire_delta,
    }
    if settings.auth.audience:
        payload["aud"] = settings.auth.audience
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """Return the owner id (``sub``) carried by a valid token."""
    audience = settings.auth.audience
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.algorithm],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as exc:
        raise _unauthorized("Could not validate credentials") from exc

    owner_id = payload.get("sub")
    if not owner_id or not isinstance(owner_id, str):
        raise _unauthorized("Could not validate credentials")
    return owner_id


async def get_current_owner(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")
    settings: Settings = request.app.state.container.settings
    return decode_access_token(credentials.credentials, settings)


__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_owner",
    "security",
]
