from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from core.config import settings
from core.errors import AuthError
from schemas.auth import TokenClaims


def _encode(payload: Dict[str, Any], secret: str, minutes: int) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=minutes)
    to_encode = {"iat": int(now.timestamp()), "exp": int(exp.timestamp()), **payload}
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALG)


def create_access_token(sub: str, extra: Dict[str, Any] | None = None) -> str:
    payload = {"sub": sub, "type": "access"}
    if extra:
        payload.update(extra)
    return _encode(payload, settings.JWT_SECRET, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_access(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])


def verify(token: str) -> TokenClaims:
    """Check signature and expiry and return the claims, or raise AuthError."""
    try:
        payload = decode_access(token)
    except jwt.PyJWTError as exc:
        raise AuthError(str(exc)) from exc
    if payload.get("type") != "access":
        raise AuthError("Not an access token")
    try:
        return TokenClaims(**payload)
    except ValueError as exc:
        raise AuthError("Malformed token claims") from exc
