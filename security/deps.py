import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from core.errors import AuthError
from schemas.auth import TokenClaims
from security import jwt as jwt_utils

logger = logging.getLogger(__name__)


def require_auth(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> TokenClaims:
    """Verify the bearer token. Stateless: no database lookup."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authorization token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authorization token")
    try:
        return jwt_utils.verify(token)
    except AuthError as exc:
        logger.warning("JWT verification failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def require_admin(claims: TokenClaims = Depends(require_auth)) -> TokenClaims:
    if not claims.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: admin only")
    return claims
