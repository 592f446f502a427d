from typing import Optional

from passlib.context import CryptContext

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)
_dummy_hash: Optional[str] = None


def _clip(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return _pwd_context.hash(_clip(password))


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check ``password`` against ``password_hash``.

    With no hash (unknown account) a throwaway hash is still verified so the
    response time does not reveal whether the email exists.
    """
    global _dummy_hash
    if not password_hash:
        if _dummy_hash is None:
            _dummy_hash = _pwd_context.hash(b"not-a-real-password")
        _pwd_context.verify(_clip(password), _dummy_hash)
        return False
    return _pwd_context.verify(_clip(password), password_hash)
