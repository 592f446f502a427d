import logging
from typing import Optional

from sqlalchemy.orm import Session

from models.user import ROLE_ADMIN, User
from security.password import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).one_or_none()


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, otherwise None."""
    user = get_user_by_email(db, email)
    if not verify_password(password, user.password_hash if user else None):
        return None
    return user


def ensure_admin(db: Session, email: str, password: str) -> Optional[User]:
    """Create the bootstrap admin account unless one with ``email`` exists.

    Returns the created user, or None when nothing was done.
    """
    if not email or not password:
        logger.info("Skipping admin bootstrap: ADMIN_EMAIL or ADMIN_PASSWORD missing")
        return None
    if get_user_by_email(db, email):
        logger.info("Admin already exists: %s", email)
        return None
    user = User(email=email.lower(), password_hash=hash_password(password), role=ROLE_ADMIN)
    db.add(user)
    db.flush()
    logger.info("Admin created: %s", email)
    return user
