"""
User accounts: registration, credential checks, password changes and
soft-deactivation.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from qrcampaigns.core.security import get_password_hash, verify_password
from qrcampaigns.models.user import User

logger = logging.getLogger(__name__)


class UsernameTakenError(ValueError):
    pass


class InvalidPasswordError(ValueError):
    pass


class LastActiveUserError(ValueError):
    pass


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.asc()).all()


def create_user(
    db: Session,
    username: str,
    password: str,
    is_admin: bool = False,
    is_active: bool = True,
) -> User:
    """Create a user; raises UsernameTakenError if the username exists."""
    username = username.strip()
    if get_user_by_username(db, username):
        raise UsernameTakenError("Username already exists")

    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        is_admin=is_admin,
        is_active=is_active,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        db.rollback()
        raise UsernameTakenError("Username already exists")
    db.refresh(user)
    logger.info(f"[USERS] Created user {user.username} ({user.id}), admin={user.is_admin}")
    return user


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """Return the user for valid credentials; inactive users never authenticate."""
    user = get_user_by_username(db, username.strip())
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise InvalidPasswordError("Current password is incorrect")
    if verify_password(new_password, user.hashed_password):
        raise InvalidPasswordError("New password must be different from current password")

    user.hashed_password = get_password_hash(new_password)
    db.commit()
    logger.info(f"[USERS] Password changed for user {user.id}")


def set_user_status(db: Session, user: User, is_active: bool) -> User:
    """
    Activate or deactivate a user. At least one active user must remain, so
    deactivating the only active user raises LastActiveUserError.
    """
    if not is_active and user.is_active:
        other_active = db.query(func.count(User.id)).filter(
            User.is_active.is_(True),
            User.id != user.id,
        ).scalar() or 0
        if other_active == 0:
            raise LastActiveUserError("Cannot deactivate the last active user")

    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info(f"[USERS] User {user.id} is_active={is_active}")
    return user
