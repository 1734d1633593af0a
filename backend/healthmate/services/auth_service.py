import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from healthmate.core.errors import ValidationError
from healthmate.models.user import DEFAULT_NOTIFICATION_PREFERENCES, User
from healthmate.core.security import get_password_hash, verify_password
from healthmate.services.llm_gateway import SUPPORTED_LANGUAGES

logger = logging.getLogger("healthmate.auth")


def create_user(
    db: Session,
    email: str,
    password: str,
    full_name: Optional[str] = None,
    preferred_language: str = "en",
) -> User:
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists"
        )

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        full_name=full_name,
        preferred_language=preferred_language,
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists"
        )


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


def update_profile(db: Session, user: User, changes: dict) -> User:
    """
    Apply a partial profile update. `changes` holds only the fields the
    client sent; notification preferences are merged, not replaced.
    """
    if "preferred_language" in changes and changes["preferred_language"] not in SUPPORTED_LANGUAGES:
        raise ValidationError(
            f"Unsupported language {changes['preferred_language']!r}",
            user_message="Invalid language selection.",
        )

    prefs = changes.pop("notification_preferences", None)
    if prefs is not None:
        merged = dict(DEFAULT_NOTIFICATION_PREFERENCES)
        merged.update(user.notification_preferences or {})
        merged.update({k: v for k, v in prefs.items() if v is not None})
        user.notification_preferences = merged

    for field, value in changes.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info("Profile updated for user %s (%s)", user.id, ", ".join(sorted(changes)) or "preferences")
    return user
