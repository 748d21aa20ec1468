"""
Credential store: registration, login and account lookup/removal.
"""
import hashlib
import logging
from urllib.parse import urlencode

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.post import PostComment, PostLike
from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    get_error_message,
)
from ..utils.jwt import create_access_token
from ..utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

GRAVATAR_BASE_URL = "https://www.gravatar.com/avatar/"


def gravatar_url(email: str, *, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"{GRAVATAR_BASE_URL}{digest}?{urlencode({'s': size, 'r': rating, 'd': default})}"


def public_user(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "avatar": user.avatar,
        "date": user.created_at.isoformat() if user.created_at else None,
    }


def register(db: Session, *, name: str, email: str, password: str) -> str:
    """Create a user and return a freshly issued token."""
    email = email.strip().lower()
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError(get_error_message("email_exists"))

    user = User(
        name=name.strip(),
        email=email,
        avatar=gravatar_url(email),
        password=hash_password(password),
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email.
        db.rollback()
        raise ConflictError(get_error_message("email_exists"))

    logger.info("Registered user %s", user.id)
    return create_access_token(user.id)


def authenticate(db: Session, *, email: str, password: str) -> str:
    email = (email or "").strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()
    return create_access_token(user.id)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise NotFoundError(get_error_message("user_not_found"))
    return user


def delete_account(db: Session, user_id: int) -> None:
    """Remove the user together with their profile, posts, likes and comments."""
    user = get_user(db, user_id)
    try:
        # Likes and comments left on other users' posts.
        db.query(PostLike).filter(PostLike.user_id == user.id).delete(synchronize_session=False)
        db.query(PostComment).filter(PostComment.user_id == user.id).delete(synchronize_session=False)
        # Profile (with experience/education) and own posts cascade through the ORM.
        db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted account %s", user_id)
