import logging

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from .error_handlers import UnauthorizedError, get_error_message
from .jwt import TokenError, decode_access_token

logger = logging.getLogger(__name__)


def extract_token(x_auth_token: str | None, authorization: str | None) -> str | None:
    """Pick the token from `x-auth-token` or an `Authorization: Bearer` header."""
    if x_auth_token and x_auth_token.strip():
        return x_auth_token.strip()
    if authorization:
        scheme, _, value = authorization.strip().partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return None


def get_current_user(
    x_auth_token: str | None = Header(default=None),
    authorization: str | None = Header(default=None),
) -> dict:
    token = extract_token(x_auth_token, authorization)
    if not token:
        raise UnauthorizedError(get_error_message("no_token"))

    try:
        user_id = decode_access_token(token)
    except TokenError as e:
        logger.info("Rejected token (%s): %s", type(e).__name__, e)
        raise UnauthorizedError(get_error_message("invalid_token"))

    return {"sub": str(user_id)}


def current_user_id(user: dict = Depends(get_current_user), db: Session = Depends(get_db)) -> int:
    """Id of the caller; the account must still exist."""
    user_id = int(user["sub"])
    if db.query(User.id).filter(User.id == user_id).first() is None:
        logger.info("Rejected token for deleted user %s", user_id)
        raise UnauthorizedError(get_error_message("invalid_token"))
    return user_id
