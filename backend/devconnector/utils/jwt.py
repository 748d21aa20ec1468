from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from .. import config

ALGORITHM = "HS256"


class TokenError(Exception):
    pass


class MalformedToken(TokenError):
    pass


class ExpiredToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user_id), "iat": now, "exp": now + expires_delta}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """Verify a token and return the user id it was issued for."""
    # Parse without verifying first so garbage input is told apart from a bad signature.
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as e:
        raise MalformedToken(str(e)) from e

    try:
        claims = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise ExpiredToken(str(e)) from e
    except JWTError as e:
        raise InvalidSignature(str(e)) from e

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedToken("Token has no usable subject") from e
