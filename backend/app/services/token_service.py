"""
Token Service Module
====================

Issues and verifies the bearer tokens that identify an actor.

Credentials are managed by an external identity provider; this service
only checks the signature, expiry, issuer and audience of a token and
extracts the actor id from its ``sub`` claim.
"""

from datetime import datetime, timedelta, UTC
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

from app.core.config import settings
from app.core.exceptions import TokenExpiredError, TokenInvalidError
from app.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


def create_access_token(
    user_id: UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: User's UUID
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT access token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(UTC)

    payload = {
        "sub": str(user_id),
        "exp": now + expires_delta,
        "iat": now,
        "iss": settings.ISSUER,
        "aud": settings.AUDIENCE,
    }

    return jwt.encode(
        payload,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        TokenExpiredError: If token has expired
        TokenInvalidError: If token is invalid
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.ISSUER,
            audience=settings.AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        logger.warning("token_decode_error", error=str(e))
        raise TokenInvalidError(reason=str(e))


def get_actor_id(token: str) -> UUID:
    """
    Extract the actor id from a token.

    Raises:
        TokenExpiredError: If token has expired
        TokenInvalidError: If the token is invalid or carries no usable subject
    """
    payload = decode_token(token)

    subject = payload.get("sub")
    if not subject:
        raise TokenInvalidError(reason="Invalid token payload")

    try:
        return UUID(subject)
    except ValueError:
        raise TokenInvalidError(reason="Invalid user ID format")
