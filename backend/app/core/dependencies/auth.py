"""
Authentication Dependencies Module
==================================

FastAPI dependencies for authentication and user extraction.

Features:
- Bearer token validation
- User extraction from token
- Actor id bound to the logging context

Usage:
    @router.get("/protected")
    def protected_route(user: User = Depends(get_current_user)):
        return {"user": user.email}
"""

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.exceptions import TokenExpiredError, TokenInvalidError
from app.core.logging import get_logger, security_logger, LogContext
from app.db.session import get_db
from app.models.user import User
from app.services.token_service import get_actor_id

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Bearer Scheme
# =====================================

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Bearer token issued by the identity provider",
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =====================================
# Get Current User
# =====================================

def authenticate_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate the bearer token and return the current user.

    Args:
        request: FastAPI request object
        credentials: Bearer credentials from the Authorization header
        db: Database session

    Returns:
        User model instance

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired
            or names a user that does not exist
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    ip_address = request.client.host if request.client else "unknown"

    try:
        user_id = get_actor_id(credentials.credentials)
    except TokenExpiredError:
        security_logger.log_token_invalid(reason="token_expired", ip_address=ip_address)
        raise _unauthorized("Access token has expired")
    except TokenInvalidError as e:
        security_logger.log_token_invalid(
            reason=e.details.get("reason", "invalid"),
            ip_address=ip_address,
        )
        raise _unauthorized("Could not validate credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        security_logger.log_token_invalid(reason="unknown_user", ip_address=ip_address)
        raise _unauthorized("Could not validate credentials")

    request.state.user_id = str(user.id)

    return user


async def get_current_user(
    user: User = Depends(authenticate_user),
) -> AsyncGenerator[User, None]:
    """
    Return the authenticated user with its id bound to the log context.

    The binding is reset once the request has been handled.
    """
    with LogContext(actor_id=str(user.id)):
        yield user
