"""
Authentication and role dependencies.

Roles gate whole route groups (HR views, admin). Whether a user may act on
one particular review is decided per review in the service layer.
"""
import logging
from typing import Callable, List

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from perf_review.core.config import settings
from perf_review.database import get_db
from perf_review.models.user import User, UserRole
from perf_review.schemas.auth import TokenData
from perf_review.services import auth as auth_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    payload = auth_service.decode_access_token(token)
    if payload is None:
        logger.warning("Authentication failed: invalid token")
        raise _unauthorized("Could not validate credentials")
    if payload.get("error") == "TOKEN_EXPIRED":
        raise _unauthorized("TOKEN_EXPIRED")

    try:
        claims = TokenData.model_validate(payload)
    except ValidationError:
        logger.warning("Authentication failed: malformed claims")
        raise _unauthorized("Could not validate credentials")
    if claims.type != "access":
        raise _unauthorized("Invalid token type")

    if claims.user_id is not None:
        user = db.get(User, claims.user_id)
    else:
        user = db.query(User).filter(User.email == claims.sub).first()

    # An email change by an admin invalidates tokens issued for the old address
    if user is None or user.email != claims.sub:
        logger.warning(f"Authentication failed: no user for token subject {claims.sub}")
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")
    return user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.get("/hr/reviews")
        def hr_view(user: User = Depends(require_role([UserRole.HR, UserRole.ADMIN]))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def require_hr():
    return require_role([UserRole.HR, UserRole.ADMIN])


def require_admin():
    return require_role([UserRole.ADMIN])
