from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import logging
from perf_review.core.config import settings
from perf_review.core.limiter import limiter
from perf_review.database import get_db
from perf_review.models.user import User
from perf_review.services import auth as auth_service
from perf_review.schemas.auth import LoginRequest, Token, CurrentUserResponse
from perf_review.routers.auth_deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=Token)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == login_data.email).first()
    if not user or not auth_service.verify_password(login_data.password, user.hashed_password):
        logger.warning("Failed login", extra={"email": login_data.email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")

    access_token = auth_service.create_access_token(data=auth_service.token_claims_for(user))
    logger.info(f"User {user.id} logged in")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": CurrentUserResponse.model_validate(user),
    }


@router.get("/me", response_model=CurrentUserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
