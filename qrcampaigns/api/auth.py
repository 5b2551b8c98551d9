from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import logging
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.user import (
    UserLogin, UserCreate, User as UserSchema, AuthResponse, PasswordChange, MessageResponse,
)
from qrcampaigns.core.security import create_access_token
from qrcampaigns.core.rate_limit import rate_limit
from qrcampaigns.services import user_service
from qrcampaigns.api.deps import get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_for(user: User) -> str:
    return create_access_token(data={"sub": user.username, "user_id": str(user.id)})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@rate_limit(max_requests=10, window_seconds=900)  # 10 registrations per 15 min per IP
def register(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Create an account and log it in."""
    try:
        user = user_service.create_user(db, body.username, body.password)
    except user_service.UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(f"[AUTH] Registered {user.username}")
    return AuthResponse(
        message="Registration successful",
        user=UserSchema.model_validate(user),
        access_token=_token_for(user),
    )


@router.post("/login", response_model=AuthResponse)
@rate_limit(max_requests=5, window_seconds=300)  # 5 attempts per 5 min per IP
def login(
    user_credentials: UserLogin,
    request: Request,
    db: Session = Depends(get_db),
):
    user = user_service.authenticate(db, user_credentials.username, user_credentials.password)
    if not user:
        # Don't reveal whether the user exists or is deactivated
        logger.warning(f"[AUTH] Failed login for {user_credentials.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"[AUTH] Login {user.username}")
    return AuthResponse(
        message="Login successful",
        user=UserSchema.model_validate(user),
        access_token=_token_for(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout():
    """Tokens are stateless; the client drops its copy."""
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserSchema)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/change-password", response_model=MessageResponse)
def change_password(
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user_service.change_password(db, current_user, body.current_password, body.new_password)
    except user_service.InvalidPasswordError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"message": "Password changed successfully"}
