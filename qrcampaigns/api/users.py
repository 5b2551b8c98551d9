from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.user import (
    User as UserSchema, UserCreateByAdmin, UserStatusUpdate, UserStatusResponse,
)
from qrcampaigns.schemas.analytics import UserStats
from qrcampaigns.services import user_service, analytics_service
from qrcampaigns.api.deps import get_current_user, require_admin

router = APIRouter()


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=List[UserSchema])
def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return user_service.list_users(db)


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateByAdmin,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        return user_service.create_user(
            db, body.username, body.password, is_admin=body.is_admin, is_active=body.is_active,
        )
    except user_service.UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/{user_id}", response_model=UserSchema)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}/status", response_model=UserStatusResponse)
def update_user_status(
    user_id: UUID,
    body: UserStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Activate or deactivate a user. The last active user cannot be deactivated."""
    user = _get_user_or_404(db, user_id)
    try:
        user = user_service.set_user_status(db, user, body.is_active)
    except user_service.LastActiveUserError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response = UserStatusResponse.model_validate(user)
    if user.id == admin.id and not body.is_active:
        response.self_deactivated = True
        response.message = "You have deactivated your own account and will be logged out"
    return response


@router.get("/{user_id}/stats", response_model=UserStats)
def get_user_stats(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _get_user_or_404(db, user_id)
    return analytics_service.user_stats(db, user)
