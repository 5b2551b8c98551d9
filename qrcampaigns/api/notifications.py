from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.notification import (
    Notification as NotificationSchema, NotificationCreate, NotificationList, MarkReadResponse,
)
from qrcampaigns.services import notification_service
from qrcampaigns.api.deps import get_current_user

router = APIRouter()


@router.get("", response_model=NotificationList)
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return NotificationList(
        notifications=notification_service.list_user_notifications(db, current_user.id),
        unread_count=notification_service.unread_count(db, current_user.id),
    )


@router.post("", response_model=NotificationSchema, status_code=status.HTTP_201_CREATED)
def create_notification(
    body: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.create_notification(db, current_user.id, body)


@router.post("/{notification_id}/mark-read", response_model=MarkReadResponse)
def mark_notification_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not notification_service.mark_read(db, notification_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"success": True}
