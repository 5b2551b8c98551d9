from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from qrcampaigns.models.notification import NotificationType


class NotificationCreate(BaseModel):
    type: NotificationType = NotificationType.EXPIRING_CAMPAIGN
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    campaign_id: Optional[UUID] = None
    campaign_name: Optional[str] = None
    is_read: bool = False


class Notification(BaseModel):
    id: UUID
    type: NotificationType
    title: str
    message: str
    campaign_id: Optional[UUID] = None
    campaign_name: Optional[str] = None
    user_id: UUID
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    notifications: List[Notification]
    unread_count: int


class MarkReadResponse(BaseModel):
    success: bool


class ExpiringCampaign(BaseModel):
    id: UUID
    name: str
    category: str
    end_date: datetime
    days_left: int
    created_by_username: str


class ScanLimitCampaign(BaseModel):
    id: UUID
    name: str
    category: str
    scan_count: int
    scan_limit: int
    created_by_username: str


class AdminNotificationSummary(BaseModel):
    expiring: List[ExpiringCampaign]
    scan_limit_reached: List[ScanLimitCampaign]


class GenerateNotificationsResponse(BaseModel):
    success: bool
    message: str
    created: int
    total: int
