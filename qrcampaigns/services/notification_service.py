"""
Admin alerts for campaigns that are about to end or have filled up, and
per-user notification inboxes.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from qrcampaigns.core.config import settings
from qrcampaigns.models.campaign import Campaign, CampaignStatus
from qrcampaigns.models.notification import Notification, NotificationType
from qrcampaigns.models.user import User
from qrcampaigns.schemas.notification import NotificationCreate
from qrcampaigns.services.campaign_service import expire_campaigns
from qrcampaigns.utils.dates import utcnow

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)


def _creator_name(campaign: Campaign) -> str:
    return campaign.created_by_username or "Unknown"


def expiring_campaigns(db: Session, now: Optional[datetime] = None) -> List[dict]:
    """Active campaigns ending within EXPIRY_WARNING_DAYS, most urgent first."""
    now = now or utcnow()
    horizon = now + timedelta(days=settings.EXPIRY_WARNING_DAYS)
    campaigns = (
        db.query(Campaign)
        .filter(
            Campaign.status == CampaignStatus.ACTIVE,
            Campaign.end_date > now,
            Campaign.end_date <= horizon,
        )
        .order_by(Campaign.end_date.asc())
        .all()
    )
    return [
        {
            "id": c.id,
            "name": c.name,
            "category": c.category,
            "end_date": c.end_date,
            "days_left": math.ceil((c.end_date - now) / DAY),
            "created_by_username": _creator_name(c),
        }
        for c in campaigns
    ]


def scan_limit_campaigns(db: Session, now: Optional[datetime] = None) -> List[dict]:
    """Campaigns that hit their scan limit before their end date."""
    now = now or utcnow()
    campaigns = (
        db.query(Campaign)
        .filter(
            Campaign.scan_limit.isnot(None),
            Campaign.scan_count >= Campaign.scan_limit,
            Campaign.end_date > now,
        )
        .all()
    )
    campaigns.sort(key=lambda c: (c.scan_count / c.scan_limit, c.scan_count), reverse=True)
    return [
        {
            "id": c.id,
            "name": c.name,
            "category": c.category,
            "scan_count": c.scan_count,
            "scan_limit": c.scan_limit,
            "created_by_username": _creator_name(c),
        }
        for c in campaigns
    ]


def admin_notification_summary(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    expire_campaigns(db, now)
    return {
        "expiring": expiring_campaigns(db, now),
        "scan_limit_reached": scan_limit_campaigns(db, now),
    }


def list_user_notifications(db: Session, user_id: UUID) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .all()
    )


def unread_count(db: Session, user_id: UUID) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def create_notification(db: Session, user_id: UUID, data: NotificationCreate) -> Notification:
    notification = Notification(
        type=data.type,
        title=data.title,
        message=data.message,
        campaign_id=data.campaign_id,
        campaign_name=data.campaign_name or data.title,
        user_id=user_id,
        is_read=data.is_read,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> bool:
    """Mark one of the user's notifications read. False if missing or not theirs."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        return False
    notification.is_read = True
    db.commit()
    return True


def _exists(db: Session, campaign_id: UUID, user_id: UUID, type_: NotificationType) -> bool:
    return db.query(Notification.id).filter(
        Notification.campaign_id == campaign_id,
        Notification.user_id == user_id,
        Notification.type == type_,
    ).first() is not None


def generate_admin_notifications(db: Session, now: Optional[datetime] = None) -> Tuple[int, int]:
    """
    Fan the current summary out to every active admin, skipping any
    (campaign, admin, type) that already has a notification.

    Returns (created, total_candidates).
    """
    summary = admin_notification_summary(db, now)
    admins = db.query(User).filter(User.is_admin.is_(True), User.is_active.is_(True)).all()

    candidates = []
    for item in summary["expiring"]:
        days = item["days_left"]
        candidates.append((
            item,
            NotificationType.EXPIRING_CAMPAIGN,
            "Campaign Expiring Soon",
            f"Campaign \"{item['name']}\" expires in {days} day{'s' if days != 1 else ''}.",
        ))
    for item in summary["scan_limit_reached"]:
        candidates.append((
            item,
            NotificationType.SCAN_LIMIT_REACHED,
            "Scan Limit Reached",
            f"Campaign \"{item['name']}\" has reached its scan limit of {item['scan_limit']}.",
        ))

    created = 0
    total = 0
    for admin in admins:
        for item, type_, title, message in candidates:
            total += 1
            if _exists(db, item["id"], admin.id, type_):
                continue
            db.add(Notification(
                type=type_,
                title=title,
                message=message,
                campaign_id=item["id"],
                campaign_name=item["name"],
                user_id=admin.id,
                is_read=False,
            ))
            created += 1

    db.commit()
    logger.info(f"[NOTIFICATIONS] Generated {created} of {total} admin notification(s) for {len(admins)} admin(s)")
    return created, total
