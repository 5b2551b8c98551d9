from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.notification import AdminNotificationSummary, GenerateNotificationsResponse
from qrcampaigns.schemas.analytics import BackfillResponse
from qrcampaigns.services import notification_service, scan_service
from qrcampaigns.api.deps import require_admin

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/notifications", response_model=AdminNotificationSummary)
def get_admin_notifications(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Campaigns ending soon and campaigns that have used up their scans."""
    return notification_service.admin_notification_summary(db)


@router.post("/generate-notifications", response_model=GenerateNotificationsResponse)
def generate_notifications(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    created, total = notification_service.generate_admin_notifications(db)
    return {
        "success": True,
        "message": f"Created {created} notification(s)",
        "created": created,
        "total": total,
    }


@router.post("/backfill-locations", response_model=BackfillResponse)
def backfill_locations(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Re-resolve scan regions still stored as raw IP addresses."""
    logger.info(f"[ADMIN] Region backfill started by {admin.username}")
    updated = scan_service.backfill_regions(db)
    return {
        "success": True,
        "message": f"Updated {updated} scan event(s)",
        "updated": updated,
    }
