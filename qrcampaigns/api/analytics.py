from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
import logging
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.analytics import (
    AnalyticsOverall, TopCampaign, RegionStat, GrowthPoint, AddScanEventsResponse,
)
from qrcampaigns.services import analytics_service, scan_service
from qrcampaigns.api.deps import get_current_user, require_admin

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/overall", response_model=AnalyticsOverall)
def get_analytics_overall(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return analytics_service.analytics_overall(db)


@router.get("/top-campaigns", response_model=List[TopCampaign])
def get_top_campaigns(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return analytics_service.top_campaigns(db, limit=limit)


@router.get("/regions", response_model=List[RegionStat])
def get_region_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return analytics_service.region_stats(db)


@router.get("/user-growth", response_model=List[GrowthPoint])
def get_user_growth(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return analytics_service.user_growth(db)


@router.post("/add-scan-events", response_model=AddScanEventsResponse)
def add_scan_events(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Append demo scan events to active campaigns."""
    added = scan_service.add_demo_scan_events(db)
    total = scan_service.count_scan_events(db)
    logger.info(f"[ANALYTICS] {admin.username} added {added} demo scan events")
    return {
        "success": True,
        "message": f"Added {added} scan events",
        "added": added,
        "total": total,
    }
