from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.models.campaign import Campaign, CampaignStatus
from qrcampaigns.schemas.campaign import (
    Campaign as CampaignSchema, CampaignCreate, CampaignUpdate, CampaignPage, CampaignCreator, Pagination,
)
from qrcampaigns.schemas.scan_event import ScanEvent as ScanEventSchema
from qrcampaigns.schemas.analytics import CampaignAnalytics
from qrcampaigns.services import campaign_service, scan_service, analytics_service
from qrcampaigns.api.deps import get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_campaign_or_404(db: Session, campaign_id: UUID) -> Campaign:
    campaign = campaign_service.get_campaign(db, campaign_id)
    if not campaign:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return campaign


# Fixed paths are registered before /{campaign_id}
@router.get("/live", response_model=CampaignPage)
def list_live_campaigns(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    category: Optional[str] = None,
    created_by: Optional[UUID] = None,
    status_filter: Optional[CampaignStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Paginated campaign list with live status."""
    if sort_by not in campaign_service.SORT_FIELDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid sort_by. Allowed: {', '.join(campaign_service.SORT_FIELDS)}",
        )

    campaigns, total = campaign_service.list_campaigns(
        db,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        category=category or None,
        created_by=created_by,
        status=status_filter,
    )
    return CampaignPage(
        campaigns=[CampaignSchema.model_validate(c) for c in campaigns],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=campaign_service.total_pages(total, limit),
        ),
    )


@router.get("/categories", response_model=List[str])
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return campaign_service.list_categories(db)


@router.get("/users", response_model=List[CampaignCreator])
def list_campaign_creators(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return campaign_service.list_creators(db)


@router.get("/{campaign_id}", response_model=CampaignSchema)
def get_campaign(
    campaign_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_campaign_or_404(db, campaign_id)


@router.post("", response_model=CampaignSchema, status_code=status.HTTP_201_CREATED)
def create_campaign(
    body: CampaignCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return campaign_service.create_campaign(db, body, current_user)


@router.put("/{campaign_id}", response_model=CampaignSchema)
def update_campaign(
    campaign_id: UUID,
    body: CampaignUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit a campaign. Creator or admin only; expired campaigns are read-only."""
    campaign = _get_campaign_or_404(db, campaign_id)
    try:
        return campaign_service.update_campaign(db, campaign, body, current_user)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except campaign_service.CampaignUpdateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.patch("/{campaign_id}/scan", response_model=CampaignSchema)
def increment_scan(
    campaign_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Count one scan without recording a scan event."""
    result = campaign_service.increment_scan_count(db, campaign_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.reason)
    logger.info(f"[CAMPAIGNS] Manual scan increment on {campaign_id} by {current_user.id}")
    return campaign_service.get_campaign(db, campaign_id, refresh_status=False)


@router.get("/{campaign_id}/analytics/{day}", response_model=CampaignAnalytics)
def get_campaign_analytics(
    campaign_id: UUID,
    day: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Region and hourly scan breakdown for `today` or a YYYY-MM-DD day."""
    _get_campaign_or_404(db, campaign_id)
    try:
        return analytics_service.campaign_day_analytics(db, campaign_id, day)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date. Use 'today' or YYYY-MM-DD",
        )


@router.get("/{campaign_id}/scans", response_model=List[ScanEventSchema])
def get_campaign_scans(
    campaign_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_campaign_or_404(db, campaign_id)
    return scan_service.get_scan_records(db, campaign_id)
