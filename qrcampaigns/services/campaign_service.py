"""
Campaign lifecycle service.

Status is derived from the end date and the scan limit. There is no
background job: `expire_campaigns` is applied whenever campaigns are read,
and `increment_scan_count` flips a campaign to expired in the same
transaction as the scan that fills it.
"""
import logging
import math
from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, asc, desc, func, or_, update
from sqlalchemy.orm import Session

from qrcampaigns.models.campaign import Campaign, CampaignStatus, BorderStyle
from qrcampaigns.models.user import User
from qrcampaigns.schemas.campaign import CampaignCreate, CampaignUpdate
from qrcampaigns.utils.dates import utcnow

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "created_at": Campaign.created_at,
    "start_date": Campaign.start_date,
    "end_date": Campaign.end_date,
    "scan_count": Campaign.scan_count,
    "name": Campaign.name,
    "category": Campaign.category,
}

REASON_NOT_FOUND = "Campaign not found"
REASON_NOT_ACTIVE = "Campaign is not active"
REASON_LIMIT_REACHED = "Scan limit reached"


class ScanResult(NamedTuple):
    success: bool
    reason: Optional[str] = None
    event: Optional[object] = None


class CampaignUpdateError(ValueError):
    pass


def _expired_condition(now: datetime):
    return or_(
        Campaign.end_date <= now,
        and_(Campaign.scan_limit.isnot(None), Campaign.scan_count >= Campaign.scan_limit),
    )


def compute_status(campaign: Campaign, now: Optional[datetime] = None) -> CampaignStatus:
    now = now or utcnow()
    if campaign.end_date <= now or campaign.limit_reached:
        return CampaignStatus.EXPIRED
    return CampaignStatus.ACTIVE


def expire_campaigns(db: Session, now: Optional[datetime] = None) -> int:
    """Flip every active campaign past its end date or at its scan limit to expired."""
    now = now or utcnow()
    count = db.query(Campaign).filter(
        Campaign.status == CampaignStatus.ACTIVE,
        _expired_condition(now),
    ).update(
        {Campaign.status: CampaignStatus.EXPIRED, Campaign.updated_at: now},
        synchronize_session="fetch",
    )
    if count:
        db.commit()
        logger.info(f"[CAMPAIGNS] Expired {count} campaign(s)")
    return count


def get_campaign(db: Session, campaign_id: UUID, refresh_status: bool = True) -> Optional[Campaign]:
    if refresh_status:
        expire_campaigns(db)
    return db.query(Campaign).filter(Campaign.id == campaign_id).first()


def list_campaigns(
    db: Session,
    page: int = 1,
    limit: int = 12,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    category: Optional[str] = None,
    created_by: Optional[UUID] = None,
    status: Optional[CampaignStatus] = None,
) -> Tuple[List[Campaign], int]:
    """Return one page of campaigns and the total number matching the filters."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Invalid sort field: {sort_by}")

    expire_campaigns(db)

    query = db.query(Campaign)
    if category:
        query = query.filter(Campaign.category == category)
    if created_by:
        query = query.filter(Campaign.created_by == created_by)
    if status:
        query = query.filter(Campaign.status == status)

    total = query.count()

    column = SORT_FIELDS[sort_by]
    order = asc(column) if sort_order == "asc" else desc(column)
    campaigns = (
        query.order_by(order, Campaign.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return campaigns, total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def list_categories(db: Session) -> List[str]:
    rows = db.query(Campaign.category).distinct().order_by(Campaign.category).all()
    return [row[0] for row in rows]


def list_creators(db: Session) -> List[dict]:
    rows = (
        db.query(User.id, User.username)
        .join(Campaign, Campaign.created_by == User.id)
        .distinct()
        .order_by(User.username)
        .all()
    )
    return [{"id": row[0], "username": row[1]} for row in rows]


def create_campaign(db: Session, data: CampaignCreate, creator: User) -> Campaign:
    now = utcnow()
    campaign = Campaign(
        **data.model_dump(),
        scan_count=0,
        created_by=creator.id,
        created_at=now,
        updated_at=now,
    )
    campaign.status = compute_status(campaign, now)
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    logger.info(f"[CAMPAIGNS] Created campaign {campaign.id} ({campaign.name}) by {creator.id}")
    return campaign


def can_edit(campaign: Campaign, user: User) -> bool:
    return bool(user.is_admin) or campaign.created_by == user.id


def update_campaign(db: Session, campaign: Campaign, data: CampaignUpdate, user: User) -> Campaign:
    """
    Apply an edit. Raises PermissionError for users who are neither the
    creator nor an admin, and CampaignUpdateError for edits the lifecycle forbids.
    """
    if not can_edit(campaign, user):
        raise PermissionError("Permission denied")

    if campaign.status != CampaignStatus.ACTIVE:
        raise CampaignUpdateError("Only active campaigns can be edited")

    now = utcnow()
    if campaign.start_date <= now and data.start_date != campaign.start_date:
        raise CampaignUpdateError("Cannot modify start date or time for campaigns that have already started")

    if data.scan_limit is not None and data.scan_limit < campaign.scan_count:
        raise CampaignUpdateError(
            f"Scan limit cannot be lower than the current scan count ({campaign.scan_count})"
        )

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(campaign, field, value)
    if campaign.border_style is None:
        campaign.border_style = BorderStyle.NONE

    campaign.updated_at = now
    campaign.status = compute_status(campaign, now)
    db.commit()
    db.refresh(campaign)
    logger.info(f"[CAMPAIGNS] Updated campaign {campaign.id} by {user.id} (status={campaign.status.value})")
    return campaign


def increment_scan_count(
    db: Session,
    campaign_id: UUID,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> ScanResult:
    """
    Atomically add one scan. The conditional UPDATE refuses campaigns that
    are expired, past their end date or at their limit, so concurrent scans
    can never push scan_count past scan_limit.
    """
    now = now or utcnow()
    result = db.execute(
        update(Campaign)
        .where(
            Campaign.id == campaign_id,
            Campaign.status == CampaignStatus.ACTIVE,
            Campaign.end_date > now,
            or_(Campaign.scan_limit.is_(None), Campaign.scan_count < Campaign.scan_limit),
        )
        .values(scan_count=Campaign.scan_count + 1, updated_at=now)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        db.rollback()
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if campaign is None:
            return ScanResult(False, REASON_NOT_FOUND)
        if campaign.limit_reached:
            return ScanResult(False, REASON_LIMIT_REACHED)
        return ScanResult(False, REASON_NOT_ACTIVE)

    # The scan that fills the campaign also closes it
    db.execute(
        update(Campaign)
        .where(
            Campaign.id == campaign_id,
            Campaign.scan_limit.isnot(None),
            Campaign.scan_count >= Campaign.scan_limit,
        )
        .values(status=CampaignStatus.EXPIRED)
        .execution_options(synchronize_session=False)
    )

    if commit:
        db.commit()
    return ScanResult(True)


def count_by_status(db: Session, created_by: Optional[UUID] = None) -> dict:
    """Campaign totals split by status, optionally for one creator."""
    query = db.query(Campaign.status, func.count(Campaign.id))
    if created_by:
        query = query.filter(Campaign.created_by == created_by)
    counts = {status: count for status, count in query.group_by(Campaign.status).all()}
    active = counts.get(CampaignStatus.ACTIVE, 0)
    expired = counts.get(CampaignStatus.EXPIRED, 0)
    return {"total": active + expired, "active": active, "expired": expired}
