"""
Scan recording, raw event queries and scan-event maintenance.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from qrcampaigns.models.campaign import Campaign, CampaignStatus
from qrcampaigns.models.scan_event import ScanEvent
from qrcampaigns.services import geo
from qrcampaigns.services.campaign_service import ScanResult, expire_campaigns, increment_scan_count
from qrcampaigns.utils.dates import utcnow

logger = logging.getLogger(__name__)

DEMO_EVENTS_PER_CAMPAIGN = 20

DEMO_REGIONS = [
    "Maharashtra, India",
    "Karnataka, India",
    "Delhi, India",
    "Tamil Nadu, India",
    "Gujarat, India",
    "California, United States",
    "England, United Kingdom",
]

DEMO_USER_AGENTS = [
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148",
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Chrome/120.0 Mobile Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36",
]


def record_scan(
    db: Session,
    campaign_id: UUID,
    ip_address: Optional[str],
    user_agent: Optional[str],
    region: str,
    now: Optional[datetime] = None,
) -> ScanResult:
    """
    Count a scan and store its event in one transaction. A refused increment
    writes nothing.
    """
    now = now or utcnow()
    result = increment_scan_count(db, campaign_id, now=now, commit=False)
    if not result.success:
        logger.info(f"[SCAN] Refused scan for campaign {campaign_id}: {result.reason}")
        return result

    event = ScanEvent(
        campaign_id=campaign_id,
        region=region,
        scanned_at=now,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    db.add(event)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"[SCAN] Failed to record scan for campaign {campaign_id}")
        raise
    db.refresh(event)
    logger.info(f"[SCAN] Recorded scan {event.id} for campaign {campaign_id} from {region}")
    return ScanResult(True, event=event)


def get_scan_records(db: Session, campaign_id: UUID) -> List[ScanEvent]:
    return (
        db.query(ScanEvent)
        .filter(ScanEvent.campaign_id == campaign_id)
        .order_by(ScanEvent.scanned_at.desc())
        .all()
    )


def add_demo_scan_events(db: Session, now: Optional[datetime] = None) -> int:
    """
    Append synthetic scans to every active campaign, at most
    DEMO_EVENTS_PER_CAMPAIGN each and never past a campaign's scan limit.
    Events are spread over the last 24 hours. Returns the number added.
    """
    now = now or utcnow()
    expire_campaigns(db, now)

    campaigns = db.query(Campaign).filter(Campaign.status == CampaignStatus.ACTIVE).all()
    added = 0
    for campaign in campaigns:
        count = DEMO_EVENTS_PER_CAMPAIGN
        if campaign.scan_limit is not None:
            count = min(count, campaign.scan_limit - campaign.scan_count)
        if count <= 0:
            continue

        for _ in range(count):
            db.add(ScanEvent(
                campaign_id=campaign.id,
                region=random.choice(DEMO_REGIONS),
                scanned_at=now - timedelta(minutes=random.randint(0, 24 * 60 - 1)),
                user_agent=random.choice(DEMO_USER_AGENTS),
                ip_address=None,
            ))
        campaign.scan_count = campaign.scan_count + count
        if campaign.limit_reached:
            campaign.status = CampaignStatus.EXPIRED
        campaign.updated_at = now
        added += count

    db.commit()
    logger.info(f"[SCAN] Added {added} demo scan events across {len(campaigns)} active campaign(s)")
    return added


def count_scan_events(db: Session) -> int:
    return db.query(ScanEvent).count()


def backfill_regions(db: Session) -> int:
    """Re-resolve events whose region is still a raw IP. Returns how many changed."""
    events = db.query(ScanEvent).all()
    updated = 0
    for event in events:
        if not geo.is_ip_address(event.region):
            continue
        region = geo.resolve_region(event.region)
        if region != event.region:
            event.region = region
            updated += 1

    if updated:
        db.commit()
    logger.info(f"[GEO] Backfilled {updated} scan event region(s)")
    return updated
