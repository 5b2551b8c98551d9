"""
Read-only aggregates for dashboards.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from qrcampaigns.core.config import settings
from qrcampaigns.models.campaign import Campaign
from qrcampaigns.models.scan_event import ScanEvent
from qrcampaigns.models.user import User
from qrcampaigns.services.campaign_service import count_by_status, expire_campaigns
from qrcampaigns.utils.dates import day_bounds_utc, local_hour, resolve_day


def campaign_day_analytics(
    db: Session,
    campaign_id: UUID,
    day: str,
    tz_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Region and hourly breakdown of one campaign's scans for a local calendar day.

    `day` is "today" or "YYYY-MM-DD"; ValueError is raised for anything else.
    hourly_data always has 24 entries.
    """
    tz_name = tz_name or settings.ANALYTICS_TIMEZONE
    target = resolve_day(day, tz_name, now)
    start, end = day_bounds_utc(target, tz_name)

    base = db.query(ScanEvent).filter(
        ScanEvent.campaign_id == campaign_id,
        ScanEvent.scanned_at >= start,
        ScanEvent.scanned_at < end,
    )

    region_rows = (
        base.with_entities(ScanEvent.region, func.count(ScanEvent.id).label("count"))
        .group_by(ScanEvent.region)
        .order_by(func.count(ScanEvent.id).desc(), ScanEvent.region)
        .all()
    )

    # Hours are bucketed in the analytics zone, which SQL dialects disagree on
    hours = [0] * 24
    for (scanned_at,) in base.with_entities(ScanEvent.scanned_at).all():
        hours[local_hour(scanned_at, tz_name)] += 1

    return {
        "region_data": [{"region": region, "count": count} for region, count in region_rows],
        "hourly_data": [{"hour": hour, "count": count} for hour, count in enumerate(hours)],
        "total_scans": sum(hours),
        "date": target.isoformat(),
    }


def _total_scans(db: Session, created_by: Optional[UUID] = None) -> int:
    query = db.query(func.coalesce(func.sum(Campaign.scan_count), 0))
    if created_by:
        query = query.filter(Campaign.created_by == created_by)
    return int(query.scalar() or 0)


def overall_stats(db: Session) -> dict:
    expire_campaigns(db)
    counts = count_by_status(db)
    return {
        "total_campaigns": counts["total"],
        "total_scans": _total_scans(db),
        "active_campaigns": counts["active"],
        "expired_campaigns": counts["expired"],
    }


def user_stats(db: Session, user: User) -> dict:
    expire_campaigns(db)
    counts = count_by_status(db, created_by=user.id)
    return {
        "total_campaigns": counts["total"],
        "total_scans": _total_scans(db, created_by=user.id),
        "active_campaigns": counts["active"],
        "expired_campaigns": counts["expired"],
        "created_at": user.created_at,
    }


def analytics_overall(db: Session) -> dict:
    expire_campaigns(db)
    counts = count_by_status(db)
    total_scans = _total_scans(db)
    total_users = db.query(func.count(User.id)).scalar() or 0
    avg = round(total_scans / counts["total"]) if counts["total"] else 0
    return {
        "total_campaigns": counts["total"],
        "total_scans": total_scans,
        "total_users": total_users,
        "active_campaigns": counts["active"],
        "avg_scans_per_campaign": avg,
    }


def top_campaigns(db: Session, limit: int = 5) -> List[Campaign]:
    return (
        db.query(Campaign)
        .order_by(Campaign.scan_count.desc(), Campaign.created_at.desc())
        .limit(limit)
        .all()
    )


def region_stats(db: Session) -> List[dict]:
    rows = (
        db.query(ScanEvent.region, func.count(ScanEvent.id))
        .group_by(ScanEvent.region)
        .order_by(func.count(ScanEvent.id).desc(), ScanEvent.region)
        .all()
    )
    total = sum(count for _, count in rows)
    return [
        {
            "region": region,
            "scan_count": count,
            "percentage": round(count * 100 / total) if total else 0,
        }
        for region, count in rows
    ]


def _month_expr(db: Session, column):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return func.to_char(column, "YYYY-MM")
    if dialect == "sqlite":
        return func.strftime("%Y-%m", column)
    if dialect in ("mysql", "mariadb"):
        return func.date_format(column, "%Y-%m")
    raise ValueError(f"Unsupported database dialect for monthly grouping: {dialect}")


def _monthly_counts(db: Session, column, id_column) -> dict:
    month = _month_expr(db, column).label("month")
    rows = db.query(month, func.count(id_column)).group_by(month).all()
    return {m: count for m, count in rows if m}


def user_growth(db: Session) -> List[dict]:
    """Users and campaigns created per month (YYYY-MM), oldest month first."""
    users = _monthly_counts(db, User.created_at, User.id)
    campaigns = _monthly_counts(db, Campaign.created_at, Campaign.id)
    return [
        {
            "month": month,
            "user_count": users.get(month, 0),
            "campaign_count": campaigns.get(month, 0),
        }
        for month in sorted(set(users) | set(campaigns))
    ]
