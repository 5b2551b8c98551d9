"""Service-level tests for campaign status and scan counting"""
import uuid
from datetime import timedelta

import pytest

from qrcampaigns.models.campaign import CampaignStatus
from qrcampaigns.models.scan_event import ScanEvent
from qrcampaigns.schemas.campaign import CampaignUpdate
from qrcampaigns.services import campaign_service, scan_service
from qrcampaigns.utils.dates import utcnow


def test_expire_campaigns_flips_ended_and_full(db, user, make_campaign):
    ended = make_campaign(user, end_date=utcnow() - timedelta(seconds=5))
    full = make_campaign(user, scan_count=3, scan_limit=3)
    running = make_campaign(user, scan_count=1, scan_limit=3)

    assert campaign_service.expire_campaigns(db) == 2
    db.expire_all()
    assert ended.status == CampaignStatus.EXPIRED
    assert full.status == CampaignStatus.EXPIRED
    assert running.status == CampaignStatus.ACTIVE

    # Nothing left to flip
    assert campaign_service.expire_campaigns(db) == 0


def test_increment_until_limit(db, user, make_campaign):
    campaign = make_campaign(user, scan_limit=2)

    assert campaign_service.increment_scan_count(db, campaign.id).success
    db.refresh(campaign)
    assert campaign.scan_count == 1
    assert campaign.status == CampaignStatus.ACTIVE

    assert campaign_service.increment_scan_count(db, campaign.id).success
    db.refresh(campaign)
    assert campaign.scan_count == 2
    assert campaign.status == CampaignStatus.EXPIRED

    refused = campaign_service.increment_scan_count(db, campaign.id)
    assert not refused.success
    assert refused.reason == campaign_service.REASON_LIMIT_REACHED
    db.refresh(campaign)
    assert campaign.scan_count == 2


def test_increment_refuses_past_end_date(db, user, make_campaign):
    campaign = make_campaign(user, end_date=utcnow() + timedelta(hours=1))
    result = campaign_service.increment_scan_count(db, campaign.id, now=utcnow() + timedelta(hours=2))
    assert not result.success
    assert result.reason == campaign_service.REASON_NOT_ACTIVE


def test_increment_unknown_campaign(db):
    result = campaign_service.increment_scan_count(db, uuid.uuid4())
    assert result == campaign_service.ScanResult(False, campaign_service.REASON_NOT_FOUND)


def test_record_scan_writes_event_with_increment(db, user, make_campaign):
    campaign = make_campaign(user, scan_limit=1)

    result = scan_service.record_scan(db, campaign.id, "203.0.113.9", "agent", "Somewhere")
    assert result.success
    assert result.event.region == "Somewhere"

    refused = scan_service.record_scan(db, campaign.id, "203.0.113.9", "agent", "Somewhere")
    assert not refused.success
    assert refused.event is None

    assert db.query(ScanEvent).count() == 1
    db.refresh(campaign)
    assert campaign.scan_count == 1


def test_update_requires_owner_or_admin(db, user, make_user, make_campaign):
    campaign = make_campaign(user)
    stranger = make_user("mallory")
    data = CampaignUpdate(
        name="x",
        category="y",
        start_date=campaign.start_date,
        end_date=campaign.end_date,
    )
    with pytest.raises(PermissionError):
        campaign_service.update_campaign(db, campaign, data, stranger)


def test_compute_status(user, make_campaign):
    now = utcnow()
    campaign = make_campaign(user, scan_count=0, scan_limit=5)
    assert campaign_service.compute_status(campaign, now) == CampaignStatus.ACTIVE
    assert campaign_service.compute_status(campaign, campaign.end_date) == CampaignStatus.EXPIRED
    campaign.scan_count = 5
    assert campaign_service.compute_status(campaign, now) == CampaignStatus.EXPIRED
