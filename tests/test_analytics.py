"""Analytics and stats endpoint tests"""
import uuid
from datetime import datetime, timedelta

from qrcampaigns.models.scan_event import ScanEvent
from qrcampaigns.utils.dates import utcnow


def test_overall_stats(client, user, make_campaign, headers):
    make_campaign(user, scan_count=4)
    make_campaign(user, scan_count=6, end_date=utcnow() - timedelta(minutes=1))

    response = client.get("/stats/overall", headers=headers(user))
    assert response.status_code == 200
    assert response.json() == {
        "total_campaigns": 2,
        "total_scans": 10,
        "active_campaigns": 1,
        "expired_campaigns": 1,
    }


def test_overall_stats_empty(client, user, headers):
    assert client.get("/stats/overall", headers=headers(user)).json() == {
        "total_campaigns": 0,
        "total_scans": 0,
        "active_campaigns": 0,
        "expired_campaigns": 0,
    }


def test_analytics_overall_average_is_rounded(client, user, admin, make_campaign, headers):
    make_campaign(user, scan_count=1)
    make_campaign(user, scan_count=2)
    make_campaign(admin, scan_count=2)

    body = client.get("/analytics/overall", headers=headers(user)).json()
    assert body["total_campaigns"] == 3
    assert body["total_scans"] == 5
    assert body["total_users"] == 2
    assert body["active_campaigns"] == 3
    assert body["avg_scans_per_campaign"] == 2


def test_top_campaigns(client, user, make_campaign, headers):
    for name, count in [("Low", 1), ("High", 90), ("Mid", 30)]:
        make_campaign(user, name=name, scan_count=count)

    response = client.get("/analytics/top-campaigns?limit=2", headers=headers(user))
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["High", "Mid"]


def test_region_stats(client, db, user, make_campaign, headers):
    campaign = make_campaign(user)
    regions = ["Delhi, India"] * 3 + ["Goa, India"] * 2 + ["Kerala, India"]
    db.add_all([ScanEvent(campaign_id=campaign.id, region=r) for r in regions])
    db.commit()

    body = client.get("/analytics/regions", headers=headers(user)).json()
    assert body == [
        {"region": "Delhi, India", "scan_count": 3, "percentage": 50},
        {"region": "Goa, India", "scan_count": 2, "percentage": 33},
        {"region": "Kerala, India", "scan_count": 1, "percentage": 17},
    ]


def test_user_growth(client, db, user, make_user, make_campaign, headers):
    old = make_user("veteran")
    old.created_at = datetime(2024, 1, 15, 12, 0)
    db.commit()
    make_campaign(user)
    make_campaign(old, created_at=datetime(2024, 2, 3, 9, 0))

    body = client.get("/analytics/user-growth", headers=headers(user)).json()
    this_month = utcnow().strftime("%Y-%m")
    assert body[0] == {"month": "2024-01", "user_count": 1, "campaign_count": 0}
    assert body[1] == {"month": "2024-02", "user_count": 0, "campaign_count": 1}
    assert body[-1] == {"month": this_month, "user_count": 1, "campaign_count": 1}


def test_campaign_day_analytics(client, db, user, make_campaign, headers):
    campaign = make_campaign(user)
    # Asia/Kolkata is UTC+05:30
    db.add_all([
        ScanEvent(campaign_id=campaign.id, region="Delhi, India", scanned_at=datetime(2025, 3, 10, 4, 0)),
        ScanEvent(campaign_id=campaign.id, region="Delhi, India", scanned_at=datetime(2025, 3, 10, 4, 20)),
        ScanEvent(campaign_id=campaign.id, region="Goa, India", scanned_at=datetime(2025, 3, 9, 20, 0)),
        ScanEvent(campaign_id=campaign.id, region="Goa, India", scanned_at=datetime(2025, 3, 10, 19, 0)),
    ])
    db.commit()

    response = client.get(f"/campaigns/{campaign.id}/analytics/2025-03-10", headers=headers(user))
    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2025-03-10"
    assert body["total_scans"] == 3
    assert body["region_data"] == [
        {"region": "Delhi, India", "count": 2},
        {"region": "Goa, India", "count": 1},
    ]
    assert len(body["hourly_data"]) == 24
    hours = {h["hour"]: h["count"] for h in body["hourly_data"]}
    assert hours[9] == 2
    assert hours[1] == 1
    assert sum(hours.values()) == 3


def test_campaign_day_analytics_today_and_errors(client, user, make_campaign, headers):
    campaign = make_campaign(user)
    today = client.get(f"/campaigns/{campaign.id}/analytics/today", headers=headers(user))
    assert today.status_code == 200
    assert today.json()["total_scans"] == 0
    assert len(today.json()["hourly_data"]) == 24

    assert client.get(f"/campaigns/{campaign.id}/analytics/yesterday", headers=headers(user)).status_code == 400
    assert client.get(f"/campaigns/{uuid.uuid4()}/analytics/today", headers=headers(user)).status_code == 404


def test_add_scan_events_respects_capacity(client, db, user, admin, make_campaign, headers):
    roomy = make_campaign(user, name="Roomy")
    tight = make_campaign(user, name="Tight", scan_count=5, scan_limit=8)
    make_campaign(user, name="Done", end_date=utcnow() - timedelta(minutes=1))

    assert client.post("/analytics/add-scan-events", headers=headers(user)).status_code == 403

    response = client.post("/analytics/add-scan-events", headers=headers(admin))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["added"] == 23
    assert body["total"] == 23

    db.expire_all()
    assert db.query(ScanEvent).filter(ScanEvent.campaign_id == roomy.id).count() == 20
    db.refresh(tight)
    assert tight.scan_count == 8
    assert tight.status.value == "expired"


def test_dashboard_reads_require_auth(client, user, make_campaign):
    campaign = make_campaign(user)
    for path in [
        "/stats/overall",
        "/analytics/overall",
        "/analytics/top-campaigns",
        "/analytics/regions",
        "/analytics/user-growth",
        f"/campaigns/{campaign.id}/analytics/today",
    ]:
        assert client.get(path).status_code == 401, path
