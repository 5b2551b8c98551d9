#!/usr/bin/env python3
"""Seed the admin user plus sample users and campaigns. Safe to run repeatedly."""
import sys
import os
from datetime import timedelta

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from sqlalchemy.orm import Session
from qrcampaigns.db.session import SessionLocal
from qrcampaigns.models.user import User
from qrcampaigns.models.campaign import Campaign, BorderStyle
from qrcampaigns.services.campaign_service import compute_status
from qrcampaigns.core.security import get_password_hash
from qrcampaigns.core.config import settings
from qrcampaigns.utils.dates import utcnow

SAMPLE_USERS = [
    ("marketing", "marketing123"),
    ("events", "events123"),
]

# (name, category, days from now to start, days from now to end, scan_count, scan_limit, target_url)
SAMPLE_CAMPAIGNS = [
    ("Summer Product Launch", "contest", -30, 60, 124, None, None),
    ("Charity Fundraiser", "NGO", -10, 120, 85, 500, "https://example.org/donate"),
    ("Payment Gateway Integration", "payment", -5, 2, 210, 1000, None),
    ("Winter Holiday Contest", "contest", 5, 45, 0, 250, None),
    ("Store Opening Flyer", "retail", -60, -1, 42, None, None),
]


def _get_or_create_user(db: Session, username: str, password: str, is_admin: bool = False) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user:
        print(f"User {username} already exists")
        return user
    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        is_admin=is_admin,
        is_active=True,
    )
    db.add(user)
    db.flush()
    print(f"User created: {username}{' (admin)' if is_admin else ''}")
    return user


def seed_data():
    db: Session = SessionLocal()
    try:
        admin = _get_or_create_user(db, settings.SEED_ADMIN_USERNAME, settings.SEED_ADMIN_PASSWORD, is_admin=True)
        creators = [admin] + [_get_or_create_user(db, u, p) for u, p in SAMPLE_USERS]

        if db.query(Campaign).first():
            print("Campaigns already seeded")
            db.commit()
            return

        now = utcnow()
        for i, (name, category, start, end, scans, limit, target) in enumerate(SAMPLE_CAMPAIGNS):
            campaign = Campaign(
                name=name,
                category=category,
                description=f"Sample {category} campaign",
                start_date=now + timedelta(days=start),
                end_date=now + timedelta(days=end),
                scan_count=scans,
                scan_limit=limit,
                border_style=BorderStyle.THICK if i % 2 else BorderStyle.NONE,
                target_url=target,
                created_by=creators[i % len(creators)].id,
                created_at=now,
                updated_at=now,
            )
            campaign.status = compute_status(campaign, now)
            db.add(campaign)

        db.commit()
        print(f"Seeded {len(SAMPLE_CAMPAIGNS)} campaigns")
    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_data()
