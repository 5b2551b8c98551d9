"""Shared fixtures: an in-memory SQLite database behind the app's get_db dependency"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import qrcampaigns.models  # noqa: F401
from qrcampaigns.core.config import settings
from qrcampaigns.core.rate_limit import reset_rate_limits
from qrcampaigns.core.security import create_access_token, get_password_hash
from qrcampaigns.db.session import Base, get_db
from qrcampaigns.main import app
from qrcampaigns.models.campaign import Campaign, CampaignStatus, BorderStyle
from qrcampaigns.models.user import User
from qrcampaigns.utils.dates import utcnow

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    """Empty schema, no recorded requests and no GeoIP lookups for every test"""
    monkeypatch.setattr(settings, "GEOIP_API_URL", None)
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(username="alice", password="secret123", is_admin=False, is_active=True):
        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            is_admin=is_admin,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("alice")


@pytest.fixture
def admin(make_user):
    return make_user("admin", is_admin=True)


def auth_headers(user):
    token = create_access_token(data={"sub": user.username, "user_id": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers


@pytest.fixture
def make_campaign(db):
    def _make_campaign(creator, **overrides):
        now = utcnow()
        values = dict(
            name="Spring Sale",
            category="retail",
            description="Spring discounts",
            scan_count=0,
            scan_limit=None,
            status=CampaignStatus.ACTIVE,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=30),
            border_style=BorderStyle.NONE,
            target_url=None,
            created_by=creator.id,
            created_at=now,
            updated_at=now,
        )
        values.update(overrides)
        campaign = Campaign(**values)
        db.add(campaign)
        db.commit()
        db.refresh(campaign)
        return campaign
    return _make_campaign
