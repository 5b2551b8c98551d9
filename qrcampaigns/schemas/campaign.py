from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from urllib.parse import urlparse
from uuid import UUID
from qrcampaigns.models.campaign import CampaignStatus, BorderStyle
from qrcampaigns.utils.dates import to_naive_utc


def _parse_datetime(v):
    """Accept datetimes, ISO strings (with or without 'Z') and plain YYYY-MM-DD dates."""
    if isinstance(v, str):
        value = v.strip()
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        if 'T' not in value and ' ' not in value and len(value) == 10:
            value = value + 'T00:00:00'
        try:
            v = datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"Invalid datetime format: {v}")
    if isinstance(v, datetime):
        return to_naive_utc(v)
    return v


def _validate_target_url(v):
    if v is None or v == '':
        return None
    parsed = urlparse(v)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return v


class CampaignFields(BaseModel):
    description: Optional[str] = None
    image_url: Optional[str] = None
    icon_path: Optional[str] = None
    target_url: Optional[str] = None

    @field_validator('target_url', mode='before')
    @classmethod
    def validate_target_url(cls, v):
        return _validate_target_url(v)


class CampaignCreate(CampaignFields):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    scan_limit: Optional[int] = Field(None, gt=0)
    start_date: datetime
    end_date: datetime
    border_style: BorderStyle = BorderStyle.NONE

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        return _parse_datetime(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class CampaignUpdate(CampaignFields):
    """Full edit of a campaign; status and counters are managed by the server."""
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    scan_limit: Optional[int] = Field(None, gt=0)
    start_date: datetime
    end_date: datetime
    border_style: Optional[BorderStyle] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        return _parse_datetime(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class Campaign(BaseModel):
    id: UUID
    name: str
    category: str
    description: Optional[str] = None
    scan_count: int
    scan_limit: Optional[int] = None
    status: CampaignStatus
    start_date: datetime
    end_date: datetime
    created_by: UUID
    created_by_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    image_url: Optional[str] = None
    icon_path: Optional[str] = None
    border_style: BorderStyle
    target_url: Optional[str] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CampaignPage(BaseModel):
    campaigns: List[Campaign]
    pagination: Pagination


class CampaignCreator(BaseModel):
    id: UUID
    username: str
