from pydantic import BaseModel
from datetime import datetime
from typing import List
from uuid import UUID


class RegionCount(BaseModel):
    region: str
    count: int


class HourlyCount(BaseModel):
    hour: int
    count: int


class CampaignAnalytics(BaseModel):
    region_data: List[RegionCount]
    hourly_data: List[HourlyCount]
    total_scans: int
    date: str


class OverallStats(BaseModel):
    total_campaigns: int
    total_scans: int
    active_campaigns: int
    expired_campaigns: int


class UserStats(OverallStats):
    created_at: datetime


class AnalyticsOverall(BaseModel):
    total_campaigns: int
    total_scans: int
    total_users: int
    active_campaigns: int
    avg_scans_per_campaign: int


class TopCampaign(BaseModel):
    id: UUID
    name: str
    scan_count: int
    category: str
    created_at: datetime

    class Config:
        from_attributes = True


class RegionStat(BaseModel):
    region: str
    scan_count: int
    percentage: int


class GrowthPoint(BaseModel):
    month: str  # YYYY-MM
    user_count: int
    campaign_count: int


class AddScanEventsResponse(BaseModel):
    success: bool
    message: str
    added: int
    total: int


class BackfillResponse(BaseModel):
    success: bool
    message: str
    updated: int
