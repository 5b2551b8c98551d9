from qrcampaigns.schemas.user import User, UserCreate, UserLogin, AuthResponse
from qrcampaigns.schemas.campaign import Campaign, CampaignCreate, CampaignUpdate, CampaignPage
from qrcampaigns.schemas.scan_event import ScanEvent
from qrcampaigns.schemas.notification import Notification, NotificationCreate, NotificationList
from qrcampaigns.schemas.analytics import CampaignAnalytics, OverallStats, AnalyticsOverall

__all__ = [
    "User", "UserCreate", "UserLogin", "AuthResponse",
    "Campaign", "CampaignCreate", "CampaignUpdate", "CampaignPage",
    "ScanEvent",
    "Notification", "NotificationCreate", "NotificationList",
    "CampaignAnalytics", "OverallStats", "AnalyticsOverall",
]
