from qrcampaigns.models.user import User
from qrcampaigns.models.campaign import Campaign, CampaignStatus, BorderStyle
from qrcampaigns.models.scan_event import ScanEvent
from qrcampaigns.models.notification import Notification, NotificationType

__all__ = [
    "User", "Campaign", "CampaignStatus", "BorderStyle",
    "ScanEvent", "Notification", "NotificationType",
]
