from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, Index, Enum as SQLEnum
import uuid
import enum
from qrcampaigns.db.session import Base
from qrcampaigns.utils.dates import utcnow


class NotificationType(str, enum.Enum):
    EXPIRING_CAMPAIGN = "expiring_campaign"
    SCAN_LIMIT_REACHED = "scan_limit_reached"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(
        SQLEnum(NotificationType, values_callable=lambda e: [m.value for m in e], name="notificationtype"),
        nullable=False,
    )
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    campaign_id = Column(Uuid(as_uuid=True), ForeignKey("campaigns.id"), nullable=True)
    campaign_name = Column(String, nullable=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)  # Recipient
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_notifications_campaign_user_type", "campaign_id", "user_id", "type"),
    )
