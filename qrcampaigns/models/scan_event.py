from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
import uuid
from qrcampaigns.db.session import Base
from qrcampaigns.utils.dates import utcnow


class ScanEvent(Base):
    __tablename__ = "scan_events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    campaign_id = Column(Uuid(as_uuid=True), ForeignKey("campaigns.id"), nullable=False, index=True)
    region = Column(String, nullable=False, index=True)  # Resolved location, or the raw IP when lookup is unavailable
    scanned_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    user_agent = Column(String, nullable=True)
    ip_address = Column(String, nullable=True)
