from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Uuid, CheckConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum
from qrcampaigns.db.session import Base
from qrcampaigns.utils.dates import utcnow


class CampaignStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class BorderStyle(str, enum.Enum):
    THICK = "thick"
    NONE = "none"


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    scan_count = Column(Integer, default=0, nullable=False)  # Only ever incremented
    scan_limit = Column(Integer, nullable=True)  # Optional cap on scan_count
    status = Column(
        SQLEnum(CampaignStatus, values_callable=lambda e: [m.value for m in e], name="campaignstatus"),
        default=CampaignStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False, index=True)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    image_url = Column(String, nullable=True)
    icon_path = Column(String, nullable=True)  # QR code centre icon
    border_style = Column(
        SQLEnum(BorderStyle, values_callable=lambda e: [m.value for m in e], name="borderstyle"),
        default=BorderStyle.NONE,
        nullable=False,
    )
    target_url = Column(String, nullable=True)  # Scans redirect here when set

    creator = relationship("User", lazy="joined")

    __table_args__ = (
        CheckConstraint("scan_limit IS NULL OR scan_count <= scan_limit", name="ck_campaigns_scan_count_within_limit"),
    )

    @property
    def created_by_username(self):
        return self.creator.username if self.creator else None

    @property
    def limit_reached(self) -> bool:
        return self.scan_limit is not None and self.scan_count >= self.scan_limit
