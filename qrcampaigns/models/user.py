from sqlalchemy import Column, String, Boolean, DateTime, Uuid
import uuid
from qrcampaigns.db.session import Base
from qrcampaigns.utils.dates import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String, nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # Soft-deactivation; users are never deleted
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
