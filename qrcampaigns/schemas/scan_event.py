from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from uuid import UUID


class ScanEvent(BaseModel):
    id: UUID
    campaign_id: UUID
    region: str
    scanned_at: datetime
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    class Config:
        from_attributes = True
