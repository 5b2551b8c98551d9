from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from qrcampaigns.db.session import get_db
from qrcampaigns.models.user import User
from qrcampaigns.schemas.analytics import OverallStats
from qrcampaigns.services import analytics_service
from qrcampaigns.api.deps import get_current_user

router = APIRouter()


@router.get("/overall", response_model=OverallStats)
def get_overall_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return analytics_service.overall_stats(db)
