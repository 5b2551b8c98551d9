"""
Public pages reached by scanning a campaign's QR code.
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging
import os
from qrcampaigns.core.config import settings
from qrcampaigns.core.rate_limit import client_ip
from qrcampaigns.db.session import get_db
from qrcampaigns.models.campaign import Campaign, CampaignStatus
from qrcampaigns.services import campaign_service, scan_service, geo

router = APIRouter()
logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)


def _parse_id(value: str) -> Optional[UUID]:
    try:
        return UUID(value)
    except ValueError:
        return None


def _not_found(request: Request):
    return templates.TemplateResponse(
        request, "not_found.html", {}, status_code=status.HTTP_404_NOT_FOUND
    )


def _expired(request: Request, campaign: Campaign):
    return templates.TemplateResponse(request, "expired.html", {"campaign": campaign})


def _limit_reached(request: Request, campaign: Campaign):
    return templates.TemplateResponse(request, "limit_reached.html", {"campaign": campaign})


def public_base_url(request: Request) -> str:
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.get("/qrcode/{campaign_id}", response_class=HTMLResponse)
def scan_qr_code(campaign_id: str, request: Request, db: Session = Depends(get_db)):
    """
    Record a scan and send the visitor on. Expired or full campaigns get an
    explanatory page instead and nothing is recorded.
    """
    parsed_id = _parse_id(campaign_id)
    campaign = campaign_service.get_campaign(db, parsed_id) if parsed_id else None
    if not campaign:
        logger.info(f"[SCAN] Unknown campaign {campaign_id}")
        return _not_found(request)

    if campaign.limit_reached:
        return _limit_reached(request, campaign)
    if campaign.status != CampaignStatus.ACTIVE:
        return _expired(request, campaign)

    ip = client_ip(request)
    region = geo.resolve_region(ip)
    result = scan_service.record_scan(
        db,
        campaign.id,
        ip_address=None if ip == "unknown" else ip,
        user_agent=request.headers.get("user-agent"),
        region=region,
    )

    campaign = campaign_service.get_campaign(db, campaign.id, refresh_status=False)
    if not result.success:
        # Lost a race with another scan or with the end date
        if result.reason == campaign_service.REASON_NOT_FOUND or campaign is None:
            return _not_found(request)
        if result.reason == campaign_service.REASON_LIMIT_REACHED:
            return _limit_reached(request, campaign)
        return _expired(request, campaign)

    if campaign.target_url:
        return RedirectResponse(campaign.target_url, status_code=status.HTTP_302_FOUND)

    return templates.TemplateResponse(request, "scan_success.html", {"campaign": campaign})


@router.get("/qr-view/{campaign_id}", response_class=HTMLResponse)
def view_qr_code(campaign_id: str, request: Request, db: Session = Depends(get_db)):
    """Printable page with the campaign's QR code."""
    parsed_id = _parse_id(campaign_id)
    campaign = campaign_service.get_campaign(db, parsed_id) if parsed_id else None
    if not campaign:
        return _not_found(request)

    return templates.TemplateResponse(
        request,
        "qr_view.html",
        {
            "campaign": campaign,
            "scan_url": f"{public_base_url(request)}/qrcode/{campaign.id}",
        },
    )
