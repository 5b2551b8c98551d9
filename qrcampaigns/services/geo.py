"""
Region lookup for scan events.

When GEOIP_API_URL is configured (ip-api.com compatible JSON), public IPs
are resolved to "Region, Country". Without it, or when the lookup fails,
the raw IP is stored so it can be backfilled later.
"""
import ipaddress
import logging
from typing import Optional

import httpx

from qrcampaigns.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_REGION = "Unknown"
LOCAL_NETWORK = "Local Network"


def is_ip_address(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _is_local(ip: str) -> bool:
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return addr.is_private or addr.is_loopback or addr.is_link_local


def lookup_region(ip: str) -> Optional[str]:
    """Query the configured GeoIP service. Returns None when disabled or on any failure."""
    if not settings.GEOIP_API_URL:
        return None

    url = settings.GEOIP_API_URL.format(ip=ip)
    try:
        response = httpx.get(url, timeout=settings.GEOIP_TIMEOUT_SECONDS)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        logger.warning(f"[GEO] Lookup failed for {ip}: {e}")
        return None
    except ValueError as e:
        logger.warning(f"[GEO] Invalid JSON from lookup for {ip}: {e}")
        return None

    if data.get("status") not in (None, "success"):
        logger.info(f"[GEO] No location for {ip}: {data.get('message')}")
        return None

    region = data.get("regionName")
    country = data.get("country")
    if region and country:
        return f"{region}, {country}"
    return country or region or None


def resolve_region(ip: Optional[str]) -> str:
    if not ip or ip == "unknown":
        return UNKNOWN_REGION
    if _is_local(ip):
        return LOCAL_NETWORK
    return lookup_region(ip) or ip
