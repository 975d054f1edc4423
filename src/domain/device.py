"""
Device Descriptor

Best-effort description of the device behind a request. Clients may send it
with sign-in / set-password requests; the server fills gaps from request
headers. Every field is optional and nothing here ever raises.
"""

import re
from typing import Mapping, Optional

from pydantic import Field

from .base import CamelModel


class GeoLocation(CamelModel):
    """Coordinates and place names, any of which may be unknown"""

    lat: Optional[float] = None
    lon: Optional[float] = None
    city: Optional[str] = Field(default=None, max_length=128)
    region: Optional[str] = Field(default=None, max_length=128)
    country: Optional[str] = Field(default=None, max_length=128)

    def place(self) -> str:
        return ", ".join(p for p in (self.city, self.region, self.country) if p)

    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None


class DeviceInfo(CamelModel):
    device_name: Optional[str] = Field(default=None, max_length=128)
    browser_name: Optional[str] = Field(default=None, max_length=64)
    ip: Optional[str] = Field(default=None, max_length=45)
    location: Optional[GeoLocation] = None
    user_agent: Optional[str] = Field(default=None, max_length=512)


_MOBILE = re.compile(r"Mobi|Android|iPhone|iPad", re.IGNORECASE)


def detect_browser(user_agent: str) -> str:
    ua = user_agent or ""
    if re.search(r"edg/", ua, re.IGNORECASE):
        return "Edge"
    if re.search(r"opr/|opera", ua, re.IGNORECASE):
        return "Opera"
    if re.search(r"chrome|crios", ua, re.IGNORECASE):
        return "Chrome"
    if re.search(r"safari", ua, re.IGNORECASE):
        return "Safari"
    if re.search(r"firefox|fxios", ua, re.IGNORECASE):
        return "Firefox"
    if re.search(r"msie|trident", ua, re.IGNORECASE):
        return "Internet Explorer"
    return "Unknown"


def detect_device_name(user_agent: str) -> str:
    ua = user_agent or ""
    if _MOBILE.search(ua):
        if re.search(r"iPhone", ua, re.IGNORECASE):
            return "iPhone"
        if re.search(r"iPad", ua, re.IGNORECASE):
            return "iPad"
        if re.search(r"Android", ua, re.IGNORECASE):
            return "Android device"
        return "Mobile device"
    return "Desktop"


def client_ip_from_headers(headers: Mapping[str, str]) -> Optional[str]:
    """First hop of X-Forwarded-For, else X-Real-IP, else X-Client-IP."""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or headers.get("x-client-ip") or None


def device_info_from_headers(
    headers: Mapping[str, str], client_host: Optional[str] = None
) -> DeviceInfo:
    user_agent = headers.get("user-agent") or ""
    return DeviceInfo(
        device_name=detect_device_name(user_agent) if user_agent else None,
        browser_name=detect_browser(user_agent) if user_agent else None,
        ip=client_ip_from_headers(headers) or client_host,
        user_agent=user_agent[:512] or None,
    )


def merge_device_info(
    client: Optional[DeviceInfo], server: Optional[DeviceInfo]
) -> DeviceInfo:
    """Client-supplied values win; server-derived values fill the gaps."""
    if client is None and server is None:
        return DeviceInfo()
    if client is None:
        return server.model_copy()
    if server is None:
        return client.model_copy()
    return DeviceInfo(
        device_name=client.device_name or server.device_name,
        browser_name=client.browser_name or server.browser_name,
        ip=client.ip or server.ip,
        location=client.location or server.location,
        user_agent=client.user_agent or server.user_agent,
    )
