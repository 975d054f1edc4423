"""IP geolocation through the ipapi.co JSON API."""

import logging
from typing import Optional

import httpx

from src.app.services.geo_locator import IGeoLocator
from src.domain.device import GeoLocation

logger = logging.getLogger(__name__)


class IpApiGeoLocator(IGeoLocator):
    def __init__(
        self,
        base_url: str = "https://ipapi.co",
        timeout: float = 3.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def locate(self, ip: str) -> Optional[GeoLocation]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.get(f"{self.base_url}/{ip}/json/")
            except httpx.TimeoutException:
                logger.warning("Geolocation lookup timed out")
                return None
            except httpx.RequestError as e:
                logger.warning("Geolocation request failed: %s", e)
                return None

        if resp.status_code != 200:
            logger.warning("Geolocation lookup returned %d", resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Geolocation lookup returned invalid JSON")
            return None

        if not isinstance(data, dict) or data.get("error"):
            return None

        try:
            location = GeoLocation(
                lat=data.get("latitude"),
                lon=data.get("longitude"),
                city=data.get("city"),
                region=data.get("region"),
                country=data.get("country_name"),
            )
        except ValueError:
            logger.warning("Geolocation payload did not match the expected shape")
            return None

        if not location.has_coordinates() and not location.place():
            return None
        return location
