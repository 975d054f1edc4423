from abc import ABC, abstractmethod
from typing import Optional

from src.domain.device import GeoLocation


class IGeoLocator(ABC):
    """Best-effort IP geolocation"""

    @abstractmethod
    async def locate(self, ip: str) -> Optional[GeoLocation]:
        """Location for an IP address, or None when unknown; never raises"""
        pass
