"""
Account Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class AccountKind(str, Enum):
    """Kind of registered account"""

    INDIVIDUAL = "INDIVIDUAL"
    BUSINESS = "BUSINESS"

    @property
    def id_prefix(self) -> str:
        return "IND" if self is AccountKind.INDIVIDUAL else "BSN"
