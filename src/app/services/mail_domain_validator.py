from abc import ABC, abstractmethod


class IMailDomainValidator(ABC):
    """Checks that an email domain can receive mail"""

    @abstractmethod
    async def accepts_mail(self, domain: str) -> bool:
        """True when the domain publishes at least one MX record"""
        pass
