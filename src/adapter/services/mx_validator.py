"""DNS MX lookups for registration email domains."""

import logging

import dns.asyncresolver
import dns.exception

from src.app.services.mail_domain_validator import IMailDomainValidator

logger = logging.getLogger(__name__)


class DnsMxValidator(IMailDomainValidator):
    """Accepts a domain only when it publishes at least one MX record.

    Lookup failures (NXDOMAIN, no answer, timeout) are treated as "no MX".
    """

    def __init__(self, timeout: float = 5.0, enabled: bool = True):
        self.timeout = timeout
        self.enabled = enabled

    async def accepts_mail(self, domain: str) -> bool:
        if not self.enabled:
            return True
        if not domain:
            return False

        try:
            answer = await dns.asyncresolver.resolve(domain, "MX", lifetime=self.timeout)
        except dns.exception.DNSException as e:
            logger.info("MX lookup failed for %s: %s", domain, e.__class__.__name__)
            return False

        return len(answer) > 0
