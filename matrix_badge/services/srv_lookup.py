# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: SRV lookup — DNS service discovery via dnspython.
"No such record" is a normal outcome and comes back as a NOT_FOUND result;
only resolver infrastructure failures raise.
"""

from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from matrix_badge.core.errors import DiscoveryInfraError
from matrix_badge.core.logging import get_logger
from matrix_badge.models.domain import DiscoveryResult, ServiceRecord

logger = get_logger(__name__)


class SrvLookup:
    """Async SRV resolver."""

    def __init__(
        self,
        resolver: Optional[dns.asyncresolver.Resolver] = None,
        timeout: float = 3.0,
    ) -> None:
        if resolver is None:
            resolver = dns.asyncresolver.Resolver()
            resolver.lifetime = timeout
        self._resolver = resolver

    async def lookup(self, service_prefix: str, host: str) -> DiscoveryResult:
        qname = f"{service_prefix}{host}"
        try:
            answer = await self._resolver.resolve(qname, "SRV")
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return DiscoveryResult.not_found()
        except dns.exception.DNSException as exc:
            logger.warning("SRV lookup failed for %s: %s", qname, exc)
            raise DiscoveryInfraError(detail=str(exc)) from exc

        records = [
            ServiceRecord(
                target=rdata.target.to_text(omit_final_dot=True),
                port=rdata.port,
                priority=rdata.priority,
                weight=rdata.weight,
            )
            for rdata in answer
        ]
        # A lone "." target means the service is explicitly not offered.
        records = [r for r in records if r.target not in ("", ".")]
        records.sort(key=lambda r: (r.priority, -r.weight))
        return DiscoveryResult.found(records)
