# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Homeserver resolution.
Turns the host named in the badge URL into the host that serves the
client API, using SRV discovery plus a client-API reachability check.
"""

import ipaddress

from matrix_badge.core.errors import MatrixBadgeError
from matrix_badge.core.logging import get_logger
from matrix_badge.metrics import DISCOVERY_OUTCOMES
from matrix_badge.models.domain import DiscoveryStatus
from matrix_badge.schemas.matrix import ClientVersionsResponse
from matrix_badge.services.json_requester import JsonRequester
from matrix_badge.services.srv_lookup import SrvLookup

logger = get_logger(__name__)


def has_explicit_address(server_name: str) -> bool:
    """True for IP literals and names with a port; these skip SRV discovery."""
    if server_name.startswith("["):
        return True
    host, _, port = server_name.rpartition(":")
    if host and port.isdigit():
        return True
    try:
        ipaddress.ip_address(server_name)
    except ValueError:
        return False
    return True


class HostResolver:
    def __init__(
        self,
        srv_lookup: SrvLookup,
        requester: JsonRequester,
        srv_prefix: str = "_matrix._tcp.",
    ) -> None:
        self._srv = srv_lookup
        self._requester = requester
        self._srv_prefix = srv_prefix

    async def resolve(self, nominal_host: str) -> str:
        """
        Return the effective client-API host for ``nominal_host``.
        Raises DiscoveryInfraError only when the resolver itself fails.
        """
        if has_explicit_address(nominal_host):
            DISCOVERY_OUTCOMES.labels(outcome="explicit").inc()
            return nominal_host

        result = await self._srv.lookup(self._srv_prefix, nominal_host)
        if result.status is DiscoveryStatus.NOT_FOUND:
            DISCOVERY_OUTCOMES.labels(outcome="no_record").inc()
            return nominal_host

        candidate = result.records[0].target
        if await self._serves_client_api(candidate):
            DISCOVERY_OUTCOMES.labels(outcome="override").inc()
            logger.info("Resolved %s to %s via SRV", nominal_host, candidate)
            return candidate

        # The SRV target may only serve federation traffic.
        DISCOVERY_OUTCOMES.labels(outcome="unverified").inc()
        return nominal_host

    async def _serves_client_api(self, host: str) -> bool:
        try:
            await self._requester.request(
                f"https://{host}/_matrix/client/versions",
                schema=ClientVersionsResponse,
                endpoint="versions",
            )
        except MatrixBadgeError as exc:
            logger.debug("Client API check failed for %s: %s", host, exc)
            return False
        return True
