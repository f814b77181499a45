# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member count pipeline.
resolve host ─► register account ─► fetch room state ─► count joins
"""

from matrix_badge.core.errors import MatrixBadgeError
from matrix_badge.core.logging import get_logger
from matrix_badge.metrics import PIPELINE_RUNS
from matrix_badge.services.account_provisioner import AccountProvisioner
from matrix_badge.services.host_resolver import HostResolver
from matrix_badge.services.membership import count_joined_members
from matrix_badge.services.room_state import RoomStateFetcher

logger = get_logger(__name__)


class MemberCountPipeline:
    """Runs one end-to-end resolution. Holds no per-request state."""

    def __init__(
        self,
        resolver: HostResolver,
        provisioner: AccountProvisioner,
        fetcher: RoomStateFetcher,
    ) -> None:
        self._resolver = resolver
        self._provisioner = provisioner
        self._fetcher = fetcher

    async def resolve_member_count(self, nominal_host: str, room_id: str) -> int:
        """
        Count joined members of ``room_id`` (already in ``!id:server`` form).
        Errors propagate unchanged.
        """
        try:
            host = await self._resolver.resolve(nominal_host)
            access_token = await self._provisioner.provision(host)
            events = await self._fetcher.fetch_state(host, room_id, access_token)
        except MatrixBadgeError as exc:
            PIPELINE_RUNS.labels(outcome=exc.kind.value).inc()
            raise

        members = count_joined_members(events)
        PIPELINE_RUNS.labels(outcome="ok").inc()
        logger.info(
            "Counted joined members",
            extra={"host": host, "room_id": room_id, "members": members},
        )
        return members
