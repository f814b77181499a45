# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Ephemeral account registration.
Registers a guest account, falling back once to a dummy-auth user account
when the homeserver forbids guests.
"""

from matrix_badge.core.errors import (
    AuthError,
    ForbiddenError,
    MatrixBadgeError,
    RateLimitedError,
)
from matrix_badge.core.logging import get_logger
from matrix_badge.metrics import REGISTRATIONS
from matrix_badge.schemas.matrix import RegisterResponse
from matrix_badge.services.json_requester import JsonRequester

logger = get_logger(__name__)

REGISTER_ERRORS = {
    401: AuthError,
    403: ForbiddenError,
    429: RateLimitedError,
}


class AccountProvisioner:
    def __init__(self, requester: JsonRequester) -> None:
        self._requester = requester

    async def provision(self, host: str) -> str:
        """Return an access token for a freshly registered account on ``host``."""
        try:
            return await self._register(host, guest=True)
        except ForbiddenError:
            logger.info("Guests not allowed on %s, registering dummy account", host)
        return await self._register(host, guest=False)

    async def _register(self, host: str, guest: bool) -> str:
        kind = "guest" if guest else "user"
        try:
            auth = await self._requester.request(
                f"https://{host}/_matrix/client/r0/register",
                schema=RegisterResponse,
                method="POST",
                params={"kind": "guest"} if guest else None,
                json_body={"password": "", "auth": {"type": "m.login.dummy"}},
                error_map=REGISTER_ERRORS,
                endpoint="register",
            )
        except MatrixBadgeError as exc:
            REGISTRATIONS.labels(kind=kind, outcome=exc.kind.value).inc()
            raise
        REGISTRATIONS.labels(kind=kind, outcome="ok").inc()
        return auth.access_token
