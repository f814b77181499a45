# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Room state retrieval.
"""

from urllib.parse import quote

from matrix_badge.core.errors import (
    BadAuthTokenError,
    MalformedRequestError,
    PrivacyDeniedError,
)
from matrix_badge.models.domain import MembershipEvent
from matrix_badge.schemas.matrix import RoomStateResponse
from matrix_badge.services.json_requester import JsonRequester

ROOM_STATE_ERRORS = {
    400: MalformedRequestError,
    401: BadAuthTokenError,
    403: PrivacyDeniedError,
}


class RoomStateFetcher:
    def __init__(self, requester: JsonRequester) -> None:
        self._requester = requester

    async def fetch_state(
        self, host: str, room_id: str, access_token: str,
    ) -> list[MembershipEvent]:
        """
        Fetch the full state snapshot of ``room_id`` (``!id:server``) from
        ``host``. The token travels as a query parameter.
        """
        return await self._requester.request(
            f"https://{host}/_matrix/client/r0/rooms/{quote(room_id, safe='')}/state",
            schema=RoomStateResponse,
            params={"access_token": access_token},
            error_map=ROOM_STATE_ERRORS,
            endpoint="room_state",
        )
