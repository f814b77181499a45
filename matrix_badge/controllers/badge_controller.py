# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Matrix room member badge endpoints.
Thin HTTP layer — delegates ALL logic to CachedMemberCountService.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from matrix_badge.core.dependencies import get_member_count_service
from matrix_badge.core.errors import MatrixBadgeError
from matrix_badge.core.logging import get_logger
from matrix_badge.schemas.badge import (
    BadgeExample,
    BadgeResponse,
    ErrorDetail,
    MemberCountResponse,
)
from matrix_badge.services.badge import examples, render_error, render_members
from matrix_badge.services.member_count_service import (
    CachedMemberCountService,
    compose_room_id,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/matrix", tags=["Badges"])

HOST_PATTERN = (
    r"^(?:[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?|\[[0-9A-Fa-f:.]+\])"
    r"(?::[0-9]{1,5})?$"
)

RoomId = Annotated[
    str,
    Path(pattern=r"^![^/:]+$", description="Room id without the server part, e.g. !abc"),
]
Host = Annotated[
    str,
    Path(pattern=HOST_PATTERN, description="Homeserver name: domain, IPv4 or [IPv6], optional :port"),
]


@router.get("/examples", response_model=list[BadgeExample])
def badge_examples():
    """Example badge URL and setup instructions."""
    return examples()


@router.get("/{room_id}/{host}", response_model=BadgeResponse)
async def member_badge(
    room_id: RoomId,
    host: Host,
    response: Response,
    service: CachedMemberCountService = Depends(get_member_count_service),
):
    """Badge showing how many members have joined the room."""
    try:
        members = await service.member_count(room_id, host)
    except MatrixBadgeError as exc:
        logger.warning(
            "Badge rendered as error: %s", exc,
            extra={"host": host, "room_id": room_id, "kind": exc.kind.value},
        )
        return render_error(exc)
    response.headers["Cache-Control"] = f"max-age={service.cache_seconds}"
    return render_members(members, cache_seconds=service.cache_seconds)


@router.get(
    "/{room_id}/{host}/members",
    response_model=MemberCountResponse,
    responses={
        400: {"model": ErrorDetail},
        403: {"model": ErrorDetail},
        429: {"model": ErrorDetail},
        502: {"model": ErrorDetail},
        504: {"model": ErrorDetail},
    },
)
async def member_count(
    room_id: RoomId,
    host: Host,
    service: CachedMemberCountService = Depends(get_member_count_service),
):
    """Raw joined-member count. Pipeline errors are mapped by the app's MatrixBadgeError handler."""
    members = await service.member_count(room_id, host)
    return MemberCountResponse(
        room_id=compose_room_id(room_id, host), host=host, members=members,
    )
