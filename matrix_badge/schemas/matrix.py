# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Homeserver response schemas — the fields this service consumes from the
Matrix client API. Unknown fields are ignored.
"""

from pydantic import BaseModel, Field

from matrix_badge.models.domain import MembershipEvent


class ClientVersionsResponse(BaseModel):
    """``GET /_matrix/client/versions``"""
    versions: list[str]


class RegisterResponse(BaseModel):
    """``POST /_matrix/client/r0/register``"""
    access_token: str = Field(..., min_length=1)


RoomStateResponse = list[MembershipEvent]
