# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from pydantic import BaseModel, Field


class BadgeResponse(BaseModel):
    """shields.io endpoint badge payload."""
    schemaVersion: int = 1
    label: str
    message: str
    color: str
    isError: bool = False
    cacheSeconds: int | None = None


class MemberCountResponse(BaseModel):
    room_id: str = Field(..., description="Composite room id, <roomId>:<host>")
    host: str
    members: int = Field(..., ge=0)


class ErrorDetail(BaseModel):
    detail: str
    kind: str
    request_id: str | None = None


class BadgeExample(BaseModel):
    title: str
    example_url: str
    pattern: str
    static_example: BadgeResponse
    documentation: str
