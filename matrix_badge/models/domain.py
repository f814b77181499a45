# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ServiceRecord:
    """A single SRV record. Only ``target`` is consumed."""
    target: str
    port: int = 8448
    priority: int = 0
    weight: int = 0


class DiscoveryStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class DiscoveryResult:
    """Outcome of an SRV lookup that did not hit an infrastructure failure."""
    status: DiscoveryStatus
    records: tuple[ServiceRecord, ...] = field(default_factory=tuple)

    @classmethod
    def not_found(cls) -> "DiscoveryResult":
        return cls(status=DiscoveryStatus.NOT_FOUND)

    @classmethod
    def found(cls, records: list[ServiceRecord]) -> "DiscoveryResult":
        if not records:
            return cls.not_found()
        return cls(status=DiscoveryStatus.FOUND, records=tuple(records))


class EventContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    membership: Optional[str] = None

    @field_validator("membership", mode="before")
    @classmethod
    def membership_not_null(cls, value):
        # Absent is fine; an explicit null is not a string.
        if value is None:
            raise ValueError("membership must be a string when present")
        return value



class MembershipEvent(BaseModel):
    """One room state entry, as returned by ``/rooms/{roomId}/state``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event_type: str = Field(..., alias="type")
    sender: str
    state_key: str
    content: EventContent

    @property
    def membership(self) -> Optional[str]:
        return self.content.membership
