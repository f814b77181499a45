# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Membership counting — pure computation, no side effects.
"""

from collections.abc import Mapping
from typing import Any, Optional

from matrix_badge.models.domain import MembershipEvent

MEMBER_EVENT_TYPE = "m.room.member"


def _fields(event: Any) -> Optional[tuple[Any, Any, Any, Any]]:
    """(type, sender, state_key, membership) for a validated or raw event."""
    if isinstance(event, MembershipEvent):
        return event.event_type, event.sender, event.state_key, event.membership
    if isinstance(event, Mapping):
        content = event.get("content")
        membership = content.get("membership") if isinstance(content, Mapping) else None
        return event.get("type"), event.get("sender"), event.get("state_key"), membership
    return None


def count_joined_members(events: Any) -> int:
    """
    Count members whose own latest membership event is a join.
    Pure function — no I/O, no metrics, no logging. Entries that are
    neither events nor event-shaped mappings are skipped.
    """
    if not isinstance(events, (list, tuple)):
        return 0
    joined = 0
    for event in events:
        fields = _fields(event)
        if fields is None:
            continue
        event_type, sender, state_key, membership = fields
        if (
            event_type == MEMBER_EVENT_TYPE
            and isinstance(sender, str)
            and sender == state_key
            and membership == "join"
        ):
            joined += 1
    return joined
