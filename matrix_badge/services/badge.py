# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Badge rendering — pure computation, no side effects.
"""

from typing import Optional

from matrix_badge.core.config import settings
from matrix_badge.core.errors import ErrorKind, MatrixBadgeError
from matrix_badge.schemas.badge import BadgeExample, BadgeResponse

# Denials the room owner can fix are shown in red, everything else in grey.
_RED_KINDS = {ErrorKind.PRIVACY_DENIED, ErrorKind.GUESTS_FORBIDDEN}

DOCUMENTATION = """
In order for this badge to work, the host of your room must allow guest
accounts or dummy accounts to register, and the room must be world readable
(chat history visible to anyone).

To find the badge URL in a Matrix client:
  1. Open the room settings and look under the "Advanced" tab.
  2. Copy the internal room ID, e.g. !ltIjvaLydYAWZyihee:matrix.org
  3. Replace the ':' with '/'.
  4. The badge URL is then /api/v1/matrix/!ltIjvaLydYAWZyihee/matrix.org
""".strip()


def render_members(members: int, cache_seconds: Optional[int] = None) -> BadgeResponse:
    return BadgeResponse(
        label=settings.BADGE_LABEL,
        message=f"{members} users",
        color=settings.BADGE_COLOR,
        cacheSeconds=cache_seconds,
    )


def render_error(exc: MatrixBadgeError) -> BadgeResponse:
    return BadgeResponse(
        label=settings.BADGE_LABEL,
        message=exc.message,
        color="red" if exc.kind in _RED_KINDS else "lightgrey",
        isError=True,
    )


def examples() -> list[BadgeExample]:
    return [
        BadgeExample(
            title="Matrix",
            example_url="/api/v1/matrix/!ltIjvaLydYAWZyihee/matrix.org",
            pattern="/api/v1/matrix/:roomId/:host",
            static_example=render_members(42),
            documentation=DOCUMENTATION,
        )
    ]
