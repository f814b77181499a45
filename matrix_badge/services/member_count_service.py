# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Cached member counts.
Composes the room id from the badge route and memoizes pipeline results.
"""

from matrix_badge.metrics import CACHE_LOOKUPS
from matrix_badge.services.cache import MemberCountCache
from matrix_badge.services.pipeline import MemberCountPipeline


def compose_room_id(room_id: str, host: str) -> str:
    return f"{room_id}:{host}"


class CachedMemberCountService:
    def __init__(self, pipeline: MemberCountPipeline, cache: MemberCountCache) -> None:
        self._pipeline = pipeline
        self._cache = cache

    @property
    def cache_seconds(self) -> int:
        return int(self._cache.ttl)

    async def member_count(self, room_id: str, host: str) -> int:
        full_room_id = compose_room_id(room_id, host)
        key = (host, full_room_id)

        cached = self._cache.get(key)
        if cached is not None:
            CACHE_LOOKUPS.labels(result="hit").inc()
            return cached
        CACHE_LOOKUPS.labels(result="miss").inc()

        members = await self._pipeline.resolve_member_count(host, full_room_id)
        self._cache.set(key, members)
        return members
