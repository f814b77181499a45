# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Dependency injection — HTTP client, resolver and member count service singletons."""
import httpx
from fastapi import HTTPException

from matrix_badge.core.config import settings
from matrix_badge.services.account_provisioner import AccountProvisioner
from matrix_badge.services.cache import MemberCountCache
from matrix_badge.services.host_resolver import HostResolver
from matrix_badge.services.json_requester import JsonRequester
from matrix_badge.services.member_count_service import CachedMemberCountService
from matrix_badge.services.pipeline import MemberCountPipeline
from matrix_badge.services.room_state import RoomStateFetcher
from matrix_badge.services.srv_lookup import SrvLookup

_http_client: httpx.AsyncClient | None = None
_member_count_service: CachedMemberCountService | None = None
_cache = MemberCountCache(settings.CACHE_TTL_SECONDS, settings.CACHE_MAX_ENTRIES)


def build_member_count_service(
    http_client: httpx.AsyncClient,
    srv_lookup: SrvLookup,
    cache: MemberCountCache,
) -> CachedMemberCountService:
    requester = JsonRequester(http_client)
    pipeline = MemberCountPipeline(
        resolver=HostResolver(srv_lookup, requester, settings.SRV_PREFIX),
        provisioner=AccountProvisioner(requester),
        fetcher=RoomStateFetcher(requester),
    )
    return CachedMemberCountService(pipeline, cache)


def init_http_client():
    global _http_client, _member_count_service
    _http_client = httpx.AsyncClient(
        timeout=settings.HTTP_TIMEOUT,
        transport=httpx.AsyncHTTPTransport(retries=settings.HTTP_CONNECT_RETRIES),
        headers={"User-Agent": settings.USER_AGENT},
    )
    _member_count_service = build_member_count_service(
        _http_client, SrvLookup(timeout=settings.DNS_TIMEOUT), _cache,
    )


async def close_http_client():
    global _http_client, _member_count_service
    if _http_client:
        await _http_client.aclose()
    _http_client = None
    _member_count_service = None


def is_initialised() -> bool:
    return _member_count_service is not None


def get_member_count_service() -> CachedMemberCountService:
    if _member_count_service is None:
        raise HTTPException(status_code=503, detail="HTTP client not initialised")
    return _member_count_service


def get_cache() -> MemberCountCache:
    return _cache
