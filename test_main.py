# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the Matrix Member Badge Service HTTP surface and result cache.
Run: pytest test_main.py -v
"""

import json
import logging

import pytest
from fastapi.testclient import TestClient

from main import app
from matrix_badge.core.config import settings
from matrix_badge.core.logging import JSONFormatter, configure_logging
from matrix_badge.core.dependencies import (
    build_member_count_service,
    get_member_count_service,
)
from matrix_badge.core.errors import PrivacyDeniedError, UpstreamUnreachableError
from matrix_badge.middleware import normalize_path
from matrix_badge.services.badge import render_error, render_members
from matrix_badge.services.cache import MemberCountCache
from matrix_badge.services.member_count_service import (
    CachedMemberCountService,
    compose_room_id,
)

client = TestClient(app)

GUEST_REGISTER = "https://example.org/_matrix/client/r0/register?kind=guest"
STATE = "https://example.org/_matrix/client/r0/rooms/!room:example.org/state"


def member_event(user, membership="join"):
    return {
        "type": "m.room.member",
        "sender": user,
        "state_key": user,
        "content": {"membership": membership},
    }


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingPipeline:
    """Pipeline double returning scripted results and counting calls."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def resolve_member_count(self, nominal_host, room_id):
        self.calls.append((nominal_host, room_id))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


# ============================================
# Fixtures
# ============================================
@pytest.fixture
def service(homeserver, srv_lookup):
    svc = build_member_count_service(homeserver.client(), srv_lookup, MemberCountCache(30))
    app.dependency_overrides[get_member_count_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


@pytest.fixture
def joined_room(homeserver):
    homeserver.on("POST", GUEST_REGISTER, json={"access_token": "guest-token"})
    homeserver.on("GET", STATE, json=[
        member_event("@a:example.org"),
        member_event("@b:example.org"),
        member_event("@c:example.org"),
        member_event("@d:example.org", membership="leave"),
    ])
    return homeserver


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health_returns_ok_status(self):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == settings.SERVICE_NAME
        assert data["version"] == settings.SERVICE_VERSION
        assert "timestamp" in data

    def test_readiness_before_startup(self):
        response = client.get("/health/ready")
        assert response.status_code == 503

    @pytest.mark.parametrize("path", [
        "/api/v1/matrix/!room/example.org",
        "/api/v1/matrix/!room/example.org/members",
    ])
    def test_badge_routes_unavailable_before_startup(self, path):
        response = client.get(path)
        assert response.status_code == 503
        assert response.json()["detail"] == "HTTP client not initialised"


class TestLogging:
    def _record(self, **extra):
        record = logging.LogRecord("matrix_badge.test", logging.INFO, __file__, 1, "counted %d", (3,), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_context_fields_included(self):
        line = json.loads(JSONFormatter().format(
            self._record(host="example.org", room_id="!room:example.org", members=3)
        ))
        assert line["message"] == "counted 3"
        assert line["service"] == settings.SERVICE_NAME
        assert line["host"] == "example.org"
        assert line["room_id"] == "!room:example.org"
        assert line["members"] == 3

    def test_unknown_and_empty_fields_dropped(self):
        line = json.loads(JSONFormatter().format(self._record(request_id=None, access_token="secret")))
        assert "request_id" not in line
        assert "access_token" not in line

    def test_configure_logging_quiets_httpx(self):
        configure_logging()
        assert logging.getLogger("httpx").level == logging.WARNING


class TestRequestID:
    def test_request_id_propagated(self):
        response = client.get("/health", headers={"X-Request-ID": "test-req-12345"})
        assert response.headers["X-Request-ID"] == "test-req-12345"

    def test_auto_generated_request_id(self):
        response = client.get("/health")
        assert len(response.headers.get("X-Request-ID", "")) > 0


class TestMetrics:
    def test_metrics_exposes_badge_counters(self, service, joined_room):
        client.get("/api/v1/matrix/!room/example.org")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "matrix_badge_requests_total" in response.text
        assert "matrix_badge_pipeline_runs_total" in response.text

    def test_path_normalisation_hides_room_ids(self):
        assert normalize_path("/api/v1/matrix/!abc/matrix.org") == "/api/v1/matrix/{param}/{param}"
        assert normalize_path("/api/v1/matrix/!abc/matrix.org/members") == (
            "/api/v1/matrix/{param}/{param}/members"
        )


# ============================================
# Badge endpoint
# ============================================
class TestBadge:
    def test_badge_shows_joined_members(self, service, joined_room):
        response = client.get("/api/v1/matrix/!room/example.org")
        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "chat"
        assert data["message"] == "3 users"
        assert data["color"] == "brightgreen"
        assert data["isError"] is False
        assert data["schemaVersion"] == 1
        assert response.headers["Cache-Control"] == "max-age=30"

    def test_privacy_denial_renders_red_error_badge(self, service, homeserver):
        homeserver.on("POST", GUEST_REGISTER, json={"access_token": "guest-token"})
        homeserver.on("GET", STATE, status=403, json={"errcode": "M_FORBIDDEN"})
        response = client.get("/api/v1/matrix/!room/example.org")
        assert response.status_code == 200
        data = response.json()
        assert data["isError"] is True
        assert data["message"] == "room not world readable or is invalid"
        assert data["color"] == "red"
        assert "Cache-Control" not in response.headers

    def test_unknown_host_renders_inaccessible(self, service):
        response = client.get("/api/v1/matrix/!room/example.org")
        data = response.json()
        assert data["isError"] is True
        assert data["message"] == "inaccessible"
        assert data["color"] == "lightgrey"

    def test_second_request_served_from_cache(self, service, joined_room):
        client.get("/api/v1/matrix/!room/example.org")
        client.get("/api/v1/matrix/!room/example.org")
        assert joined_room.calls.count(f"GET {STATE}") == 1

    def test_server_name_with_port(self, service, homeserver, srv_lookup):
        homeserver.on(
            "POST", "https://example.org:8448/_matrix/client/r0/register?kind=guest",
            json={"access_token": "guest-token"},
        )
        homeserver.on(
            "GET", "https://example.org:8448/_matrix/client/r0/rooms/!room:example.org:8448/state",
            json=[member_event("@a:example.org:8448"), member_event("@b:example.org:8448")],
        )
        response = client.get("/api/v1/matrix/!room/example.org:8448")
        assert response.status_code == 200
        assert response.json()["message"] == "2 users"
        assert srv_lookup.queries == []

    def test_ipv6_server_name(self, service, homeserver):
        homeserver.on(
            "POST", "https://[2001:db8::1]:8448/_matrix/client/r0/register?kind=guest",
            json={"access_token": "guest-token"},
        )
        homeserver.on(
            "GET", "https://[2001:db8::1]:8448/_matrix/client/r0/rooms/!room:[2001:db8::1]:8448/state",
            json=[member_event("@a:[2001:db8::1]:8448")],
        )
        response = client.get("/api/v1/matrix/!room/[2001:db8::1]:8448/members")
        assert response.status_code == 200
        assert response.json()["room_id"] == "!room:[2001:db8::1]:8448"
        assert response.json()["members"] == 1

    @pytest.mark.parametrize("path", [
        "/api/v1/matrix/!room/example.org:port",
        "/api/v1/matrix/!room/example.org:8448:1",
        "/api/v1/matrix/room/example.org",
        "/api/v1/matrix/!room:extra/example.org",
        "/api/v1/matrix/!room/exa_mple.org",
        "/api/v1/matrix/!room/-example.org",
    ])
    def test_invalid_route_values_rejected(self, service, path):
        assert client.get(path).status_code == 422


class TestMemberCountEndpoint:
    def test_returns_count(self, service, joined_room):
        response = client.get("/api/v1/matrix/!room/example.org/members")
        assert response.status_code == 200
        assert response.json() == {
            "room_id": "!room:example.org",
            "host": "example.org",
            "members": 3,
        }

    def test_privacy_denial_maps_to_403(self, service, homeserver):
        homeserver.on("POST", GUEST_REGISTER, json={"access_token": "guest-token"})
        homeserver.on("GET", STATE, status=403, json={})
        response = client.get("/api/v1/matrix/!room/example.org/members")
        assert response.status_code == 403
        assert response.json()["kind"] == "privacy_denied"

    def test_rate_limit_maps_to_429(self, service, homeserver):
        homeserver.on("POST", GUEST_REGISTER, status=429, json={})
        response = client.get("/api/v1/matrix/!room/example.org/members")
        assert response.status_code == 429
        assert response.json()["detail"] == "rate limited by rooms host"

    def test_discovery_failure_maps_to_502(self, service, srv_lookup):
        srv_lookup.fails()
        response = client.get("/api/v1/matrix/!room/example.org/members")
        assert response.status_code == 502
        assert response.json()["kind"] == "discovery_failed"


class TestExamples:
    def test_examples_render_static_badge(self):
        response = client.get("/api/v1/matrix/examples")
        assert response.status_code == 200
        example = response.json()[0]
        assert example["pattern"] == "/api/v1/matrix/:roomId/:host"
        assert example["static_example"]["message"] == "42 users"
        assert "world readable" in example["documentation"]


# ============================================
# Rendering
# ============================================
class TestRendering:
    def test_render_members(self):
        badge = render_members(0)
        assert badge.message == "0 users"
        assert badge.isError is False

    def test_render_error_uses_error_message(self):
        badge = render_error(UpstreamUnreachableError(detail="connect timeout"))
        assert badge.message == "inaccessible"
        assert badge.color == "lightgrey"

    def test_render_privacy_error_is_red(self):
        assert render_error(PrivacyDeniedError()).color == "red"


# ============================================
# Result cache
# ============================================
class TestMemberCountCache:
    def test_get_missing_key(self):
        assert MemberCountCache(30).get(("example.org", "!a:example.org")) is None

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = MemberCountCache(30, clock=clock)
        cache.set(("example.org", "!a:example.org"), 5)
        clock.now += 29
        assert cache.get(("example.org", "!a:example.org")) == 5
        clock.now += 1
        assert cache.get(("example.org", "!a:example.org")) is None
        assert cache.count() == 0

    def test_zero_ttl_disables_caching(self):
        cache = MemberCountCache(0)
        cache.set(("example.org", "!a:example.org"), 5)
        assert cache.count() == 0

    def test_oldest_entry_evicted(self):
        cache = MemberCountCache(30, max_entries=2)
        cache.set(("h", "!1:h"), 1)
        cache.set(("h", "!2:h"), 2)
        cache.set(("h", "!3:h"), 3)
        assert cache.get(("h", "!1:h")) is None
        assert cache.get(("h", "!3:h")) == 3

    def test_zero_count_is_cached(self):
        cache = MemberCountCache(30)
        cache.set(("h", "!1:h"), 0)
        assert cache.get(("h", "!1:h")) == 0


class TestCachedMemberCountService:
    def test_compose_room_id(self):
        assert compose_room_id("!abc", "matrix.org") == "!abc:matrix.org"

    @pytest.mark.anyio
    async def test_pipeline_runs_once_within_window(self):
        pipeline = CountingPipeline(7)
        svc = CachedMemberCountService(pipeline, MemberCountCache(30))
        assert await svc.member_count("!abc", "matrix.org") == 7
        assert await svc.member_count("!abc", "matrix.org") == 7
        assert pipeline.calls == [("matrix.org", "!abc:matrix.org")]

    @pytest.mark.anyio
    async def test_errors_are_not_cached(self):
        pipeline = CountingPipeline(PrivacyDeniedError(), 4)
        svc = CachedMemberCountService(pipeline, MemberCountCache(30))
        with pytest.raises(PrivacyDeniedError):
            await svc.member_count("!abc", "matrix.org")
        assert await svc.member_count("!abc", "matrix.org") == 4
        assert len(pipeline.calls) == 2

    @pytest.mark.anyio
    async def test_rooms_cached_independently(self):
        pipeline = CountingPipeline(1, 2)
        svc = CachedMemberCountService(pipeline, MemberCountCache(30))
        assert await svc.member_count("!a", "matrix.org") == 1
        assert await svc.member_count("!b", "matrix.org") == 2
