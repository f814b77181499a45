# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared fixtures — a scripted Matrix homeserver behind httpx.MockTransport
and an in-memory SRV lookup, so no test touches the network or DNS.
"""

from typing import Any, Optional

import httpx
import pytest

from matrix_badge.core.errors import DiscoveryInfraError
from matrix_badge.models.domain import DiscoveryResult, ServiceRecord
from matrix_badge.services.json_requester import JsonRequester


class FakeHomeserver:
    """Routes keyed by "METHOD https://host[:port]/path[?kind=guest]"."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, tuple[int, Any, Optional[bytes], Optional[type]]] = {}

    def on(
        self,
        method: str,
        url: str,
        status: int = 200,
        json: Any = None,
        content: Optional[bytes] = None,
        error: Optional[type] = None,
    ) -> None:
        self._routes[f"{method} {url}"] = (status, json, content, error)

    @staticmethod
    def route_key(request: httpx.Request) -> str:
        netloc = request.url.netloc.decode("ascii")
        key = f"{request.method} {request.url.scheme}://{netloc}{request.url.path}"
        kind = request.url.params.get("kind")
        if kind:
            key += f"?kind={kind}"
        return key

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get(self.route_key(request))
        if route is None:
            return httpx.Response(404, json={"errcode": "M_UNRECOGNIZED"})
        status, body, content, error = route
        if error is not None:
            raise error("simulated transport failure", request=request)
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=body)

    @property
    def calls(self) -> list[str]:
        return [self.route_key(r) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


class FakeSrvLookup:
    """Stands in for SrvLookup; records every queried name."""

    def __init__(self) -> None:
        self.queries: list[str] = []
        self.result = DiscoveryResult.not_found()
        self.error: Optional[Exception] = None

    def returns(self, *targets: str) -> None:
        self.result = DiscoveryResult.found([ServiceRecord(target=t) for t in targets])

    def fails(self) -> None:
        self.error = DiscoveryInfraError(detail="SERVFAIL")

    async def lookup(self, service_prefix: str, host: str) -> DiscoveryResult:
        self.queries.append(f"{service_prefix}{host}")
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def homeserver() -> FakeHomeserver:
    return FakeHomeserver()


@pytest.fixture
def srv_lookup() -> FakeSrvLookup:
    return FakeSrvLookup()


@pytest.fixture
def requester(homeserver: FakeHomeserver) -> JsonRequester:
    return JsonRequester(homeserver.client())
