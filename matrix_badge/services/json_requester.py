# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: JSON requester — the single outbound HTTP seam.
Sends one request through the shared httpx client, maps known status codes
to typed errors, and validates the body against a pydantic schema.
Timeouts and connection retries belong to the httpx transport.
"""

import time
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from matrix_badge.core.errors import (
    MatrixBadgeError,
    SchemaValidationError,
    UpstreamError,
    UpstreamUnreachableError,
)
from matrix_badge.core.logging import get_logger
from matrix_badge.metrics import UPSTREAM_LATENCY, UPSTREAM_REQUESTS

logger = get_logger(__name__)

ErrorMap = dict[int, type[MatrixBadgeError]]


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


class JsonRequester:
    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def request(
        self,
        url: str,
        schema: Any,
        method: str = "GET",
        params: Optional[dict[str, str]] = None,
        json_body: Optional[dict[str, Any]] = None,
        error_map: Optional[ErrorMap] = None,
        endpoint: str = "other",
    ) -> Any:
        """Return the validated body of ``method url`` parsed as ``schema``."""
        start = time.monotonic()
        try:
            resp = await self._client.request(
                method=method, url=url, params=params, json=json_body,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, status="unreachable").inc()
            logger.warning("Upstream unreachable: %s %s (%s)", method, _redact(url), exc)
            raise UpstreamUnreachableError(detail=str(exc)) from exc
        finally:
            UPSTREAM_LATENCY.labels(endpoint=endpoint).observe(time.monotonic() - start)

        UPSTREAM_REQUESTS.labels(endpoint=endpoint, status=str(resp.status_code)).inc()

        error_cls = (error_map or {}).get(resp.status_code)
        if error_cls is not None:
            raise error_cls(detail=f"HTTP {resp.status_code}")
        if not resp.is_success:
            raise UpstreamError(resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise SchemaValidationError(detail="unparseable json response") from exc

        try:
            return _adapter(schema).validate_python(payload)
        except ValidationError as exc:
            raise SchemaValidationError(detail=f"{exc.error_count()} validation error(s)") from exc


def _redact(url: str) -> str:
    return url.split("?", 1)[0]
