"""HTTP access to the external sensor feed."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import httpx

from models.records import FetchOutcome, HttpFailure, NetworkFailure
from services.classifier import classify_body

logger = logging.getLogger(__name__)

_BODY_PREVIEW_CHARS = 200

FEED_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class FeedClient:
    """Performs one GET per call and resolves it to a single outcome.

    Network, HTTP and payload problems are returned as failure outcomes rather
    than raised, so a caller can treat every cycle uniformly.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=FEED_HEADERS,
            follow_redirects=True,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, now: datetime) -> FetchOutcome:
        extra = {"endpoint": self.endpoint_url}
        try:
            response = await self._client.get(self.endpoint_url)
        except httpx.TimeoutException as exc:
            logger.warning("Feed request timed out", extra={**extra, "reason": repr(exc)})
            return NetworkFailure(reason="Request timed out")
        except httpx.HTTPError as exc:
            logger.warning("Feed request failed", extra={**extra, "reason": repr(exc)})
            return NetworkFailure(reason=f"Network error: {exc}")

        logger.info(
            "Feed responded",
            extra={**extra, "status_code": response.status_code},
        )
        if not response.is_success:
            return HttpFailure(
                reason=f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        body = response.text
        logger.debug("Feed body preview: %s", body[:_BODY_PREVIEW_CHARS])
        return classify_body(body, now)
