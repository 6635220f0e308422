"""httpx-based async client for the external cover-document service.

The service is an opaque byte producer: a GET with the CoverRequest as
query parameters returns a ready-made PDF.  Any non-2xx status or failed
httpx call surfaces as DependencyFailure, carrying the service's own error
message when its body provides one.

Transport errors may be retried with tenacity when
``CoverServiceSettings.max_attempts`` is above 1; HTTP error statuses are
never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from doc_assembler.config.settings import CoverServiceSettings
from doc_assembler.cover.schemas import CoverRequest
from doc_assembler.errors import DependencyFailure

logger = logging.getLogger(__name__)

# Anything that turns a CoverRequest into cover PDF bytes
CoverProvider = Callable[[CoverRequest], Awaitable[bytes]]

_GENERIC_FAILURE = "Failed to generate cover document"


def _error_message(response: httpx.Response) -> str:
    """Pull ``message`` or ``error`` from a JSON error body, else a generic text."""
    try:
        body = response.json()
    except ValueError:
        return f"{_GENERIC_FAILURE} (HTTP {response.status_code})"

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return f"{_GENERIC_FAILURE} (HTTP {response.status_code})"


async def fetch_cover(
    request: CoverRequest,
    settings: CoverServiceSettings,
    http_client: httpx.AsyncClient,
) -> bytes:
    """Request a cover PDF for *request*.

    Args:
        request: Descriptive parameters for the cover pages.
        settings: Service location, timeout and attempt limit.
        http_client: An ``httpx.AsyncClient`` whose lifecycle is managed by
            the caller.

    Returns:
        The cover document's PDF bytes.

    Raises:
        DependencyFailure: The call failed in httpx or the service answered
            non-2xx.
    """
    url = settings.base_url.rstrip("/") + settings.cover_path
    logger.info("Requesting cover document for %s", request.file_name)

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, settings.max_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                response = await http_client.get(
                    url,
                    params=request.to_query(),
                    timeout=settings.timeout_seconds,
                )
    except httpx.TransportError as exc:
        logger.error("Cover service unreachable at %s: %s", url, exc)
        raise DependencyFailure(f"Cover service unreachable: {exc}") from exc
    except httpx.HTTPError as exc:
        # Redirect loops and undecodable bodies land here
        logger.error("Cover service request to %s failed: %s", url, exc)
        raise DependencyFailure(f"Cover service request failed: {exc}") from exc

    if not response.is_success:
        message = _error_message(response)
        logger.error(
            "Cover service returned HTTP %d: %s", response.status_code, message
        )
        raise DependencyFailure(message, status_code=response.status_code)

    logger.info("Received cover document (%d bytes)", len(response.content))
    return response.content


class HttpCoverProvider:
    """CoverProvider backed by the HTTP cover service.

    Use as an async context manager to share one connection pool across
    submissions; calling it outside the context opens a client per call.
    """

    def __init__(
        self,
        settings: CoverServiceSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._client = http_client
        self._owns_client = False

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=True,
        )

    async def __aenter__(self) -> HttpCoverProvider:
        if self._client is None:
            self._client = self._new_client()
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def __call__(self, request: CoverRequest) -> bytes:
        if self._client is not None:
            return await fetch_cover(request, self.settings, self._client)
        async with self._new_client() as client:
            return await fetch_cover(request, self.settings, client)
