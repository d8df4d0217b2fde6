"""Timeout-bound request executor.

Issues exactly one outbound call per `execute` under an asyncio deadline.
Transport failures leave this module as distinct `TransportFailure` variants so
nothing downstream needs to inspect error message text.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Any

import httpx

from kolam_client.core.exceptions import (
    NameResolutionFailure,
    NetworkFailure,
    RequestTimeout,
    UnexpectedStatusError,
)
from kolam_client.core.urls import build_url


logger = logging.getLogger(__name__)

# Longest response body excerpt carried by UnexpectedStatusError
BODY_SNIPPET_LENGTH = 300


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """What to call: endpoint path relative to the base URL, method and JSON body."""

    endpoint: str
    method: str = "GET"
    body: dict[str, Any] | None = None


def _is_name_resolution_failure(exc: BaseException) -> bool:
    """Walk the exception chain looking for a resolver error."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class TimeoutBoundRequestExecutor:
    """Single-attempt HTTP executor with a per-call deadline.

    The underlying `httpx.AsyncClient` runs with its own timeout disabled so the
    deadline passed to `execute` is the only one in effect.

    Args:
        base_url: Service base URL; endpoints are joined with `build_url`.
        user_agent: Value for the User-Agent header.
        transport: Optional httpx transport (tests inject mock/ASGI transports).
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str = "kolam-client/0.1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            timeout=None,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
        )

    def url_for(self, endpoint: str) -> str:
        return build_url(self.base_url, endpoint)

    async def execute(
        self, request: RequestDescriptor, timeout_ms: int
    ) -> httpx.Response:
        """Perform one bounded call.

        Args:
            request: Endpoint, method and optional JSON body.
            timeout_ms: Deadline for the whole exchange, in milliseconds.

        Returns:
            The 2xx response with its body already read.

        Raises:
            ValueError: If `timeout_ms` is not positive.
            RequestTimeout: The deadline elapsed first; the call was cancelled.
            NameResolutionFailure: The service host could not be resolved.
            NetworkFailure: Any other transport-level failure.
            UnexpectedStatusError: The service answered with a non-2xx status.
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        url = self.url_for(request.endpoint)
        method = request.method.upper()
        try:
            # The deadline is released on every exit path of this block
            async with asyncio.timeout(timeout_ms / 1000):
                response = await self._client.request(method, url, json=request.body)
        except TimeoutError as e:
            logger.warning(f"{method} {url} cancelled after {timeout_ms} ms deadline")
            raise RequestTimeout(
                f"No response from {url} within {timeout_ms} ms"
            ) from e
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"Transport timeout calling {url}: {e}") from e
        except httpx.TransportError as e:
            if _is_name_resolution_failure(e):
                raise NameResolutionFailure(
                    f"Could not resolve host for {url}: {e}"
                ) from e
            raise NetworkFailure(f"Network error calling {url}: {e}") from e

        if not response.is_success:
            raise UnexpectedStatusError(
                response.status_code, response.text[:BODY_SNIPPET_LENGTH]
            )
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
