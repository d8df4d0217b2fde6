"""Connectivity monitor for the remote generation service.

Owns the `ConnectivityState` value. Probes are deduplicated: while one is in
flight, further `probe()` calls await the same outcome instead of issuing a
second health request. Periodic probing runs on an APScheduler interval job.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging

from apscheduler.schedulers.asyncio import (  # type: ignore[import-untyped]
    AsyncIOScheduler,
)
from apscheduler.triggers.interval import (  # type: ignore[import-untyped]
    IntervalTrigger,
)

from kolam_client.core.exceptions import MalformedResponseError
from kolam_client.schemas.status import ConnectivityState, ErrorKind
from kolam_client.services.error_classifier import classify
from kolam_client.services.events import ControllerEvents
from kolam_client.services.request_executor import (
    RequestDescriptor,
    TimeoutBoundRequestExecutor,
)


logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """Tri-state health tracker (plus the initial `UNKNOWN`).

    Args:
        executor: Request executor shared with the orchestrator.
        events: Registry that receives every state transition.
        health_endpoint: Health path relative to the executor's base URL.
        timeout_ms: Deadline for one health request.
    """

    def __init__(
        self,
        executor: TimeoutBoundRequestExecutor,
        events: ControllerEvents,
        *,
        health_endpoint: str = "/api/health",
        timeout_ms: int = 10_000,
    ) -> None:
        self._executor = executor
        self._events = events
        self._request = RequestDescriptor(endpoint=health_endpoint, method="GET")
        self._timeout_ms = timeout_ms
        self._state = ConnectivityState.UNKNOWN
        self._inflight: asyncio.Task[ConnectivityState] | None = None
        self._scheduler: AsyncIOScheduler | None = None
        self.last_failure_kind: ErrorKind | None = None
        self.last_failure_message: str | None = None
        self.last_health_payload: object | None = None

    @property
    def current_state(self) -> ConnectivityState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectivityState.CONNECTED

    def _transition(self, state: ConnectivityState) -> None:
        self._state = state
        logger.info(f"Connectivity state -> {state.value}")
        self._events.emit_status_change(state)

    async def probe(self) -> ConnectivityState:
        """Check service health and return the resulting state.

        A call made while a probe is already running returns that probe's
        outcome without issuing another request.
        """
        if self._inflight is None or self._inflight.done():
            self._transition(ConnectivityState.CHECKING)
            self._inflight = asyncio.create_task(self._run_probe())
        # Shielded so a cancelled caller does not abort the shared probe
        return await asyncio.shield(self._inflight)

    async def _run_probe(self) -> ConnectivityState:
        url = self._executor.url_for(self._request.endpoint)
        logger.debug(f"Probing service health at {url}")
        try:
            response = await self._executor.execute(self._request, self._timeout_ms)
            try:
                payload = response.json()
            except json.JSONDecodeError as e:
                raise MalformedResponseError(
                    "Health endpoint returned a non-JSON body"
                ) from e
        except Exception as e:
            self.last_failure_kind = classify(e)
            self.last_failure_message = getattr(e, "message", None) or str(e)
            logger.warning(
                f"Health probe failed ({self.last_failure_kind.value}): "
                f"{self.last_failure_message}"
            )
            self._transition(ConnectivityState.DISCONNECTED)
            return self._state

        self.last_failure_kind = None
        self.last_failure_message = None
        self.last_health_payload = payload
        self._transition(ConnectivityState.CONNECTED)
        return self._state

    def start_periodic(self, interval_seconds: int) -> None:
        """Re-probe every `interval_seconds`; must run inside an event loop.

        An interval of 0 turns periodic probing off.
        """
        if interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative")
        self.stop_periodic()
        if interval_seconds == 0:
            return
        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            self.probe,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id="kolam_health_probe",
            name="Kolam service health probe",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(f"Periodic health probing every {interval_seconds}s")

    def stop_periodic(self) -> None:
        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Periodic health probing stopped")
        self._scheduler = None

    @property
    def is_periodic(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def aclose(self) -> None:
        """Stop periodic probing and cancel any probe still in flight.

        A cancelled probe announces no transition, so no status change is
        emitted after shutdown.
        """
        self.stop_periodic()
        inflight, self._inflight = self._inflight, None
        if inflight is not None and not inflight.done():
            inflight.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await inflight
