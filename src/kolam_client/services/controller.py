"""Generation session controller facade.

Wires one request executor, connectivity monitor, orchestrator and event
registry together and manages their lifecycle:

    async with KolamController(settings) as controller:
        controller.events.on_generation_result(show)
        await controller.submit({"ND": 15, "sigmaref": 0.6, ...})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx

from kolam_client.core.config import Settings, get_settings
from kolam_client.schemas.generation import GenerationParameters, GenerationResult
from kolam_client.schemas.status import ClassifiedError, ConnectivityState
from kolam_client.services.connectivity import ConnectivityMonitor
from kolam_client.services.events import ControllerEvents
from kolam_client.services.orchestrator import GenerationOrchestrator
from kolam_client.services.request_executor import TimeoutBoundRequestExecutor


logger = logging.getLogger(__name__)


class KolamController:
    """Client-side controller for the remote kolam generation service.

    Args:
        settings: Client settings; defaults to `get_settings()`.
        transport: Optional httpx transport shared by health and generate calls.
        events: Optional pre-populated event registry.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        events: ControllerEvents | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.events = events or ControllerEvents()
        self.executor = TimeoutBoundRequestExecutor(
            self.settings.KOLAM_API_BASE_URL,
            user_agent=self.settings.USER_AGENT,
            transport=transport,
        )
        self.monitor = ConnectivityMonitor(
            self.executor,
            self.events,
            health_endpoint=self.settings.HEALTH_ENDPOINT,
            timeout_ms=self.settings.HEALTH_CHECK_TIMEOUT_MS,
        )
        self.orchestrator = GenerationOrchestrator(
            self.executor, self.monitor, self.events, self.settings
        )

    @property
    def state(self) -> ConnectivityState:
        return self.monitor.current_state

    @property
    def is_generating(self) -> bool:
        return self.orchestrator.is_generating

    @property
    def current_result(self) -> GenerationResult | None:
        return self.orchestrator.current_result

    async def start(self) -> ConnectivityState:
        """Run the initial health probe and start periodic probing if configured."""
        logger.info(f"Kolam controller starting against {self.executor.base_url}")
        state = await self.monitor.probe()
        interval = self.settings.HEALTH_PROBE_INTERVAL_SECONDS
        if interval > 0:
            self.monitor.start_periodic(interval)
        return state

    async def probe(self) -> ConnectivityState:
        return await self.monitor.probe()

    async def submit(
        self, parameters: GenerationParameters | Mapping[str, Any]
    ) -> GenerationResult | ClassifiedError | None:
        return await self.orchestrator.submit(parameters)

    def reset(self) -> None:
        self.orchestrator.reset()

    def export_current(self, path: str | Path) -> Path:
        return self.orchestrator.export_current(path)

    async def aclose(self) -> None:
        await self.monitor.aclose()
        await self.executor.aclose()

    async def __aenter__(self) -> KolamController:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
