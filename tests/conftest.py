"""Shared test fixtures for pytest.

ENVIRONMENT is forced to "test" before any settings are built so no `.env.*`
file is consulted during the run.
"""

import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest


os.environ["ENVIRONMENT"] = "test"

from kolam_client.core.config import Settings, get_settings
from kolam_client.schemas.generation import GenerationResult
from kolam_client.schemas.status import ClassifiedError, ConnectivityState
from kolam_client.services.events import ControllerEvents


BASE_URL = "https://kolam.test"


class EventRecorder:
    """Collects every controller event in arrival order."""

    def __init__(self, events: ControllerEvents) -> None:
        self.log: list[tuple[str, Any]] = []
        events.on_status_change(lambda s: self.log.append(("status", s)))
        events.on_generation_start(lambda: self.log.append(("start", None)))
        events.on_generation_result(lambda r: self.log.append(("result", r)))
        events.on_generation_error(lambda e: self.log.append(("error", e)))

    @property
    def statuses(self) -> list[ConnectivityState]:
        return [payload for name, payload in self.log if name == "status"]

    @property
    def results(self) -> list[GenerationResult]:
        return [payload for name, payload in self.log if name == "result"]

    @property
    def errors(self) -> list[ClassifiedError]:
        return [payload for name, payload in self.log if name == "error"]

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.log]


def success_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": True,
        "image": "data:image/png;base64,aGVsbG8=",
        "boundary_type": "diamond",
        "path_count": 7,
        "is_one_stroke": True,
        "generation_time": 3.2,
        "message": "Kolam ready",
    }
    payload.update(overrides)
    return payload


def valid_params(**overrides: Any) -> dict[str, Any]:
    params: dict[str, Any] = {
        "ND": 15,
        "sigmaref": 0.6,
        "boundary_type": "diamond",
        "theme": "light",
        "kolam_color": "#e377c2",
        "one_stroke": False,
    }
    params.update(overrides)
    return params


Handler = Callable[[httpx.Request], Any]


class RoutingHandler:
    """MockTransport handler that routes by path and records every request."""

    def __init__(
        self,
        *,
        health: Handler | None = None,
        generate: Handler | None = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self._health = health or (
            lambda request: httpx.Response(200, json={"status": "healthy"})
        )
        self._generate = generate or (
            lambda request: httpx.Response(200, json=success_payload())
        )

    def generate_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/generate"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        is_generate = request.url.path == "/api/generate"
        handler = self._generate if is_generate else self._health
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        KOLAM_API_BASE_URL=BASE_URL,
        HEALTH_CHECK_TIMEOUT_MS=1_000,
        REGULAR_GENERATION_TIMEOUT_MS=2_000,
        ONE_STROKE_GENERATION_TIMEOUT_MS=5_000,
    )


@pytest.fixture
def events() -> ControllerEvents:
    return ControllerEvents()


@pytest.fixture
def recorder(events: ControllerEvents) -> EventRecorder:
    return EventRecorder(events)
