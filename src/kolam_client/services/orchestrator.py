"""Generation orchestrator.

Turns collaborator input into at most one in-flight generation request and
reports exactly one terminal event per accepted submission.
"""

from __future__ import annotations

import json
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from kolam_client.core.config import Settings
from kolam_client.core.exceptions import (
    MalformedResponseError,
    NoArtifactError,
    ParameterValidationError,
    ServiceNotReadyError,
    ServiceRejectedError,
)
from kolam_client.core.logging import StructuredLogger, set_correlation_id
from kolam_client.schemas.generation import GenerationParameters, GenerationResult
from kolam_client.schemas.status import ClassifiedError
from kolam_client.services.connectivity import ConnectivityMonitor
from kolam_client.services.error_classifier import classify_error
from kolam_client.services.events import ControllerEvents
from kolam_client.services.request_executor import (
    RequestDescriptor,
    TimeoutBoundRequestExecutor,
)


logger = StructuredLogger(__name__)


@dataclass(slots=True)
class GenerationSession:
    """One in-flight submission; unusable once settled."""

    parameters: GenerationParameters
    timeout_ms: int
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.monotonic)
    settled: bool = False

    @property
    def deadline(self) -> float:
        return self.started_at + self.timeout_ms / 1000

    def settle(self) -> None:
        if self.settled:
            raise RuntimeError(f"Generation session {self.session_id} already settled")
        self.settled = True


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "parameters"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


class GenerationOrchestrator:
    """Validates, guards and drives one generation at a time.

    Args:
        executor: Request executor used for the generate call.
        monitor: Connectivity monitor gating submission (read only here).
        events: Registry receiving start/result/error events.
        settings: Endpoint path and the two timeout budgets.
    """

    def __init__(
        self,
        executor: TimeoutBoundRequestExecutor,
        monitor: ConnectivityMonitor,
        events: ControllerEvents,
        settings: Settings,
    ) -> None:
        self._executor = executor
        self._monitor = monitor
        self._events = events
        self._generate_endpoint = settings.GENERATE_ENDPOINT
        self._regular_timeout_ms = settings.REGULAR_GENERATION_TIMEOUT_MS
        self._one_stroke_timeout_ms = settings.ONE_STROKE_GENERATION_TIMEOUT_MS
        self._session: GenerationSession | None = None
        self._current_result: GenerationResult | None = None

    @property
    def is_generating(self) -> bool:
        return self._session is not None

    @property
    def active_session(self) -> GenerationSession | None:
        return self._session

    @property
    def current_result(self) -> GenerationResult | None:
        """Latest successful artifact, kept until replaced or reset."""
        return self._current_result

    def timeout_for(self, parameters: GenerationParameters) -> int:
        if parameters.one_stroke:
            return self._one_stroke_timeout_ms
        return self._regular_timeout_ms

    def reset(self) -> None:
        """Forget the current artifact."""
        self._current_result = None

    async def submit(
        self, parameters: GenerationParameters | Mapping[str, Any]
    ) -> GenerationResult | ClassifiedError | None:
        """Run one generation.

        Returns:
            The new `GenerationResult`, the `ClassifiedError` that was emitted,
            or ``None`` if a generation was already in progress (redundant
            submissions are ignored without any event).
        """
        # Everything up to the first await runs without yielding, so the guard
        # and the session assignment below cannot interleave with another submit.
        if self._session is not None:
            logger.debug("Ignoring submit while a generation is in progress")
            return None

        if not self._monitor.is_connected:
            return self._fail_fast(ServiceNotReadyError())

        try:
            params = self._validate(parameters)
        except ParameterValidationError as e:
            return self._fail_fast(e)

        session = GenerationSession(
            parameters=params, timeout_ms=self.timeout_for(params)
        )
        self._session = session
        set_correlation_id(session.session_id)
        try:
            self._events.emit_generation_start()
            logger.info(
                "Generation started",
                parameters=params.to_request_body(),
                timeout_ms=session.timeout_ms,
            )
            try:
                result = await self._generate(session)
            except Exception as e:
                error = classify_error(e)
                logger.warning(
                    "Generation failed",
                    kind=error.kind.value,
                    error=error.raw_message,
                    elapsed_ms=int((time.monotonic() - session.started_at) * 1000),
                )
                self._events.emit_generation_error(error)
                return error

            self._current_result = result
            logger.info(
                "Generation succeeded",
                path_count=result.path_count,
                is_one_stroke=result.is_one_stroke,
                generation_time=result.elapsed_seconds,
            )
            self._events.emit_generation_result(result)
            return result
        finally:
            session.settle()
            self._session = None
            set_correlation_id(None)

    def _validate(
        self, parameters: GenerationParameters | Mapping[str, Any]
    ) -> GenerationParameters:
        if isinstance(parameters, GenerationParameters):
            return parameters
        try:
            return GenerationParameters.model_validate(dict(parameters))
        except ValidationError as e:
            detail = _format_validation_error(e)
            raise ParameterValidationError(
                f"Invalid generation parameters: {detail}"
            ) from e
        except (TypeError, ValueError) as e:
            raise ParameterValidationError(
                f"Invalid generation parameters: {e}"
            ) from e

    def _fail_fast(self, exc: Exception) -> ClassifiedError:
        error = classify_error(exc)
        logger.warning(
            "Generation rejected", kind=error.kind.value, error=error.raw_message
        )
        self._events.emit_generation_error(error)
        return error

    async def _generate(self, session: GenerationSession) -> GenerationResult:
        request = RequestDescriptor(
            endpoint=self._generate_endpoint,
            method="POST",
            body=session.parameters.to_request_body(),
        )
        response = await self._executor.execute(request, session.timeout_ms)
        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise MalformedResponseError(
                "Generate endpoint returned a non-JSON body"
            ) from e
        if not isinstance(payload, dict):
            raise MalformedResponseError("Generate endpoint returned a non-object body")

        # Only a literal JSON true counts as success
        if payload.get("success") is not True:
            raise ServiceRejectedError(str(payload.get("error") or "Generation failed"))

        try:
            return GenerationResult.from_response(payload)
        except ValidationError as e:
            detail = _format_validation_error(e)
            raise MalformedResponseError(
                f"Generate response is missing result fields: {detail}"
            ) from e

    def export_current(self, path: str | Path) -> Path:
        """Write the current artifact's decoded image bytes to `path`.

        Raises:
            NoArtifactError: No generation has succeeded since the last reset.
            ValueError: The artifact payload is not a base64 data URI.
        """
        if self._current_result is None:
            raise NoArtifactError()
        target = Path(path)
        target.write_bytes(self._current_result.image_bytes())
        return target
