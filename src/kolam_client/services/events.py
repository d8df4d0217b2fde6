"""Collaborator-facing controller events.

The controller never shares mutable status with its collaborator; it announces
changes through the four events registered here.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from kolam_client.schemas.generation import GenerationResult
from kolam_client.schemas.status import ClassifiedError, ConnectivityState


logger = logging.getLogger(__name__)

StatusListener = Callable[[ConnectivityState], Any]
StartListener = Callable[[], Any]
ResultListener = Callable[[GenerationResult], Any]
ErrorListener = Callable[[ClassifiedError], Any]


def _require_sync(listener: Callable[..., Any]) -> None:
    if inspect.iscoroutinefunction(listener) or inspect.iscoroutinefunction(
        getattr(listener, "__call__", None)
    ):
        raise TypeError(
            f"Listener {listener!r} is a coroutine function; listeners must be sync"
        )


class ControllerEvents:
    """Observer registry for `on_status_change`, `on_generation_start`,
    `on_generation_result` and `on_generation_error`.

    Listeners are plain callables invoked synchronously in registration order;
    coroutine functions are refused at registration since nothing awaits them.
    A listener that raises is logged and skipped so one faulty collaborator
    cannot break the controller or the remaining listeners.
    """

    def __init__(self) -> None:
        self._status: list[StatusListener] = []
        self._start: list[StartListener] = []
        self._result: list[ResultListener] = []
        self._error: list[ErrorListener] = []

    def on_status_change(self, listener: StatusListener) -> StatusListener:
        _require_sync(listener)
        self._status.append(listener)
        return listener

    def on_generation_start(self, listener: StartListener) -> StartListener:
        _require_sync(listener)
        self._start.append(listener)
        return listener

    def on_generation_result(self, listener: ResultListener) -> ResultListener:
        _require_sync(listener)
        self._result.append(listener)
        return listener

    def on_generation_error(self, listener: ErrorListener) -> ErrorListener:
        _require_sync(listener)
        self._error.append(listener)
        return listener

    def emit_status_change(self, state: ConnectivityState) -> None:
        self._dispatch("status_change", self._status, state)

    def emit_generation_start(self) -> None:
        self._dispatch("generation_start", self._start)

    def emit_generation_result(self, result: GenerationResult) -> None:
        self._dispatch("generation_result", self._result, result)

    def emit_generation_error(self, error: ClassifiedError) -> None:
        self._dispatch("generation_error", self._error, error)

    def _dispatch(
        self, event: str, listeners: list[Callable[..., Any]], *args: Any
    ) -> None:
        for listener in list(listeners):
            try:
                outcome = listener(*args)
            except Exception:
                logger.exception(f"Listener for {event} raised; continuing")
                continue
            if inspect.iscoroutine(outcome):
                outcome.close()
                logger.warning(f"Listener for {event} returned an unawaited coroutine")
