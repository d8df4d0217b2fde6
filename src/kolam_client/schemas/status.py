"""Connectivity and error status schemas.

These are the values the controller hands to its collaborator: the current
connectivity state and the classified error of a failed attempt.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ConnectivityState(StrEnum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ErrorKind(StrEnum):
    TIMEOUT = "timeout"
    NAME_RESOLUTION = "name_resolution"
    NETWORK = "network"
    VALIDATION = "validation"
    SERVICE_REJECTED = "service_rejected"
    UNKNOWN = "unknown"


# Generation-specific advice shown instead of the raw message
GENERATION_ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: (
        "Generation timeout - try smaller parameters or disable one-stroke"
    ),
    ErrorKind.NAME_RESOLUTION: "Lost connection to backend - please refresh page",
}

# Short labels for a failed health probe
CONNECTIVITY_ERROR_LABELS: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Connection Timeout",
    ErrorKind.NAME_RESOLUTION: "DNS Error",
}


def connectivity_label(kind: ErrorKind | None) -> str:
    """Label a health probe failure for a status indicator."""
    if kind is None:
        return "Connected"
    return CONNECTIVITY_ERROR_LABELS.get(kind, "Network Error")


class ClassifiedError(BaseModel):
    """A failed attempt, labelled for user-facing messaging.

    Attributes:
        kind: Taxonomy bucket chosen by the error classifier.
        raw_message: The underlying failure message, unmodified.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    raw_message: str

    @property
    def user_message(self) -> str:
        return GENERATION_ERROR_MESSAGES.get(self.kind, self.raw_message)
