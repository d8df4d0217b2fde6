"""Domain exceptions for the kolam generation client.

Transport failures are raised as distinct variants at the request boundary so
callers (and the error classifier) branch on exception type instead of
inspecting message text. Each exception carries a stable `error_code` for log
tagging.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, eq=False)
class KolamClientError(Exception):
    """Base class for kolam client domain errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class TransportFailure(KolamClientError):
    """A single outbound request did not produce a usable response."""


class RequestTimeout(TransportFailure):
    def __init__(self, message: str = "Request deadline elapsed") -> None:
        super().__init__(message=message, error_code="timeout")


class NameResolutionFailure(TransportFailure):
    def __init__(self, message: str = "Could not resolve service host") -> None:
        super().__init__(message=message, error_code="name_resolution")


class NetworkFailure(TransportFailure):
    def __init__(self, message: str = "Network request failed") -> None:
        super().__init__(message=message, error_code="network")


class UnexpectedStatusError(TransportFailure):
    """Non-2xx status; always a transport failure regardless of the body."""

    def __init__(self, status_code: int, body_snippet: str = "") -> None:
        message = f"HTTP {status_code}"
        if body_snippet:
            message = f"{message}: {body_snippet}"
        super().__init__(message=message, error_code="http_status")
        self.status_code = status_code


class MalformedResponseError(KolamClientError):
    def __init__(self, message: str = "Response body could not be decoded") -> None:
        super().__init__(message=message, error_code="malformed_response")


class ParameterValidationError(KolamClientError):
    def __init__(self, message: str = "Invalid generation parameters") -> None:
        super().__init__(message=message, error_code="invalid_parameters")


class ServiceRejectedError(KolamClientError):
    """The service answered with ``success: false``."""

    def __init__(self, message: str = "Generation failed") -> None:
        super().__init__(message=message, error_code="service_rejected")


class ServiceNotReadyError(KolamClientError):
    def __init__(
        self, message: str = "Backend not connected. Please wait for connection."
    ) -> None:
        super().__init__(message=message, error_code="not_ready")


class NoArtifactError(KolamClientError):
    def __init__(
        self, message: str = "No kolam to export. Please generate one first."
    ) -> None:
        super().__init__(message=message, error_code="no_artifact")
