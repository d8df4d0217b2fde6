"""Client-side generation session controller for a remote kolam service."""

from kolam_client.schemas.generation import (
    BoundaryType,
    GenerationParameters,
    GenerationResult,
    Theme,
    default_color_for,
)
from kolam_client.schemas.status import ClassifiedError, ConnectivityState, ErrorKind
from kolam_client.services.controller import KolamController


__all__ = [
    "BoundaryType",
    "ClassifiedError",
    "ConnectivityState",
    "ErrorKind",
    "GenerationParameters",
    "GenerationResult",
    "KolamController",
    "Theme",
    "default_color_for",
]
