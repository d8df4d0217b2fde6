"""Failure classification for user-facing messaging.

The mapping is purely advisory: it decides how a failure is explained, never
what the controller does next.
"""

from __future__ import annotations

from pydantic import ValidationError

from kolam_client.core.exceptions import (
    NameResolutionFailure,
    NetworkFailure,
    ParameterValidationError,
    RequestTimeout,
    ServiceNotReadyError,
    ServiceRejectedError,
    UnexpectedStatusError,
)
from kolam_client.schemas.status import ClassifiedError, ErrorKind


# Checked against the failure's MRO, most specific class first
ERROR_KINDS: dict[type[BaseException], ErrorKind] = {
    RequestTimeout: ErrorKind.TIMEOUT,
    TimeoutError: ErrorKind.TIMEOUT,
    NameResolutionFailure: ErrorKind.NAME_RESOLUTION,
    NetworkFailure: ErrorKind.NETWORK,
    UnexpectedStatusError: ErrorKind.NETWORK,
    ParameterValidationError: ErrorKind.VALIDATION,
    ValidationError: ErrorKind.VALIDATION,
    ServiceRejectedError: ErrorKind.SERVICE_REJECTED,
    ServiceNotReadyError: ErrorKind.SERVICE_REJECTED,
}


def classify(failure: BaseException) -> ErrorKind:
    """Map a failure signal to its error kind."""
    for cls in type(failure).__mro__:
        kind = ERROR_KINDS.get(cls)
        if kind is not None:
            return kind
    return ErrorKind.UNKNOWN


def _raw_message(failure: BaseException) -> str:
    message = getattr(failure, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(failure) or failure.__class__.__name__


def classify_error(failure: BaseException) -> ClassifiedError:
    """Classify a failure and keep its original message."""
    return ClassifiedError(kind=classify(failure), raw_message=_raw_message(failure))
