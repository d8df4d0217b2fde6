"""Init file for controller services."""

from .connectivity import ConnectivityMonitor
from .controller import KolamController
from .error_classifier import classify, classify_error
from .events import ControllerEvents
from .orchestrator import GenerationOrchestrator, GenerationSession
from .request_executor import RequestDescriptor, TimeoutBoundRequestExecutor


__all__ = [
    "ConnectivityMonitor",
    "ControllerEvents",
    "GenerationOrchestrator",
    "GenerationSession",
    "KolamController",
    "RequestDescriptor",
    "TimeoutBoundRequestExecutor",
    "classify",
    "classify_error",
]
