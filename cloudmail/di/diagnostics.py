"""
DI Diagnostics - Observability and event tracking for DI containers.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("cloudmail.di.diagnostics")


class DIEventType(Enum):
    """Types of DI events."""
    REGISTRATION = "registration"
    RESOLUTION_SUCCESS = "resolution_success"
    RESOLUTION_FAILURE = "resolution_failure"
    LIFECYCLE_SHUTDOWN = "lifecycle_shutdown"


@dataclasses.dataclass
class DIEvent:
    """A diagnostic event in the DI system."""
    type: DIEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    token: Optional[Any] = None
    tag: Optional[str] = None
    provider_name: Optional[str] = None
    error: Optional[Exception] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for DI diagnostic listeners."""
    def on_event(self, event: DIEvent) -> None:
        """Called when a DI event occurs."""
        ...


class LoggingDiagnosticListener:
    """
    Writes container events to ``cloudmail.di.diagnostics``.

    Attached by ``ApplicationContext``; failures are logged at ERROR with
    the resolution stack, everything else at ``log_level``.
    """
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: DIEvent) -> None:
        if event.type == DIEventType.RESOLUTION_FAILURE:
            stack = " -> ".join(event.metadata.get("stack", [])) or event.token
            logger.error(f"Failed to resolve {stack} ({event.provider_name}): {event.error}")
        elif event.type == DIEventType.REGISTRATION:
            tag = f" #{event.tag}" if event.tag else ""
            logger.log(self.log_level, f"Registered '{event.provider_name}' for {event.token}{tag}")
        elif event.type == DIEventType.RESOLUTION_SUCCESS:
            logger.log(self.log_level, f"Resolved {event.token} via '{event.provider_name}'")
        elif event.type == DIEventType.LIFECYCLE_SHUTDOWN:
            logger.log(self.log_level, f"Container shut down (scope={event.metadata.get('scope')})")


class RecordingDiagnosticListener:
    """Keeps every event in memory; used by tests."""
    def __init__(self):
        self.events: List[DIEvent] = []

    def on_event(self, event: DIEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: DIEventType) -> List[DIEvent]:
        return [e for e in self.events if e.type == event_type]


class DIDiagnostics:
    """Coordinator for DI diagnostic listeners."""
    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def emit(self, event_type: DIEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        event = DIEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # Listener failures never reach the caller
                logger.error(f"Diagnostic listener error: {e}")
