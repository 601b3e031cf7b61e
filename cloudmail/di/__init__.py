"""
Dependency Injection

Async container with explicit registration, named providers, aliasing and
deterministic disposal. Autoconfigurations register into a ``Container``
while the application context is refreshed.
"""

from .core import (
    Container,
    Provider,
    ProviderMeta,
    ResolveCtx,
    token_to_key,
)

from .providers import (
    AliasProvider,
    ValueProvider,
)

from .diagnostics import (
    DIDiagnostics,
    DIEvent,
    DIEventType,
    LoggingDiagnosticListener,
    RecordingDiagnosticListener,
)

from .lifecycle import Lifecycle

from .errors import (
    AmbiguousProviderError,
    DIError,
    DuplicateProviderError,
    ProviderNotFoundError,
)

__all__ = [
    # Core types
    "Container",
    "Provider",
    "ProviderMeta",
    "ResolveCtx",
    "token_to_key",

    # Providers
    "AliasProvider",
    "ValueProvider",

    # Diagnostics
    "DIDiagnostics",
    "DIEvent",
    "DIEventType",
    "LoggingDiagnosticListener",
    "RecordingDiagnosticListener",

    # Lifecycle
    "Lifecycle",

    # Errors
    "AmbiguousProviderError",
    "DIError",
    "DuplicateProviderError",
    "ProviderNotFoundError",
]
