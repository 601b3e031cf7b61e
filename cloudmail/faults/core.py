"""
Faults - structured errors raised by cloudmail.

A fault is an exception that also carries a stable code, the domain it
belongs to, a severity and whether retrying can help. The CLI prints
``to_dict()`` when run with ``--verbose``.

Domains:
- ``FaultDomain.CONFIG``: startup configuration (``InvalidConfigError``)
- ``FaultDomain.MAIL``: sending (registered by ``cloudmail.mail.faults``)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """How bad a fault is; FATAL aborts context refresh."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Functional area a fault belongs to.

    Domains are attached as class attributes (``FaultDomain.CONFIG``) so
    subsystems can add their own without editing this module.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain({self.name!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return self.name == other

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")


class Fault(Exception):
    """
    Base class for cloudmail faults.

    Example::

        raise Fault(
            "REGION_MISSING",
            "No AWS region could be resolved",
            domain=FaultDomain.CONFIG,
            severity=Severity.FATAL,
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain,
        severity: Severity = Severity.ERROR,
        retryable: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.domain = domain
        self.severity = severity
        self.retryable = retryable
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, domain={self.domain.name}, "
            f"severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.name,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "metadata": self.metadata,
        }


class InvalidConfigError(Fault):
    """
    A configuration value could not be accepted.

    Always fatal: raised while the application context is being built and
    aborts startup. Never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        value: Any = None,
    ):
        self.key = key
        self.value = value
        super().__init__(
            "INVALID_CONFIG",
            message,
            domain=FaultDomain.CONFIG,
            severity=Severity.FATAL,
            retryable=False,
            metadata={"key": key, "value": value},
        )
