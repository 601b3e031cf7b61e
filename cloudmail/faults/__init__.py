"""
Faults - typed fault signals.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- InvalidConfigError: Fatal configuration fault raised at startup
"""

from .core import (
    Fault,
    FaultDomain,
    InvalidConfigError,
    Severity,
)

__all__ = [
    "Fault",
    "FaultDomain",
    "InvalidConfigError",
    "Severity",
]
