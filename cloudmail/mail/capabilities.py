"""
Capability detection - which optional libraries are importable.

Detection runs once at startup. ``hidden`` names modules to treat as
absent, which is how tests exercise the "library missing" branches
without uninstalling anything.
"""

from __future__ import annotations

import importlib.util
import logging
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger("cloudmail.mail.capabilities")

#: Module providing the SES client.
CLOUD_MAIL_MODULE = "boto3"

#: Module providing MIME message construction.
RICH_MAIL_MODULE = "email.message"


@dataclass(frozen=True)
class Capabilities:
    """Boolean facts about optional runtime libraries."""

    cloud_mail: bool
    rich_mail: bool

    @classmethod
    def all(cls) -> "Capabilities":
        return cls(cloud_mail=True, rich_mail=True)


def _is_hidden(module: str, hidden: frozenset[str]) -> bool:
    # hiding "email" also hides "email.message"
    return any(module == h or module.startswith(f"{h}.") for h in hidden)


def module_available(module: str, hidden: Iterable[str] = ()) -> bool:
    """True when ``module`` can be imported and is not hidden."""
    hidden_set = frozenset(hidden)
    if _is_hidden(module, hidden_set):
        return False
    try:
        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


class CapabilityDetector:
    """Computes ``Capabilities`` from the import system."""

    def __init__(
        self,
        cloud_mail_module: str = CLOUD_MAIL_MODULE,
        rich_mail_module: str = RICH_MAIL_MODULE,
    ):
        self.cloud_mail_module = cloud_mail_module
        self.rich_mail_module = rich_mail_module

    def detect(self, hidden: Iterable[str] = ()) -> Capabilities:
        hidden = frozenset(hidden)
        capabilities = Capabilities(
            cloud_mail=module_available(self.cloud_mail_module, hidden),
            rich_mail=module_available(self.rich_mail_module, hidden),
        )
        logger.debug(f"Detected {capabilities} (hidden={sorted(hidden)})")
        return capabilities


def detect(hidden: Iterable[str] = ()) -> Capabilities:
    """Detect with the default module names."""
    return CapabilityDetector().detect(hidden)
