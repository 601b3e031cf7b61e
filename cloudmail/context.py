"""
Application context - runs autoconfigurations against a DI container.

Usage::

    context = ApplicationContext(
        config=ConfigLoader.load(properties=["cloud.aws.region.static=eu-west-1"]),
        auto_configurations=default_auto_configurations(),
    )
    async with context:
        sender = await context.get(MailSender)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Protocol, Type, TypeVar, runtime_checkable

from .config import ConfigLoader
from .di import Container, LoggingDiagnosticListener
from .mail.capabilities import Capabilities, detect

logger = logging.getLogger("cloudmail.context")

T = TypeVar("T")


@runtime_checkable
class AutoConfiguration(Protocol):
    """A unit of conditional registration applied during refresh."""

    name: str

    async def apply(self, context: "ApplicationContext") -> None:
        ...


class ApplicationContext:
    """
    Holds configuration, capabilities and the container they produce.

    Container events (registrations, resolutions, shutdown) are logged to
    ``cloudmail.di.diagnostics``.

    ``refresh()`` applies each autoconfiguration once, in order. A failure
    aborts the refresh and disposes whatever was registered so far.
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        capabilities: Optional[Capabilities] = None,
        auto_configurations: Iterable[AutoConfiguration] = (),
        container: Optional[Container] = None,
    ):
        self.config = config or ConfigLoader()
        self.capabilities = capabilities if capabilities is not None else detect()
        self.auto_configurations: List[AutoConfiguration] = list(auto_configurations)
        self.container = container or Container(scope="app")
        self.container.diagnostics.add_listener(LoggingDiagnosticListener())
        self._refreshed = False

    @property
    def refreshed(self) -> bool:
        return self._refreshed

    async def refresh(self) -> "ApplicationContext":
        if self._refreshed:
            return self

        for auto_configuration in self.auto_configurations:
            logger.debug(f"Applying {auto_configuration.name}")
            try:
                await auto_configuration.apply(self)
            except Exception:
                logger.error(f"Context refresh failed in {auto_configuration.name}")
                await self.container.shutdown()
                raise

        self._refreshed = True
        logger.info(
            f"Context refreshed: {len(self.auto_configurations)} autoconfigurations, "
            f"providers={sorted(self.container.names())}"
        )
        return self

    # ── Lookups ─────────────────────────────────────────────────────

    def has_bean(self, token: Type | str) -> bool:
        return self.container.count(token) > 0

    def has_single(self, token: Type | str) -> bool:
        return self.container.count(token) == 1

    def has_named(self, name: str) -> bool:
        return self.container.find_by_name(name) is not None

    async def get(self, token: Type[T] | str, *, optional: bool = False) -> T:
        return await self.container.resolve_async(token, optional=optional)

    async def get_named(self, name: str, *, optional: bool = False) -> Any:
        return await self.container.resolve_named(name, optional=optional)

    # ── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        await self.container.shutdown()
        self._refreshed = False

    async def __aenter__(self) -> "ApplicationContext":
        return await self.refresh()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False
