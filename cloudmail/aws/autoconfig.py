"""
Region and credentials autoconfigurations.

Both register a shared provider that service autoconfigurations consume.
A provider already present in the container (registered by the
application) is left untouched.

Configuration keys::

    cloud.aws.region.static
    cloud.aws.credentials.access-key
    cloud.aws.credentials.secret-key
    cloud.aws.credentials.session-token
    cloud.aws.credentials.profile.name
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..di import ValueProvider
from ..faults import InvalidConfigError
from .credentials import (
    CredentialsProvider,
    DefaultCredentialsProvider,
    ProfileCredentialsProvider,
    StaticCredentialsProvider,
)
from .region import DefaultRegionProvider, RegionProvider, StaticRegionProvider

if TYPE_CHECKING:
    from ..context import ApplicationContext

logger = logging.getLogger("cloudmail.aws.autoconfig")

REGION_PREFIX = "cloud.aws.region"
CREDENTIALS_PREFIX = "cloud.aws.credentials"


class RegionProviderAutoConfiguration:
    """Registers the shared ``RegionProvider``."""

    name = "region-provider"

    async def apply(self, context: "ApplicationContext") -> None:
        container = context.container
        if container.is_registered(RegionProvider):
            logger.debug("RegionProvider already registered, keeping it")
            return

        static = context.config.get(f"{REGION_PREFIX}.static")
        profile = context.config.get(f"{CREDENTIALS_PREFIX}.profile.name")
        if static is not None and not isinstance(static, str):
            raise InvalidConfigError(
                f"{REGION_PREFIX}.static must be a string, got {static!r}",
                key=f"{REGION_PREFIX}.static",
                value=static,
            )

        provider: RegionProvider
        if static:
            provider = StaticRegionProvider(static)
        else:
            provider = DefaultRegionProvider(profile_name=profile)

        container.register(ValueProvider(
            value=provider,
            token=RegionProvider,
            name="region_provider",
        ))
        logger.debug(f"Registered {provider!r}")


class CredentialsProviderAutoConfiguration:
    """Registers the shared ``CredentialsProvider``."""

    name = "credentials-provider"

    async def apply(self, context: "ApplicationContext") -> None:
        container = context.container
        if container.is_registered(CredentialsProvider):
            logger.debug("CredentialsProvider already registered, keeping it")
            return

        section = context.config.section(CREDENTIALS_PREFIX)
        access_key = section.get("access_key")
        secret_key = section.get("secret_key")
        profile_section = section.get("profile")
        if profile_section is not None and not isinstance(profile_section, dict):
            raise InvalidConfigError(
                f"{CREDENTIALS_PREFIX}.profile must be a section with a name, "
                f"got {profile_section!r}; use {CREDENTIALS_PREFIX}.profile.name",
                key=f"{CREDENTIALS_PREFIX}.profile",
                value=profile_section,
            )
        profile = (profile_section or {}).get("name")

        provider: CredentialsProvider
        if access_key or secret_key:
            if not (access_key and secret_key):
                raise InvalidConfigError(
                    "Both access-key and secret-key must be set for static credentials",
                    key=f"{CREDENTIALS_PREFIX}.access-key",
                )
            provider = StaticCredentialsProvider(
                str(access_key),
                str(secret_key),
                section.get("session_token"),
            )
        elif profile:
            provider = ProfileCredentialsProvider(profile)
        else:
            provider = DefaultCredentialsProvider()

        container.register(ValueProvider(
            value=provider,
            token=CredentialsProvider,
            name="credentials_provider",
        ))
        logger.debug(f"Registered {provider!r}")
