"""
Region providers - where AWS clients get their region from.

``StaticRegionProvider`` returns a configured value;
``DefaultRegionProvider`` follows botocore's own resolution chain
(``AWS_REGION`` / ``AWS_DEFAULT_REGION`` / shared config profile).
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from ..faults import InvalidConfigError

logger = logging.getLogger("cloudmail.aws.region")


@runtime_checkable
class RegionProvider(Protocol):
    """Resolves the AWS region name for client construction."""

    def get_region(self) -> Optional[str]:
        ...


class StaticRegionProvider:
    """Always returns the configured region."""

    def __init__(self, region: str):
        self.region = region

    def get_region(self) -> Optional[str]:
        return self.region

    def __repr__(self) -> str:
        return f"StaticRegionProvider(region={self.region!r})"


class DefaultRegionProvider:
    """
    Region from botocore's default chain.

    Resolved once, on first call.
    """

    def __init__(self, profile_name: Optional[str] = None):
        self.profile_name = profile_name
        self._region: Optional[str] = None
        self._resolved = False

    def get_region(self) -> Optional[str]:
        if not self._resolved:
            import botocore.session
            from botocore.exceptions import BotoCoreError

            session = botocore.session.Session(profile=self.profile_name)
            try:
                self._region = session.get_config_variable("region")
            except BotoCoreError as e:
                key = (
                    "cloud.aws.credentials.profile.name" if self.profile_name
                    else "cloud.aws.region.static"
                )
                raise InvalidConfigError(
                    f"Could not resolve the default AWS region: {e}",
                    key=key,
                    value=self.profile_name,
                ) from e
            self._resolved = True
            logger.debug(f"Default region chain resolved to {self._region!r}")
        return self._region

    def __repr__(self) -> str:
        return f"DefaultRegionProvider(profile={self.profile_name!r})"
