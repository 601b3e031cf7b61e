"""
AWS client construction with inspectable configuration.

Every client built here is wrapped in a ``ConfiguredClient`` that keeps a
``ClientConfiguration`` attribute map next to the boto3 client. Tests and
tooling read the endpoint and whether it was overridden from that map
instead of digging into botocore internals.

Usage::

    factory = ClientFactory(region_provider, credentials_provider)
    ses = factory.create("ses", endpoint="http://localhost:8090")
    ses.endpoint()                 # "http://localhost:8090"
    ses.is_endpoint_overridden()   # True
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from ..faults import InvalidConfigError
from .credentials import CredentialsProvider
from .region import RegionProvider

logger = logging.getLogger("cloudmail.aws.client")

_ENDPOINT_SCHEMES = frozenset({"http", "https"})


class ClientOption(str, Enum):
    """Keys of the client configuration attribute map."""

    SERVICE = "service"
    REGION = "region"
    ENDPOINT = "endpoint"
    ENDPOINT_OVERRIDDEN = "endpoint-overridden"


class ClientConfiguration:
    """Read-only attribute map describing how a client was built."""

    __slots__ = ("_attributes",)

    def __init__(self, attributes: Mapping[ClientOption, Any]):
        self._attributes = MappingProxyType(dict(attributes))

    @property
    def attributes(self) -> Mapping[ClientOption, Any]:
        return self._attributes

    def get(self, option: ClientOption, default: Any = None) -> Any:
        return self._attributes.get(option, default)

    def __repr__(self) -> str:
        items = ", ".join(f"{k.value}={v!r}" for k, v in self._attributes.items())
        return f"ClientConfiguration({items})"


def validate_endpoint(value: Any, key: str = "endpoint") -> str:
    """
    Check that an endpoint override is an absolute http(s) URI.

    Raises:
        InvalidConfigError: The value is not a usable URI
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidConfigError(
            f"Endpoint for '{key}' must be a non-empty URI, got {value!r}",
            key=key,
            value=value,
        )

    value = value.strip()
    try:
        parsed = urlparse(value)
        # .port raises on out-of-range or non-numeric ports
        parsed.port
    except ValueError as e:
        raise InvalidConfigError(
            f"Endpoint for '{key}' is not a valid URI: {value!r} ({e})",
            key=key,
            value=value,
        ) from e

    if parsed.scheme not in _ENDPOINT_SCHEMES or not parsed.hostname:
        raise InvalidConfigError(
            f"Endpoint for '{key}' must be an absolute http(s) URI, got {value!r}",
            key=key,
            value=value,
        )
    return value


class ConfiguredClient:
    """
    A boto3 client plus the configuration it was built with.

    Unknown attributes are forwarded to the boto3 client, so
    ``configured.send_email(...)`` works like ``client.send_email(...)``.
    """

    def __init__(self, client: Any, configuration: ClientConfiguration):
        self.client = client
        self.configuration = configuration

    def endpoint(self) -> str:
        return self.configuration.get(ClientOption.ENDPOINT)

    def is_endpoint_overridden(self) -> bool:
        return bool(self.configuration.get(ClientOption.ENDPOINT_OVERRIDDEN, False))

    @property
    def region(self) -> Optional[str]:
        return self.configuration.get(ClientOption.REGION)

    @property
    def service_name(self) -> str:
        return self.configuration.get(ClientOption.SERVICE)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or "client" not in self.__dict__:
            raise AttributeError(name)
        return getattr(self.__dict__["client"], name)

    async def shutdown(self) -> None:
        """Release the client's HTTP connection pool."""
        close = getattr(self.client, "close", None)
        if close is not None:
            close()
            logger.debug(f"{self.service_name} client closed")

    def __repr__(self) -> str:
        return (
            f"ConfiguredClient(service={self.service_name!r}, region={self.region!r}, "
            f"endpoint={self.endpoint()!r}, overridden={self.is_endpoint_overridden()})"
        )


class ClientFactory:
    """Builds ``ConfiguredClient`` instances from shared region/credentials."""

    def __init__(
        self,
        region_provider: RegionProvider,
        credentials_provider: CredentialsProvider,
    ):
        self.region_provider = region_provider
        self.credentials_provider = credentials_provider

    def resolve_region(self, override: Optional[str] = None) -> str:
        region = override or self.region_provider.get_region()
        if not region:
            raise InvalidConfigError(
                "No AWS region configured; set cloud.aws.region.static "
                "or AWS_REGION",
                key="cloud.aws.region.static",
            )
        return region

    def create(
        self,
        service_name: str,
        *,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_key: str = "endpoint",
    ) -> ConfiguredClient:
        """
        Build a client for ``service_name``.

        No request is sent; boto3 clients connect on first call.

        Raises:
            InvalidConfigError: Bad endpoint, unknown profile or unresolvable region
        """
        if endpoint is not None:
            endpoint = validate_endpoint(endpoint, key=endpoint_key)
        region_name = self.resolve_region(region)

        from botocore.exceptions import BotoCoreError, ProfileNotFound

        kwargs: dict[str, Any] = {"service_name": service_name}
        if endpoint:
            kwargs["endpoint_url"] = endpoint

        try:
            session = self.credentials_provider.create_session(region_name)
            client = session.client(**kwargs)
        except ProfileNotFound as e:
            raise InvalidConfigError(
                f"Could not configure {service_name} client: {e}",
                key="cloud.aws.credentials.profile.name",
                value=getattr(e, "kwargs", {}).get("profile"),
            ) from e
        except (BotoCoreError, ValueError) as e:
            raise InvalidConfigError(
                f"Could not configure {service_name} client: {e}",
                key=endpoint_key if endpoint else "cloud.aws.region.static",
                value=endpoint or region_name,
            ) from e

        configuration = ClientConfiguration({
            ClientOption.SERVICE: service_name,
            ClientOption.REGION: region_name,
            ClientOption.ENDPOINT: endpoint or client.meta.endpoint_url,
            ClientOption.ENDPOINT_OVERRIDDEN: endpoint is not None,
        })
        logger.debug(
            f"Built {service_name} client (region={region_name}, "
            f"endpoint={configuration.get(ClientOption.ENDPOINT)}, "
            f"overridden={endpoint is not None})"
        )
        return ConfiguredClient(client, configuration)
