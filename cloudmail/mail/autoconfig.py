"""
SES mail autoconfiguration.

Decides whether a mail sender exists and which one:

1. ``cloud.aws.ses.enabled`` is false        -> nothing
2. the SES client library is not importable  -> nothing
3. build the SES client (endpoint override applied here)
4. MIME support importable                   -> ``RichSesMailSender``,
   registered as ``RichMailSender`` and ``MailSender`` (same instance)
5. otherwise                                 -> ``SimpleSesMailSender``,
   registered as ``MailSender`` under the name ``simple_mail_sender``

Disabled or missing libraries are not errors. A malformed endpoint is:
``InvalidConfigError`` aborts the context refresh.

Configuration keys (prefix ``cloud.aws.ses``)::

    enabled                  bool, default true
    endpoint                 URI, optional
    region                   overrides cloud.aws.region.static for SES
    source-arn               identity ARN used for sending authorization
    configuration-set-name   SES configuration set
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..aws.client import ClientFactory, ConfiguredClient, validate_endpoint
from ..aws.credentials import CredentialsProvider
from ..aws.region import RegionProvider
from ..di import AliasProvider, Container, ValueProvider
from ..faults import InvalidConfigError
from .capabilities import Capabilities
from .sender import MailSender, RichMailSender
from .ses import RichSesMailSender, SimpleSesMailSender

if TYPE_CHECKING:
    from ..config import ConfigLoader
    from ..context import ApplicationContext

logger = logging.getLogger("cloudmail.mail.autoconfig")

SES_PREFIX = "cloud.aws.ses"
SES_SERVICE = "ses"

RICH_MAIL_SENDER_NAME = "rich_mail_sender"
SIMPLE_MAIL_SENDER_NAME = "simple_mail_sender"
SES_CLIENT_NAME = "ses_client"

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def _coerce_bool(value: Any, key: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise InvalidConfigError(
        f"'{key}' must be a boolean, got {value!r}", key=key, value=value,
    )


def _optional_str(value: Any, key: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidConfigError(
            f"'{key}' must be a string, got {value!r}", key=key, value=value,
        )
    return value


@dataclass(frozen=True)
class SesProperties:
    """Immutable snapshot of the ``cloud.aws.ses`` section."""

    enabled: bool = True
    endpoint: Optional[str] = None
    region: Optional[str] = None
    source_arn: Optional[str] = None
    configuration_set_name: Optional[str] = None

    def __post_init__(self):
        if self.endpoint is not None:
            object.__setattr__(
                self, "endpoint",
                validate_endpoint(self.endpoint, key=f"{SES_PREFIX}.endpoint"),
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SesProperties":
        """
        Build from a (normalized) section dict.

        Raises:
            InvalidConfigError: Non-boolean ``enabled`` or malformed endpoint
        """
        return cls(
            enabled=_coerce_bool(data.get("enabled"), f"{SES_PREFIX}.enabled", True),
            endpoint=_optional_str(data.get("endpoint"), f"{SES_PREFIX}.endpoint"),
            region=_optional_str(data.get("region"), f"{SES_PREFIX}.region"),
            source_arn=_optional_str(data.get("source_arn"), f"{SES_PREFIX}.source-arn"),
            configuration_set_name=_optional_str(
                data.get("configuration_set_name"),
                f"{SES_PREFIX}.configuration-set-name",
            ),
        )

    @classmethod
    def from_config(cls, config: "ConfigLoader") -> "SesProperties":
        return cls.from_dict(config.section(SES_PREFIX))


@dataclass(frozen=True)
class MailSenderHandle:
    """The sender produced by ``build`` and how it is to be registered."""

    kind: str  # "rich" | "simple"
    name: str
    sender: Union[RichSesMailSender, SimpleSesMailSender]
    client: ConfiguredClient

    @property
    def is_rich(self) -> bool:
        return self.kind == "rich"


def build(
    properties: SesProperties,
    capabilities: Capabilities,
    region_provider: Optional[RegionProvider],
    credentials_provider: Optional[CredentialsProvider],
) -> Optional[MailSenderHandle]:
    """
    Produce zero or one mail sender.

    Returns:
        ``None`` when disabled or SES support is missing, else the handle.

    Raises:
        InvalidConfigError: The SES client could not be configured
    """
    if not properties.enabled:
        logger.debug(f"{SES_PREFIX}.enabled=false, no mail sender")
        return None

    if not capabilities.cloud_mail:
        logger.debug("SES client library not available, no mail sender")
        return None

    if region_provider is None or credentials_provider is None:
        raise InvalidConfigError(
            "SES needs a region provider and a credentials provider; "
            "apply the region and credentials autoconfigurations first",
        )

    client = ClientFactory(region_provider, credentials_provider).create(
        SES_SERVICE,
        endpoint=properties.endpoint,
        region=properties.region,
        endpoint_key=f"{SES_PREFIX}.endpoint",
    )

    sender_kwargs = {
        "source_arn": properties.source_arn,
        "configuration_set_name": properties.configuration_set_name,
    }
    if capabilities.rich_mail:
        return MailSenderHandle(
            kind="rich",
            name=RICH_MAIL_SENDER_NAME,
            sender=RichSesMailSender(client, **sender_kwargs),
            client=client,
        )

    return MailSenderHandle(
        kind="simple",
        name=SIMPLE_MAIL_SENDER_NAME,
        sender=SimpleSesMailSender(client, **sender_kwargs),
        client=client,
    )


def register_mail_sender(container: Container, handle: MailSenderHandle) -> None:
    """
    Register the client and sender of ``handle``.

    The rich sender is registered once under ``RichMailSender``;
    ``MailSender`` is an alias to it, so both resolve to one object.
    """
    container.register(ValueProvider(
        value=handle.client,
        token=ConfiguredClient,
        name=SES_CLIENT_NAME,
    ))

    if handle.is_rich:
        container.register(ValueProvider(
            value=handle.sender,
            token=RichMailSender,
            name=handle.name,
        ))
        container.register(AliasProvider(
            token=MailSender,
            target_token=RichMailSender,
        ))
    else:
        container.register(ValueProvider(
            value=handle.sender,
            token=MailSender,
            name=handle.name,
        ))

    logger.info(
        f"Registered {type(handle.sender).__name__} as '{handle.name}' "
        f"(endpoint={handle.client.endpoint()}, "
        f"overridden={handle.client.is_endpoint_overridden()})"
    )


class SesAutoConfiguration:
    """Applies ``build`` + ``register_mail_sender`` during context refresh."""

    name = "ses"

    async def apply(self, context: "ApplicationContext") -> None:
        container = context.container
        if container.is_registered(MailSender):
            logger.debug("MailSender already registered, skipping SES autoconfiguration")
            return

        handle = build(
            SesProperties.from_config(context.config),
            context.capabilities,
            await container.resolve_async(RegionProvider, optional=True),
            await container.resolve_async(CredentialsProvider, optional=True),
        )
        if handle is not None:
            register_mail_sender(container, handle)
