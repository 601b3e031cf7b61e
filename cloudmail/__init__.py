"""
cloudmail - conditional wiring of an AWS SES mail sender into a DI container.

Usage::

    from cloudmail import ApplicationContext, ConfigLoader, default_auto_configurations
    from cloudmail.mail import MailSender, SimpleMailMessage

    context = ApplicationContext(
        config=ConfigLoader.load(paths=["config/app.yaml"]),
        auto_configurations=default_auto_configurations(),
    )
    async with context:
        sender = await context.get(MailSender)
        await sender.send(SimpleMailMessage(
            from_address="noreply@example.com",
            to=["user@example.com"],
            subject="Hello",
            text="World",
        ))
"""

__version__ = "0.1.0"

from .aws import CredentialsProviderAutoConfiguration, RegionProviderAutoConfiguration
from .config import ConfigError, ConfigLoader
from .context import ApplicationContext, AutoConfiguration
from .faults import Fault, InvalidConfigError
from .mail import SesAutoConfiguration


def default_auto_configurations() -> list:
    """Region, credentials, then SES - the order the SES step depends on."""
    return [
        RegionProviderAutoConfiguration(),
        CredentialsProviderAutoConfiguration(),
        SesAutoConfiguration(),
    ]


__all__ = [
    "ApplicationContext",
    "AutoConfiguration",
    "ConfigError",
    "ConfigLoader",
    "CredentialsProviderAutoConfiguration",
    "Fault",
    "InvalidConfigError",
    "RegionProviderAutoConfiguration",
    "SesAutoConfiguration",
    "default_auto_configurations",
]
