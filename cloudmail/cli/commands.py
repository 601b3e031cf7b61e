"""
cloudmail CLI commands.

Commands:
    check       Validate SES configuration without building clients.
    inspect     Refresh a context and report what was wired.
    send-test   Send a test email through the configured sender.
"""

from __future__ import annotations

import asyncio
import json
from typing import Iterable, Optional

import click

from ..config import ConfigLoader
from ..context import ApplicationContext
from ..mail import (
    RICH_MAIL_SENDER_NAME,
    SIMPLE_MAIL_SENDER_NAME,
    MailSender,
    RichMailSender,
    SesProperties,
    SimpleMailMessage,
    detect,
)


def load_config(
    config_files: Iterable[str] = (),
    env_file: Optional[str] = None,
    properties: Iterable[str] = (),
) -> ConfigLoader:
    return ConfigLoader.load(
        paths=list(config_files),
        env_file=env_file,
        properties=list(properties),
    )


def _build_context(config: ConfigLoader, hidden: Iterable[str]) -> ApplicationContext:
    from .. import default_auto_configurations

    return ApplicationContext(
        config=config,
        capabilities=detect(hidden=hidden),
        auto_configurations=default_auto_configurations(),
    )


def cmd_check(config: ConfigLoader, verbose: bool = False) -> SesProperties:
    """Validate the SES section; raises InvalidConfigError on bad values."""
    properties = SesProperties.from_config(config)

    click.echo(click.style("SES Configuration Check", fg="cyan", bold=True))
    click.echo("─" * 40)
    click.echo(f"  Enabled:           {properties.enabled}")
    click.echo(f"  Endpoint:          {properties.endpoint or '(default)'}")
    click.echo(f"  Region override:   {properties.region or '(shared)'}")
    click.echo(f"  Shared region:     {config.get('cloud.aws.region.static') or '(default chain)'}")
    if verbose:
        click.echo(f"  Source ARN:        {properties.source_arn or '(none)'}")
        click.echo(f"  Configuration set: {properties.configuration_set_name or '(none)'}")
    click.echo(click.style("  ✓ Configuration is valid", fg="green"))
    return properties


async def _inspect(context: ApplicationContext) -> dict:
    async with context:
        report = {
            "capabilities": {
                "cloud_mail": context.capabilities.cloud_mail,
                "rich_mail": context.capabilities.rich_mail,
            },
            "mail_sender": None,
        }
        if context.has_bean(MailSender):
            sender = await context.get(MailSender)
            client = sender.client
            rich = isinstance(sender, RichMailSender)
            report["mail_sender"] = {
                "kind": "rich" if rich else "simple",
                "name": RICH_MAIL_SENDER_NAME if rich else SIMPLE_MAIL_SENDER_NAME,
                "class": type(sender).__name__,
                "providers": sorted(context.container.names()),
                "region": client.region,
                "endpoint": client.endpoint(),
                "endpoint_overridden": client.is_endpoint_overridden(),
            }
        return report


def cmd_inspect(config: ConfigLoader, hidden: Iterable[str] = ()) -> dict:
    report = asyncio.run(_inspect(_build_context(config, hidden)))
    click.echo(json.dumps(report, indent=2))
    return report


async def _send_test(context: ApplicationContext, message: SimpleMailMessage) -> list:
    async with context:
        sender = await context.get(MailSender, optional=True)
        if sender is None:
            raise click.ClickException("No mail sender is configured (disabled or boto3 missing)")
        return await sender.send(message)


def cmd_send_test(
    config: ConfigLoader,
    to: str,
    from_address: str,
    subject: Optional[str] = None,
    body: Optional[str] = None,
) -> list:
    message = SimpleMailMessage(
        from_address=from_address,
        to=[to],
        subject=subject or "cloudmail test message",
        text=body or "This message was sent by `cloudmail send-test`.",
    )
    ids = asyncio.run(_send_test(_build_context(config, ()), message))
    click.echo(click.style(f"✓ Sent, SES message id: {ids[0]}", fg="green"))
    return ids
