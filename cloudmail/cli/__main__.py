"""cloudmail CLI - Main Entry Point.

Commands:
    check     - Validate SES configuration
    inspect   - Show the wired mail sender as JSON
    send-test - Send a test email
"""

import json
import logging
import sys
from typing import Optional

import click

from . import __version__, __cli_name__
from ..faults import Fault
from ..config import ConfigError


def _fail(ctx, error: Exception):
    """Report a fault and exit 1; --verbose adds the structured form."""
    click.echo(click.style(f"✗ {error}", fg="red"), err=True)
    if isinstance(error, Fault) and ctx.obj.get('verbose'):
        click.echo(json.dumps(error.to_dict(), indent=2, default=str), err=True)
    sys.exit(1)


def _config_options(f):
    f = click.option('--config', '-c', 'config_files', multiple=True,
                     type=click.Path(exists=True, dir_okay=False),
                     help='JSON/YAML config file (repeatable)')(f)
    f = click.option('--env-file', type=click.Path(exists=True, dir_okay=False),
                     default=None, help='.env file with CLOUDMAIL_ variables')(f)
    f = click.option('-D', 'properties', multiple=True, metavar='KEY=VALUE',
                     help='Property override, e.g. -D cloud.aws.ses.enabled=false')(f)
    return f


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx, verbose: bool):
    """Inspect and validate SES mail wiring."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command('check')
@_config_options
@click.pass_context
def check(ctx, config_files, env_file, properties):
    """
    Validate SES configuration and report issues.

    Examples:
      cloudmail check -c config/app.yaml
    """
    from .commands import cmd_check, load_config

    try:
        cmd_check(load_config(config_files, env_file, properties), verbose=ctx.obj['verbose'])
    except (Fault, ConfigError) as e:
        _fail(ctx, e)


@cli.command('inspect')
@_config_options
@click.option('--hide', multiple=True, metavar='MODULE',
              help='Treat MODULE as not installed (e.g. --hide email.message)')
@click.pass_context
def inspect_(ctx, config_files, env_file, properties, hide):
    """
    Refresh a context and print what was wired as JSON.

    Examples:
      cloudmail inspect -D cloud.aws.ses.endpoint=http://localhost:4566
    """
    from .commands import cmd_inspect, load_config

    try:
        cmd_inspect(load_config(config_files, env_file, properties), hidden=hide)
    except (Fault, ConfigError) as e:
        _fail(ctx, e)


@cli.command('send-test')
@click.argument('to')
@click.option('--from', 'from_address', required=True, help='Verified sender address')
@click.option('--subject', type=str, default=None, help='Email subject')
@click.option('--body', type=str, default=None, help='Email body')
@_config_options
@click.pass_context
def send_test(ctx, to: str, from_address: str, subject: Optional[str], body: Optional[str],
              config_files, env_file, properties):
    """
    Send a test email through the configured sender.

    Examples:
      cloudmail send-test user@example.com --from noreply@example.com
    """
    from .commands import cmd_send_test, load_config

    try:
        cmd_send_test(
            load_config(config_files, env_file, properties),
            to=to,
            from_address=from_address,
            subject=subject,
            body=body,
        )
    except (Fault, ConfigError) as e:
        _fail(ctx, e)


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
