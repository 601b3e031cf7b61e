"""
Tests for running without the SES client library installed.

boto3 and botocore are blocked in a fresh interpreter by setting their
``sys.modules`` entries to None, which makes any import of them fail.
"""

import os
import subprocess
import sys
import textwrap
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def _run_without_boto3(body: str) -> subprocess.CompletedProcess:
    code = textwrap.dedent("""
        import sys
        sys.modules["boto3"] = None
        sys.modules["botocore"] = None
    """) + textwrap.dedent(body)
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
    )


def test_package_imports_without_boto3():
    result = _run_without_boto3("""
        import cloudmail
        import cloudmail.cli.commands
        from cloudmail.mail import detect

        caps = detect()
        assert caps.cloud_mail is False, caps
        assert caps.rich_mail is True, caps
        print("imported")
    """)
    assert result.returncode == 0, result.stderr
    assert "imported" in result.stdout


def test_no_mail_sender_without_boto3():
    result = _run_without_boto3("""
        import asyncio

        from cloudmail import default_auto_configurations
        from cloudmail.aws import ConfiguredClient
        from cloudmail.mail import MailSender, RichMailSender
        from cloudmail.testing import ContextRunner

        runner = (
            ContextRunner()
            .with_properties(
                "cloud.aws.region.static=eu-west-1",
                "cloud.aws.ses.endpoint=http://localhost:8090",
            )
            .with_configuration(*default_auto_configurations())
        )

        def check(context):
            assert not context.has_bean(MailSender)
            assert not context.has_bean(RichMailSender)
            assert not context.has_bean(ConfiguredClient)
            print("no sender")

        asyncio.run(runner.run(check))
    """)
    assert result.returncode == 0, result.stderr
    assert "no sender" in result.stdout
