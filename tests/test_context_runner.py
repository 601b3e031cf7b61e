"""
Tests for ApplicationContext refresh/close and the ContextRunner builder.
"""

import logging

import pytest

from cloudmail import ApplicationContext, ConfigLoader, InvalidConfigError
from cloudmail.di import ValueProvider
from cloudmail.mail import Capabilities, MailSender
from cloudmail.testing import ContextRunner


class Recorder:
    """Autoconfiguration that records the order it ran in."""

    def __init__(self, name, calls, fail=False):
        self.name = name
        self.calls = calls
        self.fail = fail

    async def apply(self, context):
        self.calls.append(self.name)
        if self.fail:
            raise InvalidConfigError(f"{self.name} failed", key=self.name)


class Closeable:
    def __init__(self):
        self.closed = False

    async def shutdown(self):
        self.closed = True


class TestApplicationContext:

    @pytest.mark.asyncio
    async def test_auto_configurations_run_once_in_order(self):
        calls = []
        context = ApplicationContext(
            config=ConfigLoader(),
            capabilities=Capabilities.all(),
            auto_configurations=[Recorder("a", calls), Recorder("b", calls)],
        )
        await context.refresh()
        await context.refresh()
        assert calls == ["a", "b"]
        assert context.refreshed
        await context.close()
        assert not context.refreshed

    @pytest.mark.asyncio
    async def test_failed_refresh_stops_and_disposes(self):
        calls = []
        closeable = Closeable()

        class RegistersResource:
            name = "resource"

            async def apply(self, context):
                context.container.register(ValueProvider(closeable, token=Closeable))
                await context.get(Closeable)

        context = ApplicationContext(
            capabilities=Capabilities.all(),
            auto_configurations=[
                RegistersResource(),
                Recorder("bad", calls, fail=True),
                Recorder("never", calls),
            ],
        )
        with pytest.raises(InvalidConfigError):
            await context.refresh()

        assert calls == ["bad"]
        assert closeable.closed
        assert not context.refreshed

    @pytest.mark.asyncio
    async def test_container_events_are_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="cloudmail.di.diagnostics")

        class RegistersValue:
            name = "value"

            async def apply(self, context):
                context.container.register(ValueProvider("v", token="token", name="the_value"))

        async with ApplicationContext(
            capabilities=Capabilities.all(),
            auto_configurations=[RegistersValue()],
        ) as context:
            assert await context.get("token") == "v"

        messages = [
            r.getMessage() for r in caplog.records if r.name == "cloudmail.di.diagnostics"
        ]
        assert any("Registered 'the_value' for token" in m for m in messages)
        assert any("Resolved token via 'the_value'" in m for m in messages)
        assert any("Container shut down" in m for m in messages)

    @pytest.mark.asyncio
    async def test_empty_context(self):
        async with ApplicationContext(capabilities=Capabilities.all()) as context:
            assert not context.has_bean(MailSender)
            assert await context.get(MailSender, optional=True) is None
            assert await context.get_named("rich_mail_sender", optional=True) is None


class TestContextRunner:

    def test_builder_is_immutable(self):
        base = ContextRunner().with_properties("a.b=1")
        derived = base.with_properties("a.c=2").with_hidden_modules("boto3")
        assert base.properties == ("a.b=1",)
        assert base.hidden_modules == ()
        assert derived.properties == ("a.b=1", "a.c=2")
        assert derived.hidden_modules == ("boto3",)

    def test_create_context_detects_with_hidden_modules(self):
        context = ContextRunner().with_hidden_modules("email.message").create_context()
        assert context.capabilities == Capabilities(cloud_mail=True, rich_mail=False)

    def test_explicit_capabilities_skip_detection(self):
        capabilities = Capabilities(cloud_mail=False, rich_mail=False)
        context = ContextRunner().with_capabilities(capabilities).create_context()
        assert context.capabilities is capabilities

    def test_later_properties_win(self):
        context = (
            ContextRunner()
            .with_properties("cloud.aws.ses.enabled=true")
            .with_properties("cloud.aws.ses.enabled=false")
            .create_context()
        )
        assert context.config.get("cloud.aws.ses.enabled") is False

    def test_environment_is_ignored(self, monkeypatch):
        monkeypatch.setenv("CLOUDMAIL_CLOUD__AWS__SES__ENABLED", "false")
        context = ContextRunner().create_context()
        assert context.config.get("cloud.aws.ses.enabled") is None

    @pytest.mark.asyncio
    async def test_sync_and_async_callbacks(self):
        runner = ContextRunner().with_properties("x.y=1")

        assert await runner.run(lambda context: context.config.get("x.y")) == "1"

        async def check(context):
            return context.refreshed

        assert await runner.run(check) is True

    @pytest.mark.asyncio
    async def test_context_is_closed_after_run(self):
        seen = []
        await ContextRunner().run(seen.append)
        (context,) = seen
        assert not context.refreshed

    @pytest.mark.asyncio
    async def test_callback_errors_propagate(self):
        def check(context):
            raise AssertionError("expected")

        with pytest.raises(AssertionError, match="expected"):
            await ContextRunner().run(check)
