"""
Tests for AWS client construction and the region/credentials autoconfigurations.
"""

import pytest

from cloudmail.aws import (
    ClientFactory,
    ClientOption,
    CredentialsProvider,
    CredentialsProviderAutoConfiguration,
    DefaultCredentialsProvider,
    DefaultRegionProvider,
    ProfileCredentialsProvider,
    RegionProvider,
    RegionProviderAutoConfiguration,
    StaticCredentialsProvider,
    StaticRegionProvider,
    validate_endpoint,
)
from cloudmail import default_auto_configurations
from cloudmail.di import ValueProvider
from cloudmail.faults import FaultDomain, InvalidConfigError, Severity
from cloudmail.testing import ContextRunner


REGION = "eu-west-1"


def _factory(region=REGION):
    return ClientFactory(
        StaticRegionProvider(region),
        StaticCredentialsProvider("AKIDEXAMPLE", "secret"),
    )


class TestValidateEndpoint:

    @pytest.mark.parametrize("value", [
        "http://localhost:8090",
        "https://email.eu-west-1.amazonaws.com",
        "http://127.0.0.1:4566/",
    ])
    def test_accepts(self, value):
        assert validate_endpoint(value) == value

    def test_strips_whitespace(self):
        assert validate_endpoint("  http://localhost:8090 ") == "http://localhost:8090"

    @pytest.mark.parametrize("value", [
        "", "   ", None, 8090, "localhost:8090", "ftp://localhost",
        "http://", "http://localhost:99999", "http://localhost:port",
    ])
    def test_rejects(self, value):
        with pytest.raises(InvalidConfigError) as exc_info:
            validate_endpoint(value, key="cloud.aws.ses.endpoint")
        fault = exc_info.value
        assert fault.key == "cloud.aws.ses.endpoint"
        assert fault.domain == FaultDomain.CONFIG
        assert fault.severity == Severity.FATAL
        assert fault.retryable is False


class TestClientFactory:

    def test_default_endpoint(self):
        client = _factory().create("ses")
        assert client.endpoint() == f"https://email.{REGION}.amazonaws.com"
        assert not client.is_endpoint_overridden()
        assert client.region == REGION
        assert client.service_name == "ses"

    def test_endpoint_override(self):
        client = _factory().create("ses", endpoint="http://localhost:8090")
        assert client.endpoint() == "http://localhost:8090"
        assert client.is_endpoint_overridden()
        assert client.configuration.get(ClientOption.ENDPOINT_OVERRIDDEN) is True
        assert client.client.meta.endpoint_url == "http://localhost:8090"

    def test_region_override(self):
        client = _factory().create("ses", region="us-east-1")
        assert client.region == "us-east-1"
        assert client.client.meta.region_name == "us-east-1"

    def test_invalid_endpoint_uses_given_key(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            _factory().create("ses", endpoint="not a uri", endpoint_key="my.endpoint")
        assert exc_info.value.key == "my.endpoint"

    def test_missing_region(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            _factory(region=None).create("ses")
        assert exc_info.value.key == "cloud.aws.region.static"

    def test_attribute_forwarding(self):
        client = _factory().create("ses")
        assert client.meta is client.client.meta
        with pytest.raises(AttributeError):
            client.no_such_operation

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self):
        client = _factory().create("ses")
        await client.shutdown()


class TestRegionProviders:

    def test_static(self):
        assert StaticRegionProvider("ap-south-1").get_region() == "ap-south-1"

    def test_default_chain_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ca-central-1")
        monkeypatch.delenv("AWS_REGION", raising=False)
        assert DefaultRegionProvider().get_region() == "ca-central-1"

    def test_protocols(self):
        assert isinstance(StaticRegionProvider("x"), RegionProvider)
        assert isinstance(DefaultCredentialsProvider(), CredentialsProvider)


class TestCredentialsProviders:

    def test_static_session(self):
        session = StaticCredentialsProvider("AKID", "secret", "token").create_session(REGION)
        credentials = session.get_credentials()
        assert credentials.access_key == "AKID"
        assert credentials.secret_key == "secret"
        assert credentials.token == "token"
        assert session.region_name == REGION

    def test_repr_hides_secret(self):
        assert "secret" not in repr(StaticCredentialsProvider("AKID", "secret"))


class TestProviderAutoConfiguration:

    @pytest.fixture
    def providers_runner(self):
        return ContextRunner().with_configuration(
            RegionProviderAutoConfiguration(),
            CredentialsProviderAutoConfiguration(),
        )

    @pytest.mark.asyncio
    async def test_static_values(self, providers_runner):
        async def check(context):
            region = await context.get(RegionProvider)
            credentials = await context.get(CredentialsProvider)
            assert isinstance(region, StaticRegionProvider)
            assert region.get_region() == REGION
            assert isinstance(credentials, StaticCredentialsProvider)
            assert credentials.access_key == "AKID"
            assert context.has_named("region_provider")
            assert context.has_named("credentials_provider")

        await providers_runner.with_properties(
            f"cloud.aws.region.static={REGION}",
            "cloud.aws.credentials.access-key=AKID",
            "cloud.aws.credentials.secret-key=secret",
        ).run(check)

    @pytest.mark.asyncio
    async def test_defaults(self, providers_runner):
        async def check(context):
            assert isinstance(await context.get(RegionProvider), DefaultRegionProvider)
            assert isinstance(
                await context.get(CredentialsProvider), DefaultCredentialsProvider,
            )

        await providers_runner.run(check)

    @pytest.mark.asyncio
    async def test_profile(self, providers_runner):
        async def check(context):
            credentials = await context.get(CredentialsProvider)
            region = await context.get(RegionProvider)
            assert isinstance(credentials, ProfileCredentialsProvider)
            assert credentials.profile_name == "staging"
            assert region.profile_name == "staging"

        await providers_runner.with_properties(
            "cloud.aws.credentials.profile.name=staging",
        ).run(check)

    @pytest.mark.asyncio
    async def test_half_static_credentials(self, providers_runner):
        with pytest.raises(InvalidConfigError):
            await providers_runner.with_properties(
                "cloud.aws.credentials.access-key=AKID",
            ).run(lambda context: None)

    @pytest.mark.asyncio
    async def test_existing_providers_are_kept(self):
        class Existing:
            name = "existing"

            async def apply(self, context):
                context.container.register(ValueProvider(
                    StaticRegionProvider("sa-east-1"), token=RegionProvider, name="mine",
                ))

        async def check(context):
            assert (await context.get(RegionProvider)).get_region() == "sa-east-1"
            assert context.has_single(RegionProvider)

        await ContextRunner().with_configuration(
            Existing(), RegionProviderAutoConfiguration(),
        ).with_properties(f"cloud.aws.region.static={REGION}").run(check)




@pytest.fixture
def empty_aws_config(tmp_path, monkeypatch):
    """Point botocore at empty shared config files and clear region/profile vars."""
    config = tmp_path / "config"
    credentials = tmp_path / "credentials"
    config.write_text("")
    credentials.write_text("")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(config))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(credentials))
    for name in ("AWS_PROFILE", "AWS_DEFAULT_PROFILE", "AWS_REGION", "AWS_DEFAULT_REGION"):
        monkeypatch.delenv(name, raising=False)


class TestUnknownProfile:

    def test_profile_credentials_provider(self, empty_aws_config):
        with pytest.raises(InvalidConfigError) as exc_info:
            ClientFactory(
                StaticRegionProvider(REGION),
                ProfileCredentialsProvider("nosuchprofile"),
            ).create("ses")
        fault = exc_info.value
        assert fault.key == "cloud.aws.credentials.profile.name"
        assert fault.severity == Severity.FATAL

    def test_default_region_provider(self, empty_aws_config):
        with pytest.raises(InvalidConfigError) as exc_info:
            DefaultRegionProvider(profile_name="nosuchprofile").get_region()
        assert exc_info.value.key == "cloud.aws.credentials.profile.name"
        assert exc_info.value.value == "nosuchprofile"

    @pytest.mark.asyncio
    async def test_refresh_fails_with_config_fault(self, empty_aws_config):
        runner = ContextRunner().with_configuration(*default_auto_configurations())
        with pytest.raises(InvalidConfigError) as exc_info:
            await runner.with_properties(
                f"cloud.aws.region.static={REGION}",
                "cloud.aws.credentials.profile.name=nosuchprofile",
            ).run(lambda context: None)
        assert exc_info.value.key == "cloud.aws.credentials.profile.name"

    @pytest.mark.asyncio
    async def test_refresh_fails_resolving_region(self, empty_aws_config):
        runner = ContextRunner().with_configuration(*default_auto_configurations())
        with pytest.raises(InvalidConfigError) as exc_info:
            await runner.with_properties(
                "cloud.aws.credentials.profile.name=nosuchprofile",
            ).run(lambda context: None)
        assert exc_info.value.domain == FaultDomain.CONFIG
        assert exc_info.value.key == "cloud.aws.credentials.profile.name"


class TestProfileSection:

    @pytest.mark.asyncio
    async def test_scalar_profile_is_a_config_fault(self):
        runner = ContextRunner().with_configuration(CredentialsProviderAutoConfiguration())
        with pytest.raises(InvalidConfigError) as exc_info:
            await runner.with_properties(
                "cloud.aws.credentials.profile=staging",
            ).run(lambda context: None)
        assert exc_info.value.key == "cloud.aws.credentials.profile"
        assert exc_info.value.value == "staging"
