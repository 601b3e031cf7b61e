"""
Shared fixtures for the cloudmail test suite.
"""

import pytest

from cloudmail import default_auto_configurations
from cloudmail.aws import ClientFactory, StaticCredentialsProvider, StaticRegionProvider
from cloudmail.testing import ContextRunner


REGION = "eu-west-1"

BASE_PROPERTIES = (
    f"cloud.aws.region.static={REGION}",
    "cloud.aws.credentials.access-key=AKIDEXAMPLE",
    "cloud.aws.credentials.secret-key=secret",
)


@pytest.fixture
def runner() -> ContextRunner:
    """Runner with static region/credentials and the default autoconfigurations."""
    return (
        ContextRunner()
        .with_properties(*BASE_PROPERTIES)
        .with_configuration(*default_auto_configurations())
    )


@pytest.fixture
def ses_client():
    """A real boto3 SES client (no request is ever sent unstubbed)."""
    factory = ClientFactory(
        StaticRegionProvider(REGION),
        StaticCredentialsProvider("AKIDEXAMPLE", "secret"),
    )
    return factory.create("ses")
