"""
AWS plumbing shared by service autoconfigurations: region, credentials
and inspectable client construction.
"""

from .autoconfig import (
    CredentialsProviderAutoConfiguration,
    RegionProviderAutoConfiguration,
)
from .client import (
    ClientConfiguration,
    ClientFactory,
    ClientOption,
    ConfiguredClient,
    validate_endpoint,
)
from .credentials import (
    CredentialsProvider,
    DefaultCredentialsProvider,
    ProfileCredentialsProvider,
    StaticCredentialsProvider,
)
from .region import DefaultRegionProvider, RegionProvider, StaticRegionProvider

__all__ = [
    "ClientConfiguration",
    "ClientFactory",
    "ClientOption",
    "ConfiguredClient",
    "CredentialsProvider",
    "CredentialsProviderAutoConfiguration",
    "DefaultCredentialsProvider",
    "DefaultRegionProvider",
    "ProfileCredentialsProvider",
    "RegionProvider",
    "RegionProviderAutoConfiguration",
    "StaticCredentialsProvider",
    "StaticRegionProvider",
    "validate_endpoint",
]
