"""
Credentials providers - how AWS clients authenticate.

Every provider builds a ``boto3.session.Session`` for a given region.
Creating a session does not contact AWS; credentials are only used when a
request is signed. boto3 is imported on first use so that the package loads
without it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from ..faults import InvalidConfigError

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger("cloudmail.aws.credentials")

PROFILE_KEY = "cloud.aws.credentials.profile.name"


@runtime_checkable
class CredentialsProvider(Protocol):
    """Produces boto3 sessions carrying credentials."""

    def create_session(self, region_name: Optional[str]) -> boto3.session.Session:
        ...


class StaticCredentialsProvider:
    """Fixed access key / secret key (and optional session token)."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None,
    ):
        self.access_key = access_key
        self.secret_key = secret_key
        self.session_token = session_token

    def create_session(self, region_name: Optional[str]) -> boto3.session.Session:
        import boto3

        return boto3.session.Session(
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            aws_session_token=self.session_token,
            region_name=region_name,
        )

    def __repr__(self) -> str:
        # never print the secret
        return f"StaticCredentialsProvider(access_key={self.access_key!r})"


class ProfileCredentialsProvider:
    """Credentials from a named profile in the shared AWS config files."""

    def __init__(self, profile_name: str):
        self.profile_name = profile_name

    def create_session(self, region_name: Optional[str]) -> boto3.session.Session:
        import boto3
        from botocore.exceptions import ProfileNotFound

        try:
            return boto3.session.Session(
                profile_name=self.profile_name,
                region_name=region_name,
            )
        except ProfileNotFound as e:
            raise InvalidConfigError(
                f"AWS profile {self.profile_name!r} not found in the shared config files",
                key=PROFILE_KEY,
                value=self.profile_name,
            ) from e

    def __repr__(self) -> str:
        return f"ProfileCredentialsProvider(profile_name={self.profile_name!r})"


class DefaultCredentialsProvider:
    """boto3's default credentials chain (environment, config files, IAM role)."""

    def create_session(self, region_name: Optional[str]) -> boto3.session.Session:
        import boto3

        return boto3.session.Session(region_name=region_name)

    def __repr__(self) -> str:
        return "DefaultCredentialsProvider()"
