"""
Tests for optional-library capability detection.
"""

import pytest

from cloudmail.mail.capabilities import (
    Capabilities,
    CapabilityDetector,
    detect,
    module_available,
)


class TestModuleAvailable:

    def test_installed_module(self):
        assert module_available("json")

    def test_missing_module(self):
        assert not module_available("cloudmail_no_such_module")

    def test_missing_parent_package(self):
        assert not module_available("cloudmail_no_such_module.child")

    def test_hidden_module(self):
        assert not module_available("json", hidden=["json"])

    def test_hiding_parent_hides_children(self):
        assert not module_available("email.message", hidden=["email"])

    def test_hiding_child_keeps_parent(self):
        assert module_available("email", hidden=["email.message"])

    def test_prefix_is_not_parent(self):
        assert module_available("boto3", hidden=["boto"])


class TestCapabilityDetector:

    def test_everything_installed(self):
        assert detect() == Capabilities(cloud_mail=True, rich_mail=True)
        assert detect() == Capabilities.all()

    @pytest.mark.parametrize(
        "hidden, expected",
        [
            (["boto3"], Capabilities(cloud_mail=False, rich_mail=True)),
            (["email.message"], Capabilities(cloud_mail=True, rich_mail=False)),
            (["boto3", "email"], Capabilities(cloud_mail=False, rich_mail=False)),
        ],
    )
    def test_hidden(self, hidden, expected):
        assert detect(hidden) == expected

    def test_custom_module_names(self):
        detector = CapabilityDetector(
            cloud_mail_module="cloudmail_no_such_module",
            rich_mail_module="json",
        )
        assert detector.detect() == Capabilities(cloud_mail=False, rich_mail=True)

    def test_capabilities_are_immutable(self):
        capabilities = Capabilities.all()
        with pytest.raises(AttributeError):
            capabilities.cloud_mail = False
