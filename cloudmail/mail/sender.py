"""
Mail sender interfaces.

``MailSender`` sends plain text messages. ``RichMailSender`` extends it
with MIME messages (attachments, HTML alternatives). Both are DI tokens:
the autoconfiguration registers its sender under one or both.
"""

from __future__ import annotations

from email.message import EmailMessage
from typing import List, Protocol, runtime_checkable

from .message import SimpleMailMessage


@runtime_checkable
class MailSender(Protocol):
    """Sends simple text email."""

    async def send(self, *messages: SimpleMailMessage) -> List[str]:
        """
        Send messages, returning the provider message IDs in order.

        Raises:
            MailSendFault: At least one message failed
        """
        ...


@runtime_checkable
class RichMailSender(MailSender, Protocol):
    """Sends MIME messages as well as simple ones."""

    def create_mime_message(self) -> EmailMessage:
        """Return an empty message to populate and pass to ``send_mime``."""
        ...

    async def send_mime(self, *messages: EmailMessage) -> List[str]:
        ...
