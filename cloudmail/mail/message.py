"""
Mail messages - the plain message handed to ``MailSender.send``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from email.message import EmailMessage
from email.utils import format_datetime
from typing import List, Optional

from .faults import MailPreparationFault


@dataclass
class SimpleMailMessage:
    """
    A text-only email.

    Usage::

        msg = SimpleMailMessage(
            from_address="noreply@example.com",
            to=["user@example.com"],
            subject="Hello",
            text="World",
        )
    """

    from_address: Optional[str] = None
    to: List[str] = field(default_factory=list)
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    reply_to: Optional[str] = None
    subject: str = ""
    text: str = ""
    sent_date: Optional[datetime] = None

    def recipients(self) -> List[str]:
        return [*self.to, *self.cc, *self.bcc]

    def validate(self) -> None:
        """
        Raises:
            MailPreparationFault: No sender or no recipient
        """
        if not self.from_address:
            raise MailPreparationFault("Message has no from address", field="from_address")
        if not self.recipients():
            raise MailPreparationFault("Message has no recipients", field="to")

    def to_mime(self, message: Optional[EmailMessage] = None) -> EmailMessage:
        """Copy this message into a MIME message (bcc stays off the headers)."""
        self.validate()
        mime = message if message is not None else EmailMessage()
        mime["From"] = self.from_address
        if self.to:
            mime["To"] = ", ".join(self.to)
        if self.cc:
            mime["Cc"] = ", ".join(self.cc)
        if self.reply_to:
            mime["Reply-To"] = self.reply_to
        mime["Subject"] = self.subject
        if self.sent_date is not None:
            mime["Date"] = format_datetime(self.sent_date)
        mime.set_content(self.text)
        return mime
