"""
AWS SES mail senders.

- ``SimpleSesMailSender``: text messages via SES ``SendEmail``
- ``RichSesMailSender``: MIME messages via SES ``SendRawEmail``;
  simple messages are converted to MIME first

boto3 is synchronous, so each call runs in the default executor. botocore
is imported on first send, so this module loads without it. Every
message of a ``send`` call is attempted; failures are collected and raised
together as ``MailSendFault``.

Usage::

    sender = RichSesMailSender(ses_client, configuration_set_name="tracking")
    msg = sender.create_mime_message()
    msg["From"] = "noreply@example.com"
    msg["To"] = "user@example.com"
    msg["Subject"] = "Report"
    msg.set_content("See attachment")
    msg.add_attachment(pdf_bytes, maintype="application", subtype="pdf",
                       filename="report.pdf")
    await sender.send_mime(msg)
"""

from __future__ import annotations

import asyncio
import copy
import logging
from email.message import EmailMessage
from email.utils import getaddresses
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..aws.client import ConfiguredClient
from .faults import MailPreparationFault, MailSendFault
from .message import SimpleMailMessage

logger = logging.getLogger("cloudmail.mail.ses")

# ── SES Error classification ───────────────────────────────────────
_THROTTLE_CODES = frozenset({
    "Throttling",
    "ThrottlingException",
    "TooManyRequestsException",
    "LimitExceededException",
    "MaxSendingRateExceeded",
})


def is_transient(error: Exception) -> bool:
    """Throttling and connection problems are worth retrying."""
    from botocore.exceptions import BotoCoreError, ClientError

    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "") in _THROTTLE_CODES
    return isinstance(error, (BotoCoreError, ConnectionError, TimeoutError))


class SimpleSesMailSender:
    """Sends ``SimpleMailMessage`` through SES ``SendEmail``."""

    def __init__(
        self,
        client: ConfiguredClient,
        *,
        source_arn: Optional[str] = None,
        configuration_set_name: Optional[str] = None,
    ):
        self.client = client
        self.source_arn = source_arn
        self.configuration_set_name = configuration_set_name

    # ── SES API Helpers ─────────────────────────────────────────────

    async def _call_ses(self, method: str, **kwargs: Any) -> dict:
        func = getattr(self.client, method)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(**kwargs))

    def _common_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if self.source_arn:
            kwargs["SourceArn"] = self.source_arn
        if self.configuration_set_name:
            kwargs["ConfigurationSetName"] = self.configuration_set_name
        return kwargs

    def _build_send_email_request(self, message: SimpleMailMessage) -> Dict[str, Any]:
        message.validate()
        destination: Dict[str, List[str]] = {}
        if message.to:
            destination["ToAddresses"] = list(message.to)
        if message.cc:
            destination["CcAddresses"] = list(message.cc)
        if message.bcc:
            destination["BccAddresses"] = list(message.bcc)

        request: Dict[str, Any] = {
            "Source": message.from_address,
            "Destination": destination,
            "Message": {
                "Subject": {"Data": message.subject},
                "Body": {"Text": {"Data": message.text}},
            },
        }
        if message.reply_to:
            request["ReplyToAddresses"] = [message.reply_to]
        request.update(self._common_kwargs())
        return request

    async def _send_each(
        self,
        messages: Sequence[Any],
        send_one,
    ) -> List[str]:
        from botocore.exceptions import BotoCoreError, ClientError

        message_ids: List[str] = []
        failed: List[Tuple[Any, Exception]] = []

        for message in messages:
            try:
                message_ids.append(await send_one(message))
            except (ClientError, BotoCoreError, MailPreparationFault) as e:
                logger.warning(f"SES send failed: {e}")
                failed.append((message, e))

        if failed:
            raise MailSendFault(
                failed,
                transient=all(is_transient(e) for _, e in failed),
                sent=len(message_ids),
            )
        return message_ids

    # ── Send ────────────────────────────────────────────────────────

    async def _send_simple(self, message: SimpleMailMessage) -> str:
        response = await self._call_ses(
            "send_email", **self._build_send_email_request(message),
        )
        message_id = response.get("MessageId", "")
        logger.debug(f"SES accepted message {message_id} for {message.recipients()}")
        return message_id

    async def send(self, *messages: SimpleMailMessage) -> List[str]:
        """
        Send each message with SES ``SendEmail``.

        Returns:
            SES message IDs, in message order.

        Raises:
            MailSendFault: At least one message failed (after trying all)
        """
        return await self._send_each(messages, self._send_simple)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client={self.client!r})"


class RichSesMailSender(SimpleSesMailSender):
    """Sends MIME messages through SES ``SendRawEmail``."""

    def create_mime_message(self) -> EmailMessage:
        return EmailMessage()

    def _build_raw_request(self, message: EmailMessage) -> Dict[str, Any]:
        addresses = getaddresses(
            message.get_all("To", []) + message.get_all("Cc", []) + message.get_all("Bcc", [])
        )
        destinations = [addr for _, addr in addresses if addr]
        if not destinations:
            raise MailPreparationFault("MIME message has no recipients", field="To")

        # Bcc must reach SES as a destination but not travel in the headers;
        # the caller's message is left as given so it can be sent again
        outgoing = message
        if "Bcc" in message:
            outgoing = copy.deepcopy(message)
            del outgoing["Bcc"]

        request: Dict[str, Any] = {
            "Destinations": destinations,
            "RawMessage": {"Data": outgoing.as_bytes()},
        }
        sender = message.get("From")
        if sender:
            request["Source"] = str(sender)
        request.update(self._common_kwargs())
        return request

    async def _send_raw(self, message: EmailMessage) -> str:
        response = await self._call_ses("send_raw_email", **self._build_raw_request(message))
        message_id = response.get("MessageId", "")
        logger.debug(f"SES accepted raw message {message_id}")
        return message_id

    async def send_mime(self, *messages: EmailMessage) -> List[str]:
        """
        Send each MIME message with SES ``SendRawEmail``.

        Raises:
            MailSendFault: At least one message failed (after trying all)
        """
        return await self._send_each(messages, self._send_raw)

    async def send(self, *messages: SimpleMailMessage) -> List[str]:
        """Convert each simple message to MIME and send it raw."""
        async def send_converted(message: SimpleMailMessage) -> str:
            mime = message.to_mime(self.create_mime_message())
            if message.bcc:
                mime["Bcc"] = ", ".join(message.bcc)
            return await self._send_raw(mime)

        return await self._send_each(messages, send_converted)
