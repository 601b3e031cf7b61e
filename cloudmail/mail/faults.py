"""
Mail Faults - typed fault definitions for the mail subsystem.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from ..faults.core import Fault, FaultDomain, Severity


FaultDomain.MAIL = FaultDomain("mail", "Email sending faults")


class MailFault(Fault):
    """Base class for all mail-subsystem faults."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "MAIL_ERROR",
        severity: Severity = Severity.ERROR,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        self.recoverable = recoverable
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.MAIL,
            severity=severity,
            retryable=recoverable,
            metadata=details or {},
        )


class MailPreparationFault(MailFault):
    """A message could not be turned into an SES request."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        self.field = field
        super().__init__(
            message,
            code="MAIL_PREPARATION_ERROR",
            details={"field": field},
        )


class MailSendFault(MailFault):
    """
    One or more messages of a send call failed.

    Raised after every message was attempted. ``failed_messages`` pairs each
    failed message with the exception it produced; ``transient`` is true only
    when every failure was a throttle or connection problem.
    """

    def __init__(
        self,
        failed_messages: List[Tuple[Any, Exception]],
        *,
        transient: bool = False,
        sent: int = 0,
    ):
        self.failed_messages = list(failed_messages)
        self.transient = transient
        first = self.failed_messages[0][1] if self.failed_messages else None
        super().__init__(
            f"Failed to send {len(self.failed_messages)} message(s) via SES: {first}",
            code="MAIL_SEND_TRANSIENT" if transient else "MAIL_SEND_PERMANENT",
            severity=Severity.WARN if transient else Severity.ERROR,
            details={"failed": len(self.failed_messages), "sent": sent},
            recoverable=transient,
        )
