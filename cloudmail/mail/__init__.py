"""
Mail - SES-backed mail senders and their autoconfiguration.
"""

from .autoconfig import (
    RICH_MAIL_SENDER_NAME,
    SES_PREFIX,
    SIMPLE_MAIL_SENDER_NAME,
    MailSenderHandle,
    SesAutoConfiguration,
    SesProperties,
    build,
    register_mail_sender,
)
from .capabilities import Capabilities, CapabilityDetector, detect
from .faults import MailFault, MailPreparationFault, MailSendFault
from .message import SimpleMailMessage
from .sender import MailSender, RichMailSender
from .ses import RichSesMailSender, SimpleSesMailSender

__all__ = [
    "Capabilities",
    "CapabilityDetector",
    "MailFault",
    "MailPreparationFault",
    "MailSendFault",
    "MailSender",
    "MailSenderHandle",
    "RICH_MAIL_SENDER_NAME",
    "RichMailSender",
    "RichSesMailSender",
    "SES_PREFIX",
    "SIMPLE_MAIL_SENDER_NAME",
    "SesAutoConfiguration",
    "SesProperties",
    "SimpleMailMessage",
    "SimpleSesMailSender",
    "build",
    "detect",
    "register_mail_sender",
]
