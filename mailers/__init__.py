"""Mail transports."""

from .abstract_mailer import AbstractMailer
from .memory_mailer import MemoryMailer, SentMessage
from .smtp_mailer import SMTPMailer

__all__ = ["AbstractMailer", "MemoryMailer", "SentMessage", "SMTPMailer"]
