"""In-memory mail transport used for tests and local development."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .abstract_mailer import AbstractMailer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentMessage:
    to: str
    subject: str
    body: str


class MemoryMailer(AbstractMailer):
    """Keep every sent message in ``outbox`` instead of delivering it."""

    def __init__(self) -> None:
        self.outbox: list[SentMessage] = []

    def send(self, to: str, subject: str, body: str) -> None:
        self.outbox.append(SentMessage(to=to, subject=subject, body=body))
        logger.debug("Captured email %r for %s", subject, to)
