"""Mail transport abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractMailer(ABC):
    """Interface for outbound email transports."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver a plain-text message or raise ``EmailDeliveryError``."""
