"""Storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO


class AbstractStorage(ABC):
    """Interface for avatar storage backends."""

    @abstractmethod
    def upload(self, file_obj: IO[bytes], filename: str, folder: str) -> str:
        """Persist a file under ``folder`` and return its public URL."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether the given relative path exists in storage."""
