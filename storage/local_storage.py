"""Local filesystem storage implementation."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from services.errors import UploadError

from .abstract_storage import AbstractStorage

logger = logging.getLogger(__name__)


class LocalStorage(AbstractStorage):
    """Persist files under the upload directory and serve them from ``public_url``."""

    def __init__(self, upload_dir: str, public_url: str = "/uploads"):
        self.base_directory = Path(upload_dir).resolve()
        self.public_url = public_url.rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def _unique_name(self, filename: str) -> str:
        suffix = Path(secure_filename(filename)).suffix.lower()
        return f"{uuid.uuid4().hex}{suffix}"

    def upload(self, file_obj: IO[bytes], filename: str, folder: str) -> str:
        """Save a file and return the URL it will be served from."""

        safe_folder = secure_filename(folder)
        if not safe_folder:
            raise ValueError("Folder must contain at least one valid character.")

        name = self._unique_name(filename)
        directory = self.base_directory / safe_folder
        destination = directory / name
        try:
            os.makedirs(directory, exist_ok=True)
            if hasattr(file_obj, "save"):
                file_obj.save(destination)  # type: ignore[arg-type]
            else:
                with open(destination, "wb") as output:
                    output.write(file_obj.read())
        except OSError as exc:
            logger.error("Could not write upload to %s: %s", destination, exc)
            raise UploadError() from exc

        return f"{self.public_url}/{safe_folder}/{name}"

    def exists(self, path: str) -> bool:
        """Return True if the given relative path exists within the upload directory."""

        return (self.base_directory / path).is_file()
