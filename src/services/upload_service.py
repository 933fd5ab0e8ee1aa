"""Storage of uploaded review photos on local disk."""

import logging
import os
import random
import shutil
import time
from typing import BinaryIO

from src.config import UPLOAD_DIR, UPLOAD_URL_PREFIX
from src.errors import StorageError

logger = logging.getLogger(__name__)


class UploadStorage:
    def __init__(self, directory: str = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX):
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")

    def _generate_filename(self, original_name: str) -> str:
        """Millisecond timestamp plus a random suffix, keeping the original extension."""
        _, extension = os.path.splitext(original_name or "")
        return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{extension}"

    def save(self, original_name: str | None, fileobj: BinaryIO | None) -> str | None:
        """
        Write an uploaded file to the uploads directory.

        Args:
            original_name: Filename the client sent
            fileobj: Readable binary stream with the file contents

        Returns:
            Public URL of the stored file, or None if nothing was uploaded

        Raises:
            StorageError: the file could not be written; nothing is left on disk
        """
        if fileobj is None or not original_name:
            return None

        filename = self._generate_filename(original_name)
        path = os.path.join(self.directory, filename)

        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "wb") as out:
                shutil.copyfileobj(fileobj, out)
        except OSError as e:
            logger.error(f"Error storing upload {original_name}: {e}")
            if os.path.exists(path):
                os.remove(path)
            raise StorageError("Failed to store upload", details=str(e))

        logger.info(f"Stored upload {original_name} as {filename}")
        return f"{self.url_prefix}/{filename}"

    def delete(self, url: str | None) -> bool:
        """Remove a previously stored file by its public URL."""
        if not url or not url.startswith(self.url_prefix + "/"):
            return False

        path = os.path.join(self.directory, os.path.basename(url))
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False


# Singleton instance
upload_storage = UploadStorage()
