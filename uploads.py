"""
Company logo storage on the local filesystem.
"""
import logging
import os
import time
from pathlib import Path
from typing import Optional, Union

from errors import BadRequest, NotFound

logger = logging.getLogger(__name__)


class LocalBlobStore:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def store_upload(self, data: Optional[bytes], original_name: Optional[str]) -> str:
        """Save an upload as <epoch-millis>-<name> and return its /uploads/ path."""
        if data is None or not original_name:
            raise BadRequest("No file uploaded")
        filename = f"{int(time.time() * 1000)}-{os.path.basename(original_name)}"
        (self.directory / filename).write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", filename, len(data))
        return f"/uploads/{filename}"

    def resolve(self, filename: str) -> Path:
        path = (self.directory / filename).resolve()
        if path.parent != self.directory.resolve() or not path.is_file():
            raise NotFound("File not found")
        return path
