"""Disk-backed storage for uploaded employee images."""

from __future__ import annotations

import asyncio
import functools
import logging
import os
import re
import shutil
import time
import uuid
from pathlib import Path

from fastapi import UploadFile

from employee_records.core.config import Settings

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def _safe_filename(filename: str | None) -> str:
    base = os.path.basename(filename or "")
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "upload"


def _claim_and_copy(upload: UploadFile, directory: Path, safe_name: str) -> str:
    """Create the target exclusively and copy the upload into it; returns the stored name."""
    stamp = int(time.time() * 1000)
    stored_name = f"{stamp}-{safe_name}"
    while True:
        try:
            buffer = (directory / stored_name).open("xb")
        except FileExistsError:
            stored_name = f"{stamp}-{uuid.uuid4().hex[:8]}-{safe_name}"
            continue
        with buffer:
            upload.file.seek(0)
            shutil.copyfileobj(upload.file, buffer)
        return stored_name


class UploadStorage:
    def __init__(self) -> None:
        self.directory = Path("uploads")
        self.url_prefix = "uploads"

    def configure(self, settings: Settings) -> None:
        self.directory = Path(settings.UPLOAD_DIR)
        self.url_prefix = settings.UPLOAD_URL_PREFIX.strip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    def reference_for(self, stored_name: str) -> str:
        return f"{self.url_prefix}/{stored_name}"

    def path_for(self, reference: str) -> Path | None:
        """Map an image reference back to its file; None if it is not one of ours."""
        prefix = f"{self.url_prefix}/"
        if not reference.startswith(prefix):
            return None
        name = reference[len(prefix):]
        if not name or "/" in name or name in (".", ".."):
            return None
        return self.directory / name

    async def save(self, upload: UploadFile) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        loop = asyncio.get_running_loop()
        stored_name = await loop.run_in_executor(
            None,
            functools.partial(_claim_and_copy, upload, self.directory, _safe_filename(upload.filename)),
        )
        logger.info("Stored upload %s (%s)", stored_name, upload.content_type)
        return self.reference_for(stored_name)

    def release(self, reference: str) -> bool:
        """Delete a stored asset. Failures are logged, never raised."""
        if not reference:
            return False
        path = self.path_for(reference)
        if path is None:
            logger.warning("Refusing to release unknown asset reference %s", reference)
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error("Failed to delete image %s: %s", reference, e)
            return False
        logger.info("Released asset %s", reference)
        return True

    def check_directory(self) -> bool:
        return self.directory.is_dir() and os.access(self.directory, os.W_OK)


upload_storage = UploadStorage()
