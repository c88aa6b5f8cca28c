"""
QuickJob - Upload Storage

Stores uploaded files on local disk and hands back the public path they
are served from.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from src.config import settings
from src.errors import ValidationError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


def generate_stored_filename(original_filename: str) -> str:
    """Generate a unique filename for storage, keeping the extension."""
    ext = Path(original_filename).suffix.lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex}{ext}"


def validate_upload(file: UploadFile, allowed_extensions: Optional[set] = None) -> None:
    """Reject files whose extension is not allowed."""
    allowed_extensions = allowed_extensions or settings.ALLOWED_UPLOAD_EXTENSIONS
    ext = Path(file.filename or "").suffix.lower()
    if ext not in allowed_extensions:
        allowed = ", ".join(sorted(allowed_extensions))
        raise ValidationError(f"Unsupported file type '{ext or 'none'}'. Allowed: {allowed}")


async def save_upload(file: UploadFile, allowed_extensions: Optional[set] = None) -> str:
    """
    Save an uploaded file using streaming to enforce the size limit.

    Returns the public path (``/uploads/<stored name>``).
    """
    validate_upload(file, allowed_extensions)

    stored_filename = generate_stored_filename(file.filename)
    file_path = settings.UPLOAD_DIR / stored_filename
    max_size = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    chunk_size = 64 * 1024  # 64KB chunks
    file_size = 0

    try:
        with open(file_path, "wb") as f:
            while True:
                chunk = await file.read(chunk_size)
                if not chunk:
                    break
                file_size += len(chunk)
                if file_size > max_size:
                    raise ValidationError(
                        f"File too large. Maximum size is {settings.MAX_FILE_SIZE_MB}MB"
                    )
                f.write(chunk)
    except ValidationError:
        # Clean up partial file on size rejection
        if file_path.exists():
            file_path.unlink()
        raise

    return f"{PUBLIC_PREFIX}/{stored_filename}"


async def save_optional_upload(file: Optional[UploadFile]) -> Optional[str]:
    """Save the file if one was sent; multipart forms may omit it."""
    if file is None or not file.filename:
        return None
    return await save_upload(file)


def remove_stored_file(public_path: Optional[str]) -> None:
    """Delete a file previously returned by ``save_upload``."""
    if not public_path or not public_path.startswith(PUBLIC_PREFIX + "/"):
        return
    stored = settings.UPLOAD_DIR / Path(public_path).name
    try:
        stored.unlink(missing_ok=True)
    except OSError:
        logger.exception("Could not remove orphaned upload %s", stored)


@asynccontextmanager
async def discard_on_error(*public_paths: Optional[str]):
    """
    Remove freshly saved uploads if the enclosed block raises.

    Wrap the transaction that records the paths so a rollback leaves no
    unreferenced file behind::

        path = await save_upload(file)
        async with discard_on_error(path), atomic(db):
            ...
    """
    try:
        yield
    except BaseException:
        for public_path in public_paths:
            remove_stored_file(public_path)
        raise
