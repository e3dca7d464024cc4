"""Disk storage for request photos served under ``/uploads``."""

import logging
import os
import shutil
import uuid
from typing import List, Sequence

from fastapi import UploadFile, status

from ..core.config import settings
from ..utils import clock, error_response

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


def validate_uploads(files: Sequence[UploadFile]) -> None:
    if not files:
        raise error_response("No photos uploaded", {"photos": "required"})
    if len(files) > settings.MAX_PHOTOS_PER_UPLOAD:
        raise error_response(
            f"At most {settings.MAX_PHOTOS_PER_UPLOAD} photos per upload",
            {"photos": "too_many"},
        )
    for up in files:
        if not (up.content_type or "").startswith("image/"):
            raise error_response(
                "Only image files are allowed",
                {"photos": up.filename or "unnamed"},
            )


def _stored_name(request_id: int, filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    ext = ext.lower()
    if ext not in ALLOWED_EXTENSIONS:
        ext = ".jpg"
    stamp = clock.utcnow().strftime("%Y%m%d%H%M%S")
    return f"req{request_id}_{stamp}_{uuid.uuid4().hex[:12]}{ext}"


def save_photos(request_id: int, files: Sequence[UploadFile]) -> List[str]:
    """Write every upload to UPLOADS_DIR and return the stored file names.

    On any failure the files written so far are removed again.
    """
    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    saved: List[str] = []
    try:
        for up in files:
            name = _stored_name(request_id, up.filename)
            with open(os.path.join(settings.UPLOADS_DIR, name), "wb") as buffer:
                shutil.copyfileobj(up.file, buffer)
            saved.append(name)
    except OSError:
        logger.exception("Could not store photos for request %s", request_id)
        remove_photos(saved)
        raise error_response(
            "Could not save image file",
            {},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    finally:
        for up in files:
            up.file.close()
    return saved


def remove_photos(names: Sequence[str]) -> None:
    for name in names:
        try:
            os.remove(os.path.join(settings.UPLOADS_DIR, name))
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove stored photo %s", name)
