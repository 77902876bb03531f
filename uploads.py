"""
File uploads: MIME allow-lists, the size limit, and collision-resistant names.

Files land in <UPLOADS_DIR>/<subdir>/ and are referenced by their public path,
/uploads/<subdir>/<filename>, which the app serves as static files.
"""

import os
import random
import time
from typing import Optional

import structlog
from fastapi import HTTPException, UploadFile

import config

logger = structlog.get_logger(__name__)

PUBLIC_PREFIX = "/uploads/"
CHUNK_SIZE = 64 * 1024

IMAGE_TYPES = frozenset(["image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"])
CV_TYPES = frozenset(["application/pdf"])

# validated MIME type -> extension of the stored file
EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "application/pdf": ".pdf",
}

IMAGE_TYPES_MESSAGE = "Invalid file type. Only JPEG, PNG, GIF, WebP, and SVG are allowed."
CV_TYPES_MESSAGE = "Invalid file type. Only PDF is allowed."

# kind -> (subdirectory, allowed MIME types, rejection message)
UPLOAD_KINDS = {
    "skill_icon": ("skills", IMAGE_TYPES, IMAGE_TYPES_MESSAGE),
    "project_image": ("projects", IMAGE_TYPES, IMAGE_TYPES_MESSAGE),
    "client_logo": ("clients", IMAGE_TYPES, IMAGE_TYPES_MESSAGE),
    "profile_image": ("profile-images", IMAGE_TYPES, IMAGE_TYPES_MESSAGE),
    "cv": ("cv", CV_TYPES, CV_TYPES_MESSAGE),
}


def upload_dir(subdir: str) -> str:
    path = os.path.join(config.UPLOADS_DIR, subdir)
    if not os.path.isdir(path):
        logger.info("Creating upload directory", path=path)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            logger.error("Could not create upload directory", path=path, error=str(e))
            raise HTTPException(status_code=500, detail="Error uploading file")
    if not os.access(path, os.W_OK):
        logger.error("Upload directory is not writable", path=path)
        raise HTTPException(status_code=500, detail="Error uploading file")
    return path


def unique_filename(content_type: Optional[str]) -> str:
    ext = EXTENSIONS.get(content_type, "")
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


def save_upload(file: UploadFile, kind: str) -> str:
    """Validate and store an uploaded file, return its public path."""
    subdir, allowed, message = UPLOAD_KINDS[kind]
    if file.content_type not in allowed:
        logger.info("Upload rejected", kind=kind, content_type=file.content_type)
        raise HTTPException(status_code=400, detail=message)

    filename = unique_filename(file.content_type)
    dest = os.path.join(upload_dir(subdir), filename)

    written = 0
    with open(dest, "wb") as out:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > config.MAX_UPLOAD_BYTES:
                break
            out.write(chunk)

    if written > config.MAX_UPLOAD_BYTES:
        os.remove(dest)
        logger.info("Upload rejected", kind=kind, reason="too large")
        limit_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File size too large. Maximum size is {limit_mb}MB.")

    logger.info("File uploaded", kind=kind, filename=filename, size=written)
    return f"{PUBLIC_PREFIX}{subdir}/{filename}"


def local_path(public_path: Optional[str]) -> Optional[str]:
    """Map /uploads/... to a path inside UPLOADS_DIR; None for URLs or paths escaping it."""
    if not public_path or not public_path.startswith(PUBLIC_PREFIX):
        return None
    root = os.path.abspath(config.UPLOADS_DIR)
    path = os.path.abspath(os.path.join(root, public_path[len(PUBLIC_PREFIX):]))
    if os.path.commonpath([root, path]) != root:
        return None
    return path


def remove_upload(public_path: Optional[str]) -> bool:
    path = local_path(public_path)
    if path and os.path.isfile(path):
        os.remove(path)
        logger.info("Removed upload", path=public_path)
        return True
    return False


def resolve_media(source: Optional[str], file: Optional[UploadFile], url: Optional[str], kind: str) -> Optional[str]:
    """Pick the stored value for an image field given its `*_source` form value."""
    if source == "file" and file is not None and file.filename:
        return save_upload(file, kind)
    if source == "url" and url:
        return url
    return None
