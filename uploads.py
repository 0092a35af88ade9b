import os
import random
import time
from typing import Optional

from fastapi import UploadFile

from config import settings
from exceptions import FileTooLarge, InvalidFileType, ValidationError
from logging_config import get_logger

logger = get_logger("uploads")

ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
FIELD_NAME = "image"


def check_file_type(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Validate extension and declared MIME type; return the lower-cased extension.

    Only what the client declares is checked. File contents are not sniffed.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    mime = (content_type or "").split(";")[0].strip().lower()
    if ext.lstrip(".") not in ALLOWED_EXTENSIONS or mime not in ALLOWED_MIME_TYPES:
        raise InvalidFileType(ALLOWED_EXTENSIONS)
    return ext


def unique_filename(ext: str) -> str:
    return f"{FIELD_NAME}-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9 - 1):09d}{ext}"


def save_upload(upload: Optional[UploadFile], upload_dir: Optional[str] = None,
                max_size: Optional[int] = None) -> dict:
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded. Please select an image file to upload", field=FIELD_NAME)

    upload_dir = upload_dir or settings.UPLOAD_DIR
    max_size = max_size or settings.MAX_UPLOAD_SIZE

    ext = check_file_type(upload.filename, upload.content_type)
    content = upload.file.read(max_size + 1)
    if len(content) > max_size:
        raise FileTooLarge(max_size)

    os.makedirs(upload_dir, exist_ok=True)
    filename = unique_filename(ext)
    with open(os.path.join(upload_dir, filename), "wb") as f:
        f.write(content)

    logger.info(f"File uploaded: {upload.filename} -> {filename} ({len(content)} bytes)")
    return {
        "message": "Image uploaded successfully",
        "image_url": f"/uploads/{filename}",
        "filename": filename,
    }
