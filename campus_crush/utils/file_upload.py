"""
File Upload Utility - Validate and store profile images.

Supported formats:
- JPEG (.jpg, .jpeg)
- PNG (.png)
- WebP (.webp)

Images are re-encoded as JPEG (RGB, max 1024px wide) so that whatever
the client sent, we only ever serve a clean, bounded file.
"""

import io
import os
import time

from fastapi import UploadFile, HTTPException
from PIL import Image, UnidentifiedImageError

from campus_crush.core.config import get_settings

settings = get_settings()

MAX_FILE_SIZE_MB = settings.max_image_size_mb
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}
PROFILE_SUBDIR = "profiles"


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_image_upload(file: UploadFile) -> bytes:
    """
    Read and validate an uploaded image.

    Raises:
        HTTPException on missing name, bad extension or oversized file
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: JPG, PNG, WEBP"
        )

    content = await file.read()

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return content


def save_profile_image(user_id: int, content: bytes, upload_dir: str = None) -> str:
    """
    Decode, normalize and save a profile image.

    Returns:
        Public URL path, e.g. /uploads/profiles/12-1718000000.jpg
    """
    upload_dir = upload_dir or settings.upload_dir

    try:
        image = Image.open(io.BytesIO(content))
        image = image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading image: {str(e)}")

    max_width = settings.max_image_width
    if image.width > max_width:
        ratio = max_width / float(image.width)
        image = image.resize((max_width, int(image.height * ratio)), Image.LANCZOS)

    target_dir = os.path.join(upload_dir, PROFILE_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)

    filename = f"{user_id}-{int(time.time() * 1000)}.jpg"
    image.save(os.path.join(target_dir, filename), format="JPEG", quality=85)

    return f"/uploads/{PROFILE_SUBDIR}/{filename}"
