# routers/uploads.py

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from dependencies.auth import requires_role
from core.config import settings
from core.logging_config import logger
from core.roles import LISTING_ROLES
from core.s3_client import build_object_key, upload_bytes
from models.user import Principal

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
)

# -----------------------------------------------------
# Constants
# -----------------------------------------------------
ALLOWED_MEDIA_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "video/mp4",
    "video/webm",
    "video/quicktime",
}

# Folder names map to S3 prefixes
MEDIA_FOLDERS = {"properties", "projects", "members", "avatars"}


@router.post("/media", summary="Upload listing / project media")
async def upload_media(
    file: UploadFile = File(...),
    folder: str = Form("properties"),
    current_user: Principal = Depends(requires_role(LISTING_ROLES)),
):
    """
    Uploads an image or video to S3 and returns its public URL.
    The URL is then stored in the owning row's media / image fields.
    """
    if folder not in MEDIA_FOLDERS:
        raise HTTPException(400, f"folder must be one of: {sorted(MEDIA_FOLDERS)}")

    if file.content_type not in ALLOWED_MEDIA_TYPES:
        raise HTTPException(400, f"Unsupported media type: {file.content_type}")

    contents = await file.read()
    if not contents:
        raise HTTPException(400, "Uploaded file is empty")
    if len(contents) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(413, "File is too large")

    key = build_object_key(folder, current_user.id, file.filename)

    try:
        url = upload_bytes(key, contents, file.content_type)
    except RuntimeError as e:
        logger.error(f"Media upload failed for {current_user.id}: {e}")
        raise HTTPException(502, "Could not store the file")

    return {
        "url": url,
        "key": key,
        "content_type": file.content_type,
        "size": len(contents),
    }
