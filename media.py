"""
Cloudinary client used to host tool images.
"""
import logging
import os
from typing import Optional

import cloudinary
import cloudinary.uploader
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

MEDIA_FOLDER = os.getenv("MEDIA_FOLDER", "tools")

# CLOUDINARY_URL is picked up by the SDK itself
if os.getenv("CLOUDINARY_CLOUD_NAME"):
    cloudinary.config(
        cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
        api_key=os.getenv("CLOUDINARY_API_KEY"),
        api_secret=os.getenv("CLOUDINARY_API_SECRET"),
        secure=True,
    )


def is_configured() -> bool:
    return bool(cloudinary.config().cloud_name)


def upload_image(data: bytes, folder: str = MEDIA_FOLDER) -> str:
    """Upload raw image bytes into `folder` and return the secure URL."""
    result = cloudinary.uploader.upload(data, folder=folder)
    if not result or not result.get("secure_url"):
        raise RuntimeError("Upload failed: no result")
    logger.info("Uploaded image %s", result.get("public_id"))
    return result["secure_url"]


def public_id_from_url(url: str, folder: str = MEDIA_FOLDER) -> Optional[str]:
    """
    Derive the storage key from an image URL: the trailing path segment
    without its extension, prefixed with the folder.

    https://res.cloudinary.com/x/image/upload/v1/tools/abc.jpg -> tools/abc
    """
    segment = url.rstrip("/").split("/")[-1].split("?")[0]
    name = segment.split(".")[0]
    if not name:
        return None
    return f"{folder}/{name}"


def delete_image(public_id: str) -> None:
    result = cloudinary.uploader.destroy(public_id)
    if result and result.get("result") not in ("ok", "not found"):
        raise RuntimeError(f"Delete of {public_id} failed: {result.get('result')}")
    logger.info("Deleted image %s", public_id)
