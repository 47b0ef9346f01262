"""Service layer for image uploads to Cloudinary."""

from __future__ import annotations

import time
from typing import Any

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError
from flask import current_app

from oneman.errors import UploadFailed, ValidationError


def init_app(app: Any) -> None:
    """Configure the Cloudinary SDK from the Flask config."""
    cloudinary.config(
        cloud_name=app.config.get("CLOUDINARY_CLOUD_NAME"),
        api_key=app.config.get("CLOUDINARY_API_KEY"),
        api_secret=app.config.get("CLOUDINARY_API_SECRET"),
        secure=True,
    )


def _credentials() -> tuple[str, str, str]:
    cloud_name = current_app.config.get("CLOUDINARY_CLOUD_NAME")
    api_key = current_app.config.get("CLOUDINARY_API_KEY")
    api_secret = current_app.config.get("CLOUDINARY_API_SECRET")
    if not (cloud_name and api_key and api_secret):
        raise UploadFailed("Cloudinary config missing.")
    return cloud_name, api_key, api_secret


def build_public_id(user_id: str, folder: str, now: float | None = None) -> str:
    """Return the ``<uid>/<folder>/<epoch-ms>`` public id for a new upload."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{user_id}/{folder}/{millis}"


def sign_upload(public_id: str | None, folder: str | None = None) -> dict[str, Any]:
    """Sign a direct browser upload for ``public_id``.

    The returned mapping carries everything the client needs to post the file
    straight to Cloudinary without seeing the API secret.
    """
    if not public_id:
        raise ValidationError("publicId is required")
    cloud_name, api_key, api_secret = _credentials()

    timestamp = int(time.time())
    params_to_sign: dict[str, Any] = {"public_id": public_id, "timestamp": timestamp}
    if folder:
        params_to_sign["folder"] = folder

    try:
        signature = cloudinary.utils.api_sign_request(params_to_sign, api_secret)
    except CloudinaryError as e:
        current_app.logger.error(f"Cloudinary sign error: {e}")
        raise UploadFailed("Failed to sign request") from e

    return {
        "timestamp": timestamp,
        "signature": signature,
        "cloudName": cloud_name,
        "apiKey": api_key,
        "folder": folder or None,
        "publicId": public_id,
    }


def upload_image(file: Any, public_id: str, folder: str | None = None) -> str:
    """Upload an image from the server side and return its ``secure_url``."""
    cloud_name, api_key, api_secret = _credentials()
    source = getattr(file, "stream", file)
    try:
        result = cloudinary.uploader.upload(
            source,
            public_id=public_id,
            folder=folder,
            overwrite=True,
            resource_type="image",
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
        )
    except CloudinaryError as e:
        current_app.logger.error(f"Cloudinary upload failed for {public_id}: {e}")
        raise UploadFailed() from e

    secure_url = result.get("secure_url") if result else None
    if not secure_url:
        current_app.logger.error(f"Cloudinary returned no URL for {public_id}")
        raise UploadFailed()
    return secure_url
