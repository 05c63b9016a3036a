"""Object-storage adapter for Cloudinary unsigned uploads."""

from __future__ import annotations

import io
import logging
from typing import Optional

from destmap.adapters.api_errors import ApiPayloadError, ensure_ok, json_dict
from destmap.adapters.http_client import HttpConfig, HttpSession, join_url
from destmap.domain.entities import ImageFile
from destmap.domain.ports import ObjectStoragePort

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.cloudinary.com/v1_1"


class CloudinaryUploadAdapter(ObjectStoragePort):
    """Upload images with an unsigned upload preset and return ``secure_url``."""

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        upload_timeout_s: float = 120,
        session: Optional[HttpSession] = None,
    ) -> None:
        if not cloud_name or not upload_preset:
            raise ValueError("CloudinaryUploadAdapter requires cloud_name and upload_preset")
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.api_base = api_base
        self.cfg = HttpConfig(upload_timeout_s=upload_timeout_s)
        self.session = session or HttpSession(self.cfg)

    @property
    def upload_url(self) -> str:
        return join_url(self.api_base, f"/{self.cloud_name}/upload")

    def upload_image(self, image: ImageFile) -> str:
        """POST ``file`` + ``upload_preset`` and return the secure URL.

        Raises:
            ApiError: Non-2xx responses (typed by status class).
            ApiPayloadError: 2xx responses without a ``secure_url``.
        """
        files = {
            "file": (image.filename, io.BytesIO(image.content), image.content_type),
            "upload_preset": (None, self.upload_preset),
        }
        resp = self.session.post_multipart(
            self.upload_url, files=files, timeout=self.cfg.upload_timeout_s
        )
        ensure_ok(resp, "upload_image")
        payload = json_dict(resp, "upload_image")
        secure_url = str(payload.get("secure_url") or "").strip()
        if not secure_url:
            raise ApiPayloadError(
                "upload_image: response has no secure_url",
                status=resp.status_code,
                payload=payload,
                context="upload_image",
            )
        LOGGER.info("Image uploaded to object storage: %s", secure_url)
        return secure_url


__all__ = ["CloudinaryUploadAdapter", "DEFAULT_API_BASE"]
