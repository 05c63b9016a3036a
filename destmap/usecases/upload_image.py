"""Use case for pushing the attached image to object storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from destmap.domain.entities import ImageFile
from destmap.domain.errors import UpstreamError
from destmap.domain.ports import ObjectStoragePort, UseCaseError
from destmap.usecases.error_mapping import map_api_error

UPLOAD_FAILED_MESSAGE = "Image upload failed."
NOT_CONFIGURED_MESSAGE = "Image upload is not configured."


@dataclass
class UploadImage:
    """Return the secure URL for ``image``; ``storage=None`` rejects every upload."""

    storage: Optional[ObjectStoragePort]

    def __call__(self, image: ImageFile) -> str:
        if self.storage is None:
            raise UpstreamError("IMAGE_STORAGE_UNCONFIGURED", NOT_CONFIGURED_MESSAGE)
        try:
            url = self.storage.upload_image(image)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="IMAGE_UPLOAD_FAILED",
                default_message=UPLOAD_FAILED_MESSAGE,
            ) from exc
        if not url:
            raise UpstreamError("IMAGE_UPLOAD_FAILED", UPLOAD_FAILED_MESSAGE)
        return url


__all__ = ["UploadImage"]
