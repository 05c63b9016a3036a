"""Use case for persisting destination metadata on the backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from destmap.domain.entities import Coordinates
from destmap.domain.ports import BackendPort, UseCaseError
from destmap.usecases.error_mapping import map_api_error

SAVE_FAILED_MESSAGE = "Please try again!"
SAVE_TRANSPORT_MESSAGE = "Error uploading file"


@dataclass(frozen=True)
class PlaceMetadata:
    """Destination fields sent to ``/api/upload/metadata``."""

    username: str
    place: str
    administrative_region: str
    country: str
    coordinates: Coordinates
    image_url: str = ""

    def to_fields(self) -> Dict[str, str]:
        """Serialize using the backend's multipart field names."""
        return {
            "username": self.username,
            "place": self.place,
            "state": self.administrative_region,
            "country": self.country,
            "latitude": self.coordinates.latitude,
            "longitude": self.coordinates.longitude,
            "imageUrl": self.image_url,
        }


@dataclass
class SavePlaceMetadata:
    backend: BackendPort

    def __call__(self, metadata: PlaceMetadata) -> str:
        """Persist ``metadata`` and return the image URL echoed by the backend."""
        try:
            payload = self.backend.save_metadata(metadata.to_fields())
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="METADATA_SAVE_FAILED",
                default_message=SAVE_FAILED_MESSAGE,
                transport_message=SAVE_TRANSPORT_MESSAGE,
            ) from exc
        return str((payload or {}).get("imageUrl") or "")


__all__ = ["PlaceMetadata", "SavePlaceMetadata"]
