"""Domain value objects shared across adapters, use-cases, and view models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

MAX_IMAGE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ImageFile:
    """Image selected in the form, held in memory until upload."""

    filename: str
    """Original client-side file name, forwarded to object storage."""
    content: bytes = field(repr=False)
    """Raw file bytes."""
    content_type: str = "application/octet-stream"
    """MIME type reported by the browser or guessed by the caller."""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class FormState:
    """Mutable record the user edits; the single source of what gets submitted.

    ``verified`` and ``uploading`` are UI flags owned by the credential gate and
    the workflow controller respectively. Field edits go through
    ``DestinationFormVM.change`` so the verification lock is enforced.
    """

    username: str = ""
    password: str = field(default="", repr=False)
    place: str = ""
    administrative_region: str = ""
    country: str = ""
    coordinates: str = ""
    image: Optional[ImageFile] = None
    verified: bool = False
    uploading: bool = False

    def clear(self) -> None:
        """Wipe every field and flag back to the empty form."""
        self.username = ""
        self.password = ""
        self.place = ""
        self.administrative_region = ""
        self.country = ""
        self.coordinates = ""
        self.image = None
        self.verified = False
        self.uploading = False

    def snapshot(self) -> "FormState":
        """Return a detached copy for pipeline stages to read from."""
        return replace(self)


@dataclass(frozen=True)
class Session:
    """Last verified identity, persisted across page loads."""

    username: str = ""
    password: str = field(default="", repr=False)
    verified: bool = False


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude tokens exactly as entered (trimmed, not range-checked)."""

    latitude: str
    longitude: str

    def __str__(self) -> str:
        return f"{self.latitude}, {self.longitude}"


@dataclass(frozen=True)
class PlaceSelection:
    """Fields extracted from one autocomplete provider selection."""

    name: str = ""
    administrative_region: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_geometry(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class StageResult:
    """Tagged outcome of one workflow stage."""

    stage: str
    ok: bool
    message: str = ""
    code: str = ""

    @classmethod
    def success(cls, stage: str, message: str = "") -> "StageResult":
        return cls(stage=stage, ok=True, message=message)

    @classmethod
    def failure(cls, stage: str, code: str, message: str) -> "StageResult":
        return cls(stage=stage, ok=False, message=message, code=code)


@dataclass(frozen=True)
class SubmissionResult:
    """Terminal outcome of one submit attempt.

    ``message`` is always set. ``image_url`` is only populated on success and
    may be an empty string when no image was attached.
    """

    ok: bool
    message: str
    stage: Optional[str] = None
    code: str = ""
    image_url: Optional[str] = None

    @classmethod
    def success(cls, message: str, image_url: str) -> "SubmissionResult":
        return cls(ok=True, message=message, image_url=image_url)

    @classmethod
    def failure(cls, stage: str, code: str, message: str) -> "SubmissionResult":
        return cls(ok=False, message=message, stage=stage, code=code)


@dataclass(frozen=True)
class PlaceRecord:
    """Persisted destination entry as returned by the map data endpoint."""

    place: str
    administrative_region: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_url: str = ""

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PlaceRecord":
        """Build a record from the backend wire shape (``state``/``imageUrl`` keys)."""
        return cls(
            place=str(payload.get("place") or ""),
            administrative_region=str(payload.get("state") or ""),
            country=str(payload.get("country") or ""),
            latitude=_as_float(payload.get("latitude")),
            longitude=_as_float(payload.get("longitude")),
            image_url=str(payload.get("imageUrl") or ""),
        )


def _as_float(value: Any) -> Optional[float]:
    # Coordinates are stored as entered, so the backend may hand back text.
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None
