"""Domain package exports for value objects and normalisation helpers."""

from .coordinates import format_coordinates, parse_coordinates
from .entities import (
    MAX_IMAGE_BYTES,
    Coordinates,
    FormState,
    ImageFile,
    PlaceRecord,
    PlaceSelection,
    Session,
    StageResult,
    SubmissionResult,
)
from .naming import normalize_username, registry_username
from .places import extract_selection

__all__ = [
    "MAX_IMAGE_BYTES",
    "Coordinates",
    "FormState",
    "ImageFile",
    "PlaceRecord",
    "PlaceSelection",
    "Session",
    "StageResult",
    "SubmissionResult",
    "extract_selection",
    "format_coordinates",
    "normalize_username",
    "parse_coordinates",
    "registry_username",
]
