from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from .entities import ImageFile

Username = str


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, *, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta


# ---- Ports (Hexagonal boundaries) ----
class BackendPort(Protocol):
    """Authentication, user registry and place metadata on the backend API."""

    def verify_password(self, username: Username, password: str) -> None: ...  # raises on non-2xx
    def list_users(self) -> List[str]: ...  # registry names, e.g. ["Rohit", ...]
    def save_metadata(self, fields: Mapping[str, str]) -> Dict[str, Any]: ...  # {"imageUrl": ...}
    def fetch_places(self, username: Username) -> List[Dict[str, Any]]: ...


class ObjectStoragePort(Protocol):
    """Unsigned image upload to an external object store."""

    def upload_image(self, image: ImageFile) -> str: ...  # returns the secure URL


class PlacesPort(Protocol):
    """Places autocomplete provider (predictions + place details)."""

    def predict(self, query: str) -> List[Dict[str, Any]]: ...  # [{"place_id", "description"}]
    def details(self, place_id: str) -> Dict[str, Any]: ...  # provider place payload


class KeyValueStore(Protocol):
    """Durable scalar storage for the credential session."""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, *keys: str) -> None: ...


class SchedulerPort(Protocol):
    """Deferred callbacks keyed by channel (UI timers, threads, test doubles)."""

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None: ...
    def cancel(self, key: str) -> None: ...
