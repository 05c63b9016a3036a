"""REST adapter implementing the backend contract (auth, registry, metadata)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from destmap.adapters.api_errors import ApiPayloadError, ensure_ok, json_dict
from destmap.adapters.http_client import HttpConfig, HttpSession, form_fields, join_url
from destmap.domain.ports import BackendPort

LOGGER = logging.getLogger(__name__)

METADATA_FIELDS = (
    "username",
    "place",
    "state",
    "country",
    "latitude",
    "longitude",
    "imageUrl",
)


class BackendRestAdapter(BackendPort):
    """HTTP adapter for the ``/api/user/*``, ``/api/upload/*`` and ``/api/fetch/*`` endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        request_timeout_s: float = 30,
        session: Optional[HttpSession] = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("BackendRestAdapter requires a backend URL")
        self.base_url = base_url.strip()
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s)
        self.session = session or HttpSession(self.cfg)

    def verify_password(self, username: str, password: str) -> None:
        """POST ``/api/user/verify-password``; any 2xx means the pair is valid."""
        url = join_url(self.base_url, "/api/user/verify-password")
        resp = self.session.post(
            url,
            json_body={"username": username, "password": password},
            timeout=self.cfg.request_timeout_s,
        )
        ensure_ok(resp, "verify_password")

    def list_users(self) -> List[str]:
        """GET ``/api/user/list`` and return the registry names."""
        url = join_url(self.base_url, "/api/user/list")
        resp = self.session.get(url, timeout=self.cfg.request_timeout_s)
        ensure_ok(resp, "list_users")
        payload = json_dict(resp, "list_users")
        users = payload.get("users")
        if users is None:
            # The registry answers without the key when nobody is registered.
            return []
        if not isinstance(users, list):
            raise ApiPayloadError(
                "list_users: 'users' must be a list",
                status=resp.status_code,
                payload=payload,
                context="list_users",
            )
        return [str(name) for name in users if name is not None]

    def save_metadata(self, fields: Mapping[str, str]) -> Dict[str, Any]:
        """POST the destination as multipart form data to ``/api/upload/metadata``."""
        missing = [name for name in METADATA_FIELDS if name not in fields]
        if missing:
            raise ValueError(f"Metadata fields missing: {', '.join(missing)}")
        url = join_url(self.base_url, "/api/upload/metadata")
        body = form_fields({name: fields[name] for name in METADATA_FIELDS})
        resp = self.session.post_multipart(url, files=body, timeout=self.cfg.request_timeout_s)
        ensure_ok(resp, "save_metadata")
        return json_dict(resp, "save_metadata")

    def fetch_places(self, username: str) -> List[Dict[str, Any]]:
        """GET ``/api/fetch/user/{username}`` and return the raw place payloads."""
        url = join_url(self.base_url, f"/api/fetch/user/{quote(username, safe='')}")
        resp = self.session.get(url, timeout=self.cfg.request_timeout_s)
        ensure_ok(resp, "fetch_places")
        payload = json_dict(resp, "fetch_places")
        places = payload.get("places")
        if not isinstance(places, list):
            LOGGER.info("No places found for user %s", username)
            return []
        return [dict(item) for item in places if isinstance(item, Mapping)]


__all__ = ["BackendRestAdapter", "METADATA_FIELDS"]
