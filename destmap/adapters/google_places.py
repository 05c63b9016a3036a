"""Places autocomplete adapter backed by the Google Places web service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from destmap.adapters.api_errors import ApiClientError, ensure_ok, json_dict
from destmap.adapters.http_client import HttpConfig, HttpSession, join_url
from destmap.domain.ports import PlacesPort

DEFAULT_API_BASE = "https://maps.googleapis.com/maps/api/place"
DETAIL_FIELDS = "name,address_components,geometry"

_EMPTY_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}


class GooglePlacesAdapter(PlacesPort):
    """Fetch predictions for typed text and details for a chosen prediction.

    Detail payloads keep the provider shape (``name``, ``address_components``,
    ``geometry.location``) so ``destmap.domain.places.extract_selection`` can
    consume them directly.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        request_timeout_s: float = 10,
        session: Optional[HttpSession] = None,
    ) -> None:
        if not api_key:
            raise ValueError("GooglePlacesAdapter requires an API key")
        self.api_key = api_key
        self.api_base = api_base
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s)
        self.session = session or HttpSession(self.cfg)

    def predict(self, query: str) -> List[Dict[str, Any]]:
        text = (query or "").strip()
        if not text:
            return []
        payload = self._get("/autocomplete/json", {"input": text}, "predict")
        if payload.get("status") in _EMPTY_STATUSES:
            return []
        predictions = []
        for item in payload.get("predictions") or []:
            place_id = str(item.get("place_id") or "")
            if not place_id:
                continue
            predictions.append(
                {"place_id": place_id, "description": str(item.get("description") or "")}
            )
        return predictions

    def details(self, place_id: str) -> Dict[str, Any]:
        if not place_id:
            raise ValueError("place_id is required")
        payload = self._get(
            "/details/json", {"place_id": place_id, "fields": DETAIL_FIELDS}, "details"
        )
        if payload.get("status") in _EMPTY_STATUSES:
            return {}
        result = payload.get("result")
        return dict(result) if isinstance(result, dict) else {}

    # ------------------------------------------------------------------
    def _get(self, path: str, params: Dict[str, str], ctx: str) -> Dict[str, Any]:
        url = join_url(self.api_base, path)
        resp = self.session.get(
            url, params={**params, "key": self.api_key}, timeout=self.cfg.request_timeout_s
        )
        ensure_ok(resp, ctx)
        payload = json_dict(resp, ctx)
        status = str(payload.get("status") or "OK")
        if status != "OK" and status not in _EMPTY_STATUSES:
            # Google reports quota/key problems with HTTP 200 and a status field.
            detail = str(payload.get("error_message") or status)
            raise ApiClientError(
                f"{ctx}: {detail}",
                status=resp.status_code,
                detail=detail,
                payload=payload,
                context=ctx,
            )
        return payload


__all__ = ["DEFAULT_API_BASE", "GooglePlacesAdapter"]
