from __future__ import annotations

from typing import Any, Optional

import requests


class ApiError(RuntimeError):
    """Base class for REST adapter failures.

    ``detail`` carries the human-readable text the remote service put in its
    error payload (``{"error": "..."}``), when there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        detail: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from a remote service."""


class ApiServerError(ApiError):
    """HTTP 5xx from a remote service."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


class ApiPayloadError(ApiError):
    """2xx response whose body does not match the expected contract."""


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def first_string(payload: Any) -> Optional[str]:
    """Return the first non-empty message-like string in ``payload``."""
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, (dict, list)):
                candidate = first_string(value)
                if candidate:
                    return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


def build_error_message(ctx: str, status: int, detail: Optional[str]) -> str:
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def ensure_ok(resp: requests.Response, ctx: str) -> None:
    """Raise typed adapter errors for non-2xx responses."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    # Plain-text bodies are usually HTML error pages, not user-facing text.
    detail = first_string(payload) if isinstance(payload, (dict, list)) else None
    message = build_error_message(ctx, status, detail)
    if 400 <= status < 500:
        raise ApiClientError(message, status=status, detail=detail, payload=payload, context=ctx)
    if 500 <= status < 600:
        raise ApiServerError(message, status=status, detail=detail, payload=payload, context=ctx)
    raise ApiError(message, status=status, detail=detail, payload=payload, context=ctx)


def json_dict(resp: requests.Response, ctx: str) -> dict:
    """Parse response JSON and require an object payload."""
    try:
        payload = resp.json()
    except Exception as exc:
        snippet = (getattr(resp, "text", "") or "")[:400]
        raise ApiPayloadError(
            f"{ctx}: invalid JSON response: {snippet}",
            status=resp.status_code,
            context=ctx,
        ) from exc
    if not isinstance(payload, dict):
        raise ApiPayloadError(
            f"{ctx}: invalid JSON response shape, expected object",
            status=resp.status_code,
            payload=payload,
            context=ctx,
        )
    return dict(payload)


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiPayloadError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "ensure_ok",
    "first_string",
    "json_dict",
    "parse_error_payload",
]
