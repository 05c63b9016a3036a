"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional, Type

from destmap.adapters.api_errors import (
    ApiError,
    ApiPayloadError,
    ApiServerError,
    ApiTimeoutError,
)
from destmap.domain.errors import UpstreamError
from destmap.domain.ports import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: str,
    rejection_cls: Type[UseCaseError] = UpstreamError,
    transport_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to the workflow error taxonomy.

    Args:
        exc: Exception raised by an adapter call.
        default_code: Code used for the resulting error.
        default_message: Message used when the remote service supplied none.
        rejection_cls: Error class for a 4xx answer. Credential checks pass
            ``AuthorizationError`` here; everything else stays upstream.
        transport_message: Message for timeouts, connectivity failures and
            unexpected exceptions; falls back to ``default_message``.

    Returns:
        UseCaseError: ``exc`` itself when it already is one, otherwise a new
        error carrying the backend's ``error`` text when present.
    """
    if isinstance(exc, UseCaseError):
        return exc
    fallback_transport = transport_message or default_message
    if isinstance(exc, ApiTimeoutError):
        return UpstreamError("REQUEST_TIMEOUT", fallback_transport)
    if isinstance(exc, ApiPayloadError):
        return UpstreamError(default_code, default_message, meta={"status": exc.status})
    if isinstance(exc, ApiServerError):
        return UpstreamError(
            default_code, exc.detail or default_message, meta={"status": exc.status}
        )
    if isinstance(exc, ApiError):
        if exc.status is not None and 400 <= exc.status < 500:
            return rejection_cls(
                default_code, exc.detail or default_message, meta={"status": exc.status}
            )
        return UpstreamError(default_code, exc.detail or default_message, meta={"status": exc.status})
    return UpstreamError(default_code, fallback_transport)


__all__ = ["map_api_error"]
