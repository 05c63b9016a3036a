from __future__ import annotations

from destmap.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiPayloadError,
    ApiServerError,
    ApiTimeoutError,
)
from destmap.domain.errors import AuthorizationError, UpstreamError, ValidationError
from destmap.usecases.error_mapping import map_api_error


def _map(exc, **kwargs):
    params = {"default_code": "STEP_FAILED", "default_message": "Please try again!"}
    params.update(kwargs)
    return map_api_error(exc, **params)


def test_use_case_errors_pass_through() -> None:
    original = ValidationError("INVALID_COORDINATES", "Invalid latitude/longitude")
    assert _map(original) is original


def test_timeout_uses_transport_message() -> None:
    err = _map(ApiTimeoutError("Timeout contacting x"), transport_message="Error uploading file")

    assert isinstance(err, UpstreamError)
    assert err.code == "REQUEST_TIMEOUT"
    assert err.message == "Error uploading file"


def test_timeout_without_transport_message_falls_back_to_default() -> None:
    assert _map(ApiTimeoutError("t")).message == "Please try again!"


def test_client_error_prefers_backend_text() -> None:
    err = _map(ApiClientError("m", status=409, detail="Place already unlocked"))

    assert isinstance(err, UpstreamError)
    assert err.message == "Place already unlocked"
    assert err.meta == {"status": 409}


def test_client_error_uses_rejection_class() -> None:
    err = _map(ApiClientError("m", status=401), rejection_cls=AuthorizationError)

    assert isinstance(err, AuthorizationError)
    assert err.message == "Please try again!"


def test_server_error_is_upstream_with_detail() -> None:
    err = _map(ApiServerError("m", status=500, detail="db down"), rejection_cls=AuthorizationError)

    assert isinstance(err, UpstreamError)
    assert err.message == "db down"


def test_payload_error_uses_default_message() -> None:
    err = _map(ApiPayloadError("no secure_url", status=200), default_message="Image upload failed.")

    assert err.message == "Image upload failed."


def test_generic_and_unknown_errors() -> None:
    assert isinstance(_map(ApiError("m", status=302)), UpstreamError)
    err = _map(RuntimeError("boom"), transport_message="Error verifying password")
    assert isinstance(err, UpstreamError)
    assert err.message == "Error verifying password"
