from __future__ import annotations

import pytest

from destmap.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiPayloadError,
    ApiServerError,
    ensure_ok,
    first_string,
    json_dict,
)
from destmap.tests.unit.doubles import FakeResponse


def test_ensure_ok_passes_2xx() -> None:
    ensure_ok(FakeResponse(204, None), "ctx")


def test_ensure_ok_4xx_carries_backend_error_text() -> None:
    with pytest.raises(ApiClientError) as excinfo:
        ensure_ok(FakeResponse(401, {"error": "Incorrect password"}), "verify_password")

    err = excinfo.value
    assert err.status == 401
    assert err.detail == "Incorrect password"
    assert err.context == "verify_password"
    assert "Incorrect password" in str(err)


def test_ensure_ok_5xx_is_server_error() -> None:
    with pytest.raises(ApiServerError) as excinfo:
        ensure_ok(FakeResponse(503, {"message": "down"}), "list_users")
    assert excinfo.value.detail == "down"


def test_ensure_ok_plain_text_body_has_no_detail() -> None:
    resp = FakeResponse(500, ValueError("not json"), text="<html>oops</html>")
    with pytest.raises(ApiServerError) as excinfo:
        ensure_ok(resp, "save_metadata")
    assert excinfo.value.detail is None
    assert excinfo.value.payload == "<html>oops</html>"


def test_ensure_ok_unexpected_status_is_generic_api_error() -> None:
    with pytest.raises(ApiError) as excinfo:
        ensure_ok(FakeResponse(302, {}), "ctx")
    assert type(excinfo.value) is ApiError


def test_first_string_walks_nested_payloads() -> None:
    assert first_string({"error": {"message": "Upload preset not found"}}) == "Upload preset not found"
    assert first_string([{}, {"detail": "x"}]) == "x"
    assert first_string({"error": "   "}) is None


def test_json_dict_rejects_non_objects() -> None:
    with pytest.raises(ApiPayloadError):
        json_dict(FakeResponse(200, ["a"]), "ctx")
    with pytest.raises(ApiPayloadError):
        json_dict(FakeResponse(200, ValueError("bad"), text="nope"), "ctx")
    assert json_dict(FakeResponse(200, {"a": 1}), "ctx") == {"a": 1}
