"""Tests for the single-step use cases wrapping backend and storage ports."""

from __future__ import annotations

import pytest

from destmap.adapters.api_errors import (
    ApiClientError,
    ApiPayloadError,
    ApiServerError,
    ApiTimeoutError,
)
from destmap.domain.entities import Coordinates
from destmap.domain.errors import (
    AuthorizationError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from destmap.usecases.check_user_exists import CheckUserExists
from destmap.usecases.fetch_user_places import FetchUserPlaces
from destmap.usecases.save_place_metadata import PlaceMetadata, SavePlaceMetadata
from destmap.usecases.upload_image import UploadImage
from destmap.usecases.verify_credentials import VerifyCredentials
from destmap.tests.unit.doubles import BackendDouble, StorageDouble, make_image


# ---- VerifyCredentials ----
def test_verify_sends_normalised_username() -> None:
    backend = BackendDouble(passwords={"rohit": "pw"})

    assert VerifyCredentials(backend)(username="  Rohit ", password="pw") == "rohit"
    assert backend.verify_calls == [("rohit", "pw")]


def test_verify_rejection_surfaces_backend_text() -> None:
    backend = BackendDouble(passwords={"rohit": "pw"})

    with pytest.raises(AuthorizationError) as excinfo:
        VerifyCredentials(backend)(username="rohit", password="wrong")
    assert excinfo.value.message == "Incorrect password"


def test_verify_rejection_without_text_uses_fallback() -> None:
    backend = BackendDouble(verify_exc=ApiClientError("m", status=401))

    with pytest.raises(AuthorizationError) as excinfo:
        VerifyCredentials(backend)(username="rohit", password="pw")
    assert excinfo.value.message == "Incorrect password!"


def test_verify_transport_failure() -> None:
    backend = BackendDouble(verify_exc=ApiTimeoutError("Timeout contacting x"))

    with pytest.raises(UpstreamError) as excinfo:
        VerifyCredentials(backend)(username="rohit", password="pw")
    assert excinfo.value.message == "Error verifying password"


def test_verify_blank_fields_make_no_request() -> None:
    backend = BackendDouble()

    with pytest.raises(ValidationError):
        VerifyCredentials(backend)(username="  ", password="pw")
    with pytest.raises(ValidationError):
        VerifyCredentials(backend)(username="rohit", password="")
    assert backend.verify_calls == []


# ---- CheckUserExists ----
def test_user_exists_matches_registry_form() -> None:
    backend = BackendDouble(users=["Rohit", "Asha"])

    assert CheckUserExists(backend)(" rOHIT") == "Rohit"


def test_user_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        CheckUserExists(BackendDouble(users=["Rohit"]))("ghost")
    assert excinfo.value.message == "User does not exist. Please register first."


@pytest.mark.parametrize(
    "exc",
    [ApiServerError("m", status=500), ApiTimeoutError("t"), ApiPayloadError("m")],
)
def test_user_list_failure_is_upstream(exc) -> None:
    with pytest.raises(UpstreamError) as excinfo:
        CheckUserExists(BackendDouble(list_exc=exc))("rohit")
    assert excinfo.value.message == "Error checking user existence"


# ---- UploadImage ----
def test_upload_image_returns_secure_url() -> None:
    storage = StorageDouble(url="https://img.example/k.jpg")

    assert UploadImage(storage)(make_image(2)) == "https://img.example/k.jpg"


def test_upload_image_failures_use_generic_message() -> None:
    with pytest.raises(UpstreamError) as excinfo:
        UploadImage(StorageDouble(exc=ApiPayloadError("no secure_url")))(make_image(2))
    assert excinfo.value.message == "Image upload failed."

    with pytest.raises(UpstreamError) as excinfo:
        UploadImage(StorageDouble(url=""))(make_image(2))
    assert excinfo.value.message == "Image upload failed."


def test_upload_image_without_storage_configured() -> None:
    with pytest.raises(UpstreamError) as excinfo:
        UploadImage(None)(make_image(2))
    assert excinfo.value.code == "IMAGE_STORAGE_UNCONFIGURED"


# ---- SavePlaceMetadata ----
def _metadata(image_url: str = "") -> PlaceMetadata:
    return PlaceMetadata(
        username="rohit",
        place="Kolkata",
        administrative_region="West Bengal",
        country="India",
        coordinates=Coordinates("22.5", "88.3"),
        image_url=image_url,
    )


def test_save_metadata_serialises_wire_names() -> None:
    backend = BackendDouble(save_response={"imageUrl": "https://img.example/k.jpg"})

    assert SavePlaceMetadata(backend)(_metadata("https://img.example/k.jpg")) == "https://img.example/k.jpg"
    assert backend.saved == [
        {
            "username": "rohit",
            "place": "Kolkata",
            "state": "West Bengal",
            "country": "India",
            "latitude": "22.5",
            "longitude": "88.3",
            "imageUrl": "https://img.example/k.jpg",
        }
    ]


def test_save_metadata_missing_image_url_in_response_is_empty() -> None:
    backend = BackendDouble(save_response={})

    assert SavePlaceMetadata(backend)(_metadata()) == ""


def test_save_metadata_failures() -> None:
    backend = BackendDouble(save_exc=ApiClientError("m", status=400, detail="Place is required"))
    with pytest.raises(UpstreamError) as excinfo:
        SavePlaceMetadata(backend)(_metadata())
    assert excinfo.value.message == "Place is required"

    backend = BackendDouble(save_exc=ApiServerError("m", status=500))
    with pytest.raises(UpstreamError) as excinfo:
        SavePlaceMetadata(backend)(_metadata())
    assert excinfo.value.message == "Please try again!"


# ---- FetchUserPlaces ----
def test_fetch_places_builds_records() -> None:
    backend = BackendDouble(
        places=[{"place": "Kolkata", "state": "West Bengal", "latitude": "22.5", "longitude": "88.3"}]
    )

    records = FetchUserPlaces(backend)(" rohit ")

    assert backend.fetch_calls == ["rohit"]
    assert records[0].administrative_region == "West Bengal"
    assert records[0].has_position


def test_fetch_places_failure_renders_empty() -> None:
    backend = BackendDouble(places_exc=ApiServerError("m", status=500))

    assert FetchUserPlaces(backend)("rohit") == []
    assert FetchUserPlaces(backend)("   ") == []
    assert backend.fetch_calls == ["rohit"]
