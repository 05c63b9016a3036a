from __future__ import annotations

import pytest

pytest.importorskip("requests")

from destmap.adapters.api_errors import ApiClientError
from destmap.adapters.google_places import DETAIL_FIELDS, GooglePlacesAdapter
from destmap.tests.unit.doubles import FakeResponse, FakeSession, place_payload

BASE = "https://maps.googleapis.com/maps/api/place"


def _adapter(responses) -> tuple[GooglePlacesAdapter, FakeSession]:
    session = FakeSession(responses)
    return GooglePlacesAdapter("key-123", session=session), session


def test_predict_returns_place_ids_and_descriptions() -> None:
    adapter, session = _adapter(
        {
            ("GET", f"{BASE}/autocomplete/json"): FakeResponse(
                200,
                {
                    "status": "OK",
                    "predictions": [
                        {"place_id": "p1", "description": "Victoria Memorial, Kolkata"},
                        {"description": "no id"},
                    ],
                },
            )
        }
    )

    assert adapter.predict(" Victoria ") == [
        {"place_id": "p1", "description": "Victoria Memorial, Kolkata"}
    ]
    assert session.calls[0]["params"] == {"input": "Victoria", "key": "key-123"}


def test_predict_blank_query_makes_no_request() -> None:
    adapter, session = _adapter({})

    assert adapter.predict("   ") == []
    assert session.calls == []


def test_predict_zero_results_is_empty() -> None:
    adapter, _ = _adapter(
        {("GET", f"{BASE}/autocomplete/json"): FakeResponse(200, {"status": "ZERO_RESULTS"})}
    )

    assert adapter.predict("zzz") == []


def test_details_requests_selection_fields() -> None:
    adapter, session = _adapter(
        {
            ("GET", f"{BASE}/details/json"): FakeResponse(
                200, {"status": "OK", "result": place_payload()}
            )
        }
    )

    result = adapter.details("p1")

    assert result["name"] == "Victoria Memorial"
    assert session.calls[0]["params"]["fields"] == DETAIL_FIELDS
    assert session.calls[0]["params"]["place_id"] == "p1"


def test_provider_status_error_raises_client_error() -> None:
    adapter, _ = _adapter(
        {
            ("GET", f"{BASE}/autocomplete/json"): FakeResponse(
                200, {"status": "REQUEST_DENIED", "error_message": "API key invalid"}
            )
        }
    )

    with pytest.raises(ApiClientError) as excinfo:
        adapter.predict("Kolkata")
    assert excinfo.value.detail == "API key invalid"
