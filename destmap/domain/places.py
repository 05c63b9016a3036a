"""Extraction of form fields from a places-provider selection payload."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .entities import PlaceSelection

REGION_COMPONENT = "administrative_area_level_1"
COUNTRY_COMPONENT = "country"


def extract_selection(payload: Mapping[str, Any]) -> Optional[PlaceSelection]:
    """Read name, region, country and geometry from a provider place payload.

    Returns ``None`` when the payload carries no ``address_components`` (the
    user pressed enter on free text instead of picking a prediction). The last
    component tagged with a given type wins.
    """
    components = payload.get("address_components") if isinstance(payload, Mapping) else None
    if not components:
        return None

    region = ""
    country = ""
    for component in components:
        if not isinstance(component, Mapping):
            continue
        types = component.get("types") or ()
        name = str(component.get("long_name") or "")
        if REGION_COMPONENT in types:
            region = name
        if COUNTRY_COMPONENT in types:
            country = name

    latitude, longitude = _location(payload.get("geometry"))
    return PlaceSelection(
        name=str(payload.get("name") or ""),
        administrative_region=region,
        country=country,
        latitude=latitude,
        longitude=longitude,
    )


def _location(geometry: Any) -> tuple[Optional[float], Optional[float]]:
    if not isinstance(geometry, Mapping):
        return None, None
    location = geometry.get("location")
    if not isinstance(location, Mapping):
        return None, None
    try:
        return float(location["lat"]), float(location["lng"])
    except (KeyError, TypeError, ValueError):
        return None, None


__all__ = ["COUNTRY_COMPONENT", "REGION_COMPONENT", "extract_selection"]
