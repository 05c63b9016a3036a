from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..domain.coordinates import format_coordinates
from ..domain.places import extract_selection
from ..domain.ports import PlacesPort
from .form_vm import DestinationFormVM

LOGGER = logging.getLogger(__name__)


class AutocompleteVM:
    """Binds the places provider to one place-input element and fills the form.

    The provider listens on a specific element instance, so the binding is
    keyed by the element's identity: ``attach`` with the same id is a no-op,
    a new id (the input was remounted) replaces the old binding, and
    ``detach`` drops it. Selections arriving while detached are ignored.
    """

    def __init__(self, form: DestinationFormVM, provider: Optional[PlacesPort] = None) -> None:
        self.form = form
        self.provider = provider
        self.bound_element: Optional[str] = None
        self.attach_count = 0

    @property
    def is_attached(self) -> bool:
        return self.bound_element is not None

    def attach(self, element_id: str) -> bool:
        """Bind to ``element_id``; return ``True`` when a new binding was made."""
        if not element_id:
            raise ValueError("element_id is required")
        if self.bound_element == element_id:
            return False
        if self.bound_element is not None:
            self.detach()
        self.bound_element = element_id
        self.attach_count += 1
        LOGGER.debug("Autocomplete attached to %s", element_id)
        return True

    def detach(self) -> None:
        if self.bound_element is not None:
            LOGGER.debug("Autocomplete detached from %s", self.bound_element)
        self.bound_element = None

    # ---------- Provider round-trips ----------
    def suggest(self, query: str) -> List[Dict[str, Any]]:
        """Return predictions for typed text; provider failures yield none."""
        if self.provider is None or not self.is_attached:
            return []
        try:
            return self.provider.predict(query)
        except Exception as exc:
            LOGGER.warning("Place predictions failed: %s", exc)
            return []

    def select(self, place_id: str) -> bool:
        """Resolve a chosen prediction and apply it to the form."""
        if self.provider is None or not self.is_attached:
            return False
        try:
            payload = self.provider.details(place_id)
        except Exception as exc:
            LOGGER.warning("Place details failed for %s: %s", place_id, exc)
            return False
        return self.apply_selection(payload)

    # ---------- Selection handler ----------
    def apply_selection(self, payload: Mapping[str, Any]) -> bool:
        """Copy place, region, country and coordinates from a provider payload.

        Region and country are taken as found (empty when the provider has no
        such component). Coordinates and place name keep their current values
        when the payload lacks geometry or a name.
        """
        if not self.is_attached:
            LOGGER.debug("Ignoring place selection while detached")
            return False
        selection = extract_selection(payload)
        if selection is None:
            return False

        state = self.form.state
        coordinates = state.coordinates
        if selection.has_geometry:
            coordinates = format_coordinates(selection.latitude, selection.longitude)

        state.place = selection.name or state.place
        state.administrative_region = selection.administrative_region
        state.country = selection.country
        state.coordinates = coordinates
        return True


__all__ = ["AutocompleteVM"]
