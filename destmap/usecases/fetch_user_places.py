"""Use case reading a user's destinations for the map page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from destmap.domain.entities import PlaceRecord
from destmap.domain.ports import BackendPort

LOGGER = logging.getLogger(__name__)


@dataclass
class FetchUserPlaces:
    """Return the user's place records; failures render as an empty map."""

    backend: BackendPort

    def __call__(self, username: str) -> List[PlaceRecord]:
        name = (username or "").strip()
        if not name:
            return []
        try:
            payloads = self.backend.fetch_places(name)
        except Exception as exc:
            LOGGER.warning("Error fetching places for %s: %s", name, exc)
            return []
        return [PlaceRecord.from_payload(item) for item in payloads]


__all__ = ["FetchUserPlaces"]
