from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class ResultSurfaceVM:
    """Single-slot status message plus the last uploaded image URL.

    Every write replaces the previous content; nothing is accumulated.
    """

    on_change: Optional[Callable[["ResultSurfaceVM"], None]] = None

    message: str = ""
    image_url: str = ""

    def show(self, message: str, image_url: Optional[str] = None) -> None:
        self.message = message or ""
        self.image_url = image_url or ""
        self._notify()

    def clear(self) -> None:
        self.message = ""
        self.image_url = ""
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)
