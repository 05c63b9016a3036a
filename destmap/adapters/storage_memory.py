from __future__ import annotations

from typing import MutableMapping, Optional

from destmap.domain.ports import KeyValueStore


class MappingStore(KeyValueStore):
    """Key-value store over any mutable mapping.

    Backs the session with a plain ``dict`` in tests and with NiceGUI's
    per-browser ``app.storage.user`` in the web runtime.
    """

    def __init__(self, mapping: Optional[MutableMapping[str, str]] = None) -> None:
        self.mapping: MutableMapping[str, str] = {} if mapping is None else mapping

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.mapping.get(key)
        return default if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self.mapping[key] = str(value)

    def remove(self, *keys: str) -> None:
        for key in keys:
            self.mapping.pop(key, None)


__all__ = ["MappingStore"]
