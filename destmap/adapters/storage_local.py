from __future__ import annotations
import json, os, tempfile
from typing import Any, Dict, Optional
from destmap.domain.ports import KeyValueStore


class StorageLocal:
    """Local filesystem storage for user settings (JSON)."""

    SETTINGS_FILE = "user_settings.json"

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def settings_path(self) -> str:
        return os.path.join(self.root, self.SETTINGS_FILE)

    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        _atomic_write_json(self.settings_path, payload, prefix="user_settings_")

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        """Return the persisted settings mapping, or ``None`` when never saved."""
        path = self.settings_path
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        return data


class JsonFileStore(KeyValueStore):
    """Key-value store persisted as one flat JSON object on disk.

    The web runtime uses it for the credential session when
    ``DESTMAP_SESSION_FILE`` is set. Each write replaces the whole file so a
    reset never leaves a half-cleared session.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._read().get(key)
        return default if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove(self, *keys: str) -> None:
        data = self._read()
        changed = False
        for key in keys:
            if key in data:
                del data[key]
                changed = True
        if changed:
            self._write(data)

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        _atomic_write_json(self.path, data, prefix="session_")


def _atomic_write_json(path: str, payload: Dict[str, Any], *, prefix: str) -> None:
    # write to a sibling temp file, then rename over the target
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
