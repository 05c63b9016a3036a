from __future__ import annotations

import json

import pytest

from destmap.adapters.storage_local import StorageLocal
from destmap.viewmodels.settings_vm import default_settings_payload


def test_load_user_settings_missing_file_returns_none(tmp_path) -> None:
    assert StorageLocal(root_dir=str(tmp_path)).load_user_settings() is None


def test_save_and_load_user_settings_round_trip(tmp_path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    payload = default_settings_payload()
    payload["backend_url"] = "http://backend.test"

    storage.save_user_settings(payload)

    assert storage.load_user_settings() == payload
    assert not list(tmp_path.glob("user_settings_*.tmp"))


def test_load_user_settings_rejects_non_object(tmp_path) -> None:
    (tmp_path / "user_settings.json").write_text(json.dumps(["nope"]), encoding="utf-8")

    with pytest.raises(ValueError):
        StorageLocal(root_dir=str(tmp_path)).load_user_settings()
