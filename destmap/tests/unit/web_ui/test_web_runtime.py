from __future__ import annotations

import json

import pytest

pytest.importorskip("requests")

from destmap.adapters.storage_local import JsonFileStore
from destmap.adapters.storage_memory import MappingStore
from destmap.usecases.check_user_exists import CheckUserExists
from destmap.usecases.fetch_user_places import FetchUserPlaces
from destmap.usecases.save_place_metadata import SavePlaceMetadata
from destmap.usecases.verify_credentials import VerifyCredentials
from destmap.web_ui.runtime import DEFAULT_MAP_USER, WebRuntime
from destmap.tests.unit.doubles import BackendDouble, ManualScheduler


def _runtime(tmp_path, **settings) -> WebRuntime:
    payload = {"backend_url": "http://backend.test"}
    payload.update(settings)
    (tmp_path / "user_settings.json").write_text(json.dumps(payload), encoding="utf-8")
    return WebRuntime(storage_root=str(tmp_path), environ={})


def _use_backend(runtime: WebRuntime, backend: BackendDouble) -> None:
    controller = runtime.controller
    controller.ensure_ready()
    controller.uc_verify = VerifyCredentials(backend)
    controller.uc_user_exists = CheckUserExists(backend)
    controller.uc_save_metadata = SavePlaceMetadata(backend)
    controller.uc_fetch_places = FetchUserPlaces(backend)


def test_runtime_loads_settings_file_then_environment(tmp_path) -> None:
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"backend_url": "http://file.test", "success_delay_ms": 900}), encoding="utf-8"
    )

    runtime = WebRuntime(
        storage_root=str(tmp_path), environ={"DESTMAP_BACKEND_URL": "http://env.test"}
    )

    assert runtime.settings_vm.backend_url == "http://env.test"
    assert runtime.settings_vm.success_delay_ms == 900


def test_runtime_ignores_broken_settings_file(tmp_path) -> None:
    (tmp_path / "user_settings.json").write_text("{not json", encoding="utf-8")

    runtime = WebRuntime(storage_root=str(tmp_path), environ={})

    assert runtime.settings_vm.backend_url == ""
    assert runtime.ensure_ready() is False
    with pytest.raises(RuntimeError):
        runtime.open_form(MappingStore())


def test_save_settings_writes_file(tmp_path) -> None:
    runtime = _runtime(tmp_path)
    runtime.apply_settings_payload({"success_delay_ms": 10})

    runtime.save_settings()

    stored = json.loads((tmp_path / "user_settings.json").read_text(encoding="utf-8"))
    assert stored["success_delay_ms"] == 10


def test_open_form_runs_full_cycle(tmp_path) -> None:
    runtime = _runtime(tmp_path, reset_after_success=True)
    backend = BackendDouble(users=["Rohit"], passwords={"rohit": "pw"})
    _use_backend(runtime, backend)
    scheduler = ManualScheduler()
    saved = []
    backing: dict = {}

    session = runtime.open_form(
        MappingStore(backing), scheduler=scheduler, on_saved=lambda: saved.append(True)
    )
    session.gate.verify("Rohit", "pw")
    session.form.change("place", "Howrah Bridge")
    session.form.change("coordinates", "22.58, 88.34")
    result = session.form.cmd_submit()

    assert result.ok
    assert session.form.surface.message == "New destination unlocked!"
    assert backend.saved[0]["place"] == "Howrah Bridge"
    assert session.form.state.place == "Howrah Bridge"

    scheduler.fire("upload-complete")

    assert saved == [True]
    assert session.form.state.place == ""
    assert session.form.state.username == "Rohit"
    assert backing["isVerified"] == "true"


def test_map_places_defaults_user_and_skips_unplaceable(tmp_path) -> None:
    runtime = _runtime(tmp_path)
    backend = BackendDouble(
        places=[
            {"place": "Howrah Bridge", "latitude": 22.58, "longitude": 88.34},
            {"place": "Nowhere", "latitude": "", "longitude": ""},
        ]
    )
    _use_backend(runtime, backend)

    records = runtime.map_places("")

    assert [record.place for record in records] == ["Howrah Bridge"]
    assert backend.fetch_calls == [DEFAULT_MAP_USER]


def test_saved_callback_sees_cleared_form(tmp_path) -> None:
    runtime = _runtime(tmp_path, reset_after_success=True)
    backend = BackendDouble(users=["Rohit"], passwords={"rohit": "pw"})
    _use_backend(runtime, backend)
    scheduler = ManualScheduler()
    seen = []
    holder = {}

    def on_saved() -> None:
        # the page redraws its inputs from this state
        seen.append((holder["session"].form.state.place, holder["session"].form.state.coordinates))

    session = runtime.open_form(MappingStore({}), scheduler=scheduler, on_saved=on_saved)
    holder["session"] = session
    session.gate.verify("Rohit", "pw")
    session.form.change("place", "Howrah Bridge")
    session.form.change("coordinates", "22.58, 88.34")
    session.form.cmd_submit()

    scheduler.fire("upload-complete")

    assert seen == [("", "")]
    session.form.change("place", "Victoria Memorial")
    session.form.change("coordinates", "22.54, 88.34")
    assert session.form.cmd_submit().ok
    assert [row["place"] for row in backend.saved] == ["Howrah Bridge", "Victoria Memorial"]


def test_change_user_drops_pending_completion(tmp_path) -> None:
    runtime = _runtime(tmp_path, reset_after_success=True)
    backend = BackendDouble(users=["Rohit", "Asha"], passwords={"rohit": "pw", "asha": "pw2"})
    _use_backend(runtime, backend)
    scheduler = ManualScheduler()
    saved = []

    session = runtime.open_form(
        MappingStore({}), scheduler=scheduler, on_saved=lambda: saved.append(True)
    )
    session.gate.verify("Rohit", "pw")
    session.form.change("place", "Howrah Bridge")
    session.form.change("coordinates", "22.58, 88.34")
    session.form.cmd_submit()

    session.gate.reset()
    session.gate.verify("Asha", "pw2")
    session.form.change("place", "Marina Beach")

    assert scheduler.pending == {}
    assert saved == []
    assert session.form.state.place == "Marina Beach"


def test_session_store_uses_pinned_json_file(tmp_path) -> None:
    session_file = tmp_path / "session.json"
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"backend_url": "http://backend.test"}), encoding="utf-8"
    )
    runtime = WebRuntime(
        storage_root=str(tmp_path), environ={"DESTMAP_SESSION_FILE": str(session_file)}
    )
    _use_backend(runtime, BackendDouble(passwords={"rohit": "pw"}))
    fallback = MappingStore({})

    store = runtime.session_store(fallback)
    runtime.open_form(store).gate.verify("Rohit", "pw")

    assert isinstance(store, JsonFileStore)
    assert json.loads(session_file.read_text(encoding="utf-8")) == {
        "username": "rohit",
        "password": "pw",
        "isVerified": "true",
    }
    assert runtime.open_form(runtime.session_store(MappingStore({}))).form.verified


def test_session_store_falls_back_without_file(tmp_path) -> None:
    runtime = _runtime(tmp_path)
    fallback = MappingStore({})

    assert runtime.session_store(fallback) is fallback
