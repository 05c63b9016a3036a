from __future__ import annotations

import pytest

pytest.importorskip("requests")

from destmap.app.controller import AppController
from destmap.viewmodels.settings_vm import SettingsVM


def test_controller_not_ready_without_backend_url() -> None:
    controller = AppController(SettingsVM())

    assert controller.ensure_ready() is False
    with pytest.raises(RuntimeError):
        controller.build_workflow()


def test_controller_ensure_ready_wires_usecases() -> None:
    settings = SettingsVM()
    settings.apply_dict(
        {
            "backend_url": "http://backend.test",
            "cloudinary_cloud_name": "demo",
            "cloudinary_upload_preset": "unsigned",
            "places_api_key": "key",
            "success_delay_ms": 250,
        }
    )
    controller = AppController(settings)

    assert controller.ensure_ready() is True
    assert controller.backend is not None
    assert controller.places is not None
    assert controller.uc_upload_image.storage is not None
    workflow = controller.build_workflow()
    assert workflow.success_delay_ms == 250
    assert workflow.uc_verify is controller.uc_verify


def test_optional_services_stay_unconfigured() -> None:
    settings = SettingsVM()
    settings.backend_url = "http://backend.test"
    controller = AppController(settings)

    controller.ensure_ready()

    assert controller.places is None
    assert controller.uc_upload_image.storage is None


def test_reset_rebuilds_from_current_settings() -> None:
    settings = SettingsVM()
    settings.backend_url = "http://old.test"
    controller = AppController(settings)
    controller.ensure_ready()

    settings.backend_url = "http://new.test"
    controller.reset()
    controller.ensure_ready()

    assert controller.backend.base_url == "http://new.test"
