"""Runtime orchestration for the destmap web UI.

This module composes the viewmodels and use cases for one browser page. It
does not import NiceGUI; the page hands in the per-browser store and the
timer-backed scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional

from destmap.adapters.storage_local import JsonFileStore, StorageLocal
from destmap.app.controller import AppController
from destmap.app.delay_scheduler import DelayScheduler
from destmap.domain.entities import PlaceRecord
from destmap.domain.ports import KeyValueStore
from destmap.usecases.upload_workflow import UploadWorkflowController, WorkflowHooks
from destmap.utils.logging import apply_debug_preference
from destmap.viewmodels.autocomplete_vm import AutocompleteVM
from destmap.viewmodels.credential_vm import CredentialGateVM
from destmap.viewmodels.form_vm import DestinationFormVM
from destmap.viewmodels.result_vm import ResultSurfaceVM
from destmap.viewmodels.settings_vm import SettingsVM


LOGGER = logging.getLogger(__name__)

DEFAULT_MAP_USER = "rohit"
DEFAULT_MAP_CENTER = (22.57339112, 88.350074)
DEFAULT_MAP_ZOOM = 4
NOT_CONFIGURED_MESSAGE = "Backend URL is not configured. Set DESTMAP_BACKEND_URL."
SESSION_FILE_ENV = "DESTMAP_SESSION_FILE"


@dataclass
class FormSession:
    """Viewmodels bound to one mounted upload form."""

    form: DestinationFormVM
    gate: CredentialGateVM
    autocomplete: AutocompleteVM
    workflow: UploadWorkflowController
    scheduler: Optional[DelayScheduler] = None

    def close(self) -> None:
        """Drop pending timers and the provider binding when the page goes away."""
        if self.scheduler is not None:
            self.scheduler.cancel_all()
        self.autocomplete.detach()


class WebRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(
        self,
        *,
        storage_root: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.status_message = "Ready."
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.settings_vm = SettingsVM(on_save=self._persist_settings)
        self.storage = StorageLocal(
            root_dir=storage_root or self.environ.get("DESTMAP_STORAGE_ROOT") or "."
        )
        self.controller = AppController(self.settings_vm)

        self._load_settings_defaults(self.environ)
        apply_debug_preference(self.settings_vm.debug_logging)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        self.settings_vm.apply_dict(payload)
        self.controller.reset()
        apply_debug_preference(self.settings_vm.debug_logging)
        self.status_message = "Settings applied."

    def save_settings(self) -> None:
        self.settings_vm.cmd_save()
        self.status_message = "Settings saved."

    def ensure_ready(self) -> bool:
        if self.controller.ensure_ready():
            return True
        self.status_message = NOT_CONFIGURED_MESSAGE
        return False

    # ------------------------------------------------------------------
    # Form sessions
    # ------------------------------------------------------------------
    def session_store(self, fallback: KeyValueStore) -> KeyValueStore:
        """Return the Session store for a page.

        ``DESTMAP_SESSION_FILE`` pins every page to one JSON file (a single
        user on a kiosk or local install); otherwise ``fallback`` is used.
        """
        path = (self.environ.get(SESSION_FILE_ENV) or "").strip()
        return JsonFileStore(path) if path else fallback

    def open_form(
        self,
        store: KeyValueStore,
        *,
        scheduler: Optional[DelayScheduler] = None,
        on_surface_change: Optional[Callable[[ResultSurfaceVM], None]] = None,
        on_saved: Optional[Callable[[], None]] = None,
        hooks: Optional[WorkflowHooks] = None,
    ) -> FormSession:
        """Build the viewmodels for one page mount.

        ``store`` is the Session store (NiceGUI ``app.storage.user`` on the
        web page). ``on_saved`` runs after the success delay, once the new
        destination is persisted.

        Raises:
            RuntimeError: When the backend URL is not configured.
        """
        if not self.ensure_ready():
            raise RuntimeError(NOT_CONFIGURED_MESSAGE)

        surface = ResultSurfaceVM(on_change=on_surface_change)
        form = DestinationFormVM(
            store=store,
            surface=surface,
            max_image_bytes=self.settings_vm.max_image_bytes,
        )
        autocomplete = AutocompleteVM(form, provider=self.controller.places)
        gate = CredentialGateVM(
            form, self.controller.uc_verify, autocomplete=autocomplete, scheduler=scheduler
        )
        workflow = self.controller.build_workflow(scheduler)
        if hooks is not None:
            workflow.hooks = hooks

        def on_complete() -> None:
            if self.settings_vm.reset_after_success:
                form.clear_destination()
            if on_saved is not None:
                on_saved()

        form.submit_workflow = workflow.submit
        form.on_upload_success = on_complete
        return FormSession(
            form=form,
            gate=gate,
            autocomplete=autocomplete,
            workflow=workflow,
            scheduler=scheduler,
        )

    # ------------------------------------------------------------------
    # Map data
    # ------------------------------------------------------------------
    def map_places(self, username: Optional[str] = None) -> List[PlaceRecord]:
        """Return the user's places that can be drawn as markers."""
        if not self.ensure_ready():
            return []
        name = (username or "").strip() or DEFAULT_MAP_USER
        records = self.controller.uc_fetch_places(name)
        return [record for record in records if record.has_position]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load_settings_defaults(self, environ: Optional[Mapping[str, str]]) -> None:
        try:
            payload = self.storage.load_user_settings()
        except Exception as exc:
            LOGGER.warning("Could not load local settings defaults: %s", exc)
            payload = None
        if payload:
            try:
                self.settings_vm.apply_dict(payload)
            except Exception as exc:
                LOGGER.warning("Could not apply local settings defaults: %s", exc)
        # environment wins over the settings file
        self.settings_vm.apply_env(environ)

    def _persist_settings(self, payload: Dict[str, Any]) -> None:
        self.storage.save_user_settings(payload)
        self.controller.reset()
