"""Adapter and use-case wiring for the runtime.

This module owns lazy construction of concrete REST adapters and use-case
objects that depend on values in :class:`destmap.viewmodels.settings_vm.SettingsVM`.
It is invoked by the web runtime before any network action.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.backend_rest import BackendRestAdapter
from ..adapters.cloudinary_rest import CloudinaryUploadAdapter
from ..adapters.google_places import GooglePlacesAdapter
from ..domain.ports import SchedulerPort
from ..usecases.check_user_exists import CheckUserExists
from ..usecases.fetch_user_places import FetchUserPlaces
from ..usecases.save_place_metadata import SavePlaceMetadata
from ..usecases.upload_image import UploadImage
from ..usecases.upload_workflow import UploadWorkflowController
from ..usecases.verify_credentials import VerifyCredentials
from ..viewmodels.settings_vm import SettingsVM


class AppController:
    """Create and cache runtime adapters/use-cases from settings state.

    Call chain:
        ``destmap.web_ui.runtime.WebRuntime`` creates one instance and calls
        ``ensure_ready`` before building per-page form sessions.
    """

    def __init__(self, settings_vm: SettingsVM) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings state containing the backend URL, object
                storage credentials, places key, and timeouts.
        """
        self.settings_vm = settings_vm
        self._backend: Optional[BackendRestAdapter] = None
        self._storage: Optional[CloudinaryUploadAdapter] = None
        self._places: Optional[GooglePlacesAdapter] = None
        self.uc_verify: Optional[VerifyCredentials] = None
        self.uc_user_exists: Optional[CheckUserExists] = None
        self.uc_upload_image: Optional[UploadImage] = None
        self.uc_save_metadata: Optional[SavePlaceMetadata] = None
        self.uc_fetch_places: Optional[FetchUserPlaces] = None

    @property
    def backend(self) -> Optional[BackendRestAdapter]:
        return self._backend

    @property
    def places(self) -> Optional[GooglePlacesAdapter]:
        """Return the places adapter, or ``None`` when no API key is configured."""
        return self._places

    def reset(self) -> None:
        """Drop all cached adapters and use-cases.

        Side Effects:
            Clears runtime objects so the next ``ensure_ready`` call rebuilds
            everything from current settings values.
        """
        self._backend = None
        self._storage = None
        self._places = None
        self.uc_verify = None
        self.uc_user_exists = None
        self.uc_upload_image = None
        self.uc_save_metadata = None
        self.uc_fetch_places = None

    def ensure_ready(self) -> bool:
        """Ensure adapters/use-cases are available for network operations.

        Returns:
            ``True`` when dependencies are available, ``False`` when the
            backend URL is missing from settings.
        """
        if self._backend is not None:
            return True

        config = self.settings_vm.config
        if not config.backend_url:
            return False

        self._backend = BackendRestAdapter(
            config.backend_url, request_timeout_s=config.request_timeout_s
        )
        if self.settings_vm.image_upload_enabled:
            self._storage = CloudinaryUploadAdapter(
                config.cloudinary_cloud_name,
                config.cloudinary_upload_preset,
                upload_timeout_s=config.upload_timeout_s,
            )
        if config.places_api_key:
            self._places = GooglePlacesAdapter(
                config.places_api_key, request_timeout_s=config.request_timeout_s
            )

        self.uc_verify = VerifyCredentials(self._backend)
        self.uc_user_exists = CheckUserExists(self._backend)
        self.uc_upload_image = UploadImage(self._storage)
        self.uc_save_metadata = SavePlaceMetadata(self._backend)
        self.uc_fetch_places = FetchUserPlaces(self._backend)
        return True

    def build_workflow(self, scheduler: Optional[SchedulerPort] = None) -> UploadWorkflowController:
        """Return a workflow controller bound to the cached use-cases.

        Raises:
            RuntimeError: When settings do not allow building the adapters.
        """
        if not self.ensure_ready():
            raise RuntimeError("Backend URL is not configured.")
        return UploadWorkflowController(
            uc_verify=self.uc_verify,
            uc_user_exists=self.uc_user_exists,
            uc_upload_image=self.uc_upload_image,
            uc_save_metadata=self.uc_save_metadata,
            scheduler=scheduler,
            success_delay_ms=self.settings_vm.success_delay_ms,
        )
