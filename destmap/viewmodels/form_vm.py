from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..domain.entities import MAX_IMAGE_BYTES, FormState, ImageFile, SubmissionResult
from ..domain.naming import normalize_username
from ..domain.ports import KeyValueStore
from ..domain.session import load_session
from .result_vm import ResultSurfaceVM

LOGGER = logging.getLogger(__name__)

USERNAME_LOCKED_MESSAGE = 'To change username, please click on "Change User" first.'
PASSWORD_LOCKED_MESSAGE = 'Password is locked. Click on "Change User" to use another account.'
FILE_TOO_LARGE_MESSAGE = "File size must be <= 10MB"

TEXT_FIELDS = (
    "username",
    "password",
    "place",
    "administrative_region",
    "country",
    "coordinates",
)
IMAGE_FIELD = "image"

SubmitFn = Callable[[FormState, Optional[Callable[[], None]]], SubmissionResult]


@dataclass
class DestinationFormVM:
    """Form state store plus the field-change handler.

    - `state`: the one mutable ``FormState`` that will be submitted
    - `change()`: the only sanctioned way for views to edit fields; enforces
      the verification lock and the image size limit
    - `cmd_submit()`: hands the state to the injected workflow and pushes the
      outcome into the result surface

    A fresh instance is seeded from the persisted session so a reload keeps
    the verified identity.
    """

    store: KeyValueStore
    surface: ResultSurfaceVM = field(default_factory=ResultSurfaceVM)
    submit_workflow: Optional[SubmitFn] = None
    on_upload_success: Optional[Callable[[], None]] = None
    max_image_bytes: int = MAX_IMAGE_BYTES

    state: FormState = field(init=False)

    def __post_init__(self) -> None:
        session = load_session(self.store)
        self.state = FormState(
            username=session.username,
            password=session.password,
            verified=session.verified,
        )

    # ---------- Flags ----------
    @property
    def verified(self) -> bool:
        return self.state.verified

    @property
    def uploading(self) -> bool:
        return self.state.uploading

    @property
    def password_locked(self) -> bool:
        return self.state.verified

    @property
    def can_submit(self) -> bool:
        return self.state.verified and not self.state.uploading

    @property
    def stored_identity(self) -> str:
        return load_session(self.store).username

    # ---------- Field-change handler ----------
    def change(self, name: str, value: Any) -> bool:
        """Apply one field edit; return ``False`` when it was rejected.

        Rejections are reported through the result surface and never raise.
        Unknown field names are programming errors and raise ``ValueError``.
        """
        if name == IMAGE_FIELD:
            return self._change_image(value)
        if name not in TEXT_FIELDS:
            raise ValueError(f"Unknown form field: {name}")

        text = "" if value is None else str(value)
        if name == "username" and self.state.verified:
            if normalize_username(text) != self.stored_identity:
                self.surface.show(USERNAME_LOCKED_MESSAGE)
                return False
        if name == "password" and self.state.verified:
            if text != self.state.password:
                self.surface.show(PASSWORD_LOCKED_MESSAGE)
                return False

        setattr(self.state, name, text)
        return True

    def _change_image(self, value: Optional[ImageFile]) -> bool:
        # a new selection always clears the previous outcome
        self.surface.clear()
        if value is None:
            self.state.image = None
            return True
        if not isinstance(value, ImageFile):
            raise TypeError("image must be an ImageFile or None")
        if value.size > self.max_image_bytes:
            LOGGER.info("Rejected image %s (%d bytes)", value.filename, value.size)
            self.state.image = None
            self.surface.show(FILE_TOO_LARGE_MESSAGE)
            return False
        self.state.image = value
        return True

    # ---------- Commands ----------
    def cmd_submit(self) -> SubmissionResult:
        """Run the injected workflow and publish its outcome."""
        if self.submit_workflow is None:
            raise RuntimeError("No submit workflow configured")
        result = self.submit_workflow(self.state, self.on_upload_success)
        self.surface.show(result.message, result.image_url if result.ok else None)
        return result

    def clear(self) -> None:
        self.state.clear()

    def clear_destination(self) -> None:
        """Empty the place fields and image; credentials and flags stay."""
        self.state.place = ""
        self.state.administrative_region = ""
        self.state.country = ""
        self.state.coordinates = ""
        self.state.image = None
