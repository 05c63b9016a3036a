"""Controller turning a filled-in destination form into a persisted record.

The submit pipeline is an explicit, ordered tuple of named stages. Each stage
reads and extends a ``SubmissionContext`` and yields a tagged
``StageResult``; the controller folds over the stages and stops at the first
failure. No stage touches the caller's ``FormState`` except through the busy
flag, so a failed attempt leaves every field in place for correction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from destmap.domain.coordinates import INVALID_COORDINATES_MESSAGE, parse_coordinates
from destmap.domain.entities import Coordinates, FormState, StageResult, SubmissionResult
from destmap.domain.errors import ValidationError
from destmap.domain.ports import SchedulerPort, UseCaseError
from destmap.usecases.check_user_exists import CheckUserExists
from destmap.usecases.save_place_metadata import PlaceMetadata, SavePlaceMetadata
from destmap.usecases.upload_image import UploadImage
from destmap.usecases.verify_credentials import VerifyCredentials

LOGGER = logging.getLogger(__name__)

STAGE_REAUTHORIZE = "reauthorize"
STAGE_USER_EXISTS = "user_exists"
STAGE_COORDINATES = "coordinates"
STAGE_IMAGE_UPLOAD = "image_upload"
STAGE_METADATA = "metadata"
STAGE_BUSY = "busy"

SUCCESS_MESSAGE = "New destination unlocked!"
BUSY_MESSAGE = "Upload already in progress."
REAUTH_REJECTED_MESSAGE = "Not authorized. Please verify your credentials."
REAUTH_TRANSPORT_MESSAGE = "Error verifying credentials. Please try again."
DEFAULT_SUCCESS_DELAY_MS = 1500
COMPLETION_KEY = "upload-complete"


def _noop(*_: object, **__: object) -> None:
    """Default no-op callback used for hooks."""


@dataclass
class SubmissionContext:
    """Values accumulated while one submit attempt moves through the stages."""

    form: FormState
    """Detached snapshot of the form taken when the attempt started."""
    username: str = ""
    """Normalised username confirmed by the re-authorisation stage."""
    registry_name: str = ""
    """Registry display name confirmed by the existence check."""
    coordinates: Optional[Coordinates] = None
    image_url: str = ""
    """Secure URL returned by object storage; empty when no image was attached."""
    saved_image_url: str = ""
    """Image URL echoed back by the metadata endpoint."""


@dataclass(frozen=True)
class Stage:
    """One named pipeline step.

    ``action`` raises ``UseCaseError`` to fail; it may return a short note that
    ends up in the stage result (for logging and hooks).
    """

    name: str
    action: Callable[[SubmissionContext], Optional[str]]

    def execute(self, ctx: SubmissionContext) -> StageResult:
        try:
            note = self.action(ctx)
        except UseCaseError as err:
            return StageResult.failure(self.name, err.code, err.message)
        return StageResult.success(self.name, note or "")


@dataclass
class WorkflowHooks:
    """Optional observers for stage progress."""

    on_stage: Callable[[StageResult], None] = _noop
    on_finished: Callable[[SubmissionResult], None] = _noop

    def __post_init__(self) -> None:
        self.on_stage = self.on_stage or _noop
        self.on_finished = self.on_finished or _noop


@dataclass
class UploadWorkflowController:
    """Run the five-stage submit pipeline with a single-flight busy guard."""

    uc_verify: VerifyCredentials
    uc_user_exists: CheckUserExists
    uc_upload_image: UploadImage
    uc_save_metadata: SavePlaceMetadata
    scheduler: Optional[SchedulerPort] = None
    success_delay_ms: int = DEFAULT_SUCCESS_DELAY_MS
    hooks: WorkflowHooks = field(default_factory=WorkflowHooks)

    @property
    def stages(self) -> Sequence[Stage]:
        return (
            Stage(STAGE_REAUTHORIZE, self._reauthorize),
            Stage(STAGE_USER_EXISTS, self._check_user_exists),
            Stage(STAGE_COORDINATES, self._validate_coordinates),
            Stage(STAGE_IMAGE_UPLOAD, self._upload_image),
            Stage(STAGE_METADATA, self._save_metadata),
        )

    def submit(
        self,
        form: FormState,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> SubmissionResult:
        """Submit ``form`` and return the terminal outcome.

        ``form.uploading`` is held for the whole pipeline. A call made while it
        is already set is rejected without any network traffic. On success the
        optional ``on_complete`` callback fires after ``success_delay_ms``.
        """
        if form.uploading:
            result = SubmissionResult.failure(STAGE_BUSY, "UPLOAD_IN_PROGRESS", BUSY_MESSAGE)
            self.hooks.on_finished(result)
            return result

        form.uploading = True
        try:
            result = self._reduce(SubmissionContext(form=form.snapshot()))
        finally:
            form.uploading = False

        if result.ok:
            LOGGER.info("Destination saved for %s", form.username.strip().lower())
            if on_complete is not None:
                self._schedule_completion(on_complete)
        else:
            LOGGER.info("Submit aborted at %s: %s", result.stage, result.message)
        self.hooks.on_finished(result)
        return result

    # ------------------------------------------------------------------
    def _reduce(self, ctx: SubmissionContext) -> SubmissionResult:
        for stage in self.stages:
            outcome = stage.execute(ctx)
            self.hooks.on_stage(outcome)
            if not outcome.ok:
                if stage.name == STAGE_METADATA and ctx.image_url:
                    LOGGER.warning(
                        "Metadata save failed after image upload; orphaned asset %s",
                        ctx.image_url,
                    )
                return SubmissionResult.failure(outcome.stage, outcome.code, outcome.message)
            if outcome.message:
                LOGGER.debug("Stage %s: %s", outcome.stage, outcome.message)
        return SubmissionResult.success(SUCCESS_MESSAGE, ctx.saved_image_url or ctx.image_url)

    def _schedule_completion(self, callback: Callable[[], None]) -> None:
        if self.scheduler is None:
            callback()
            return
        self.scheduler.schedule(COMPLETION_KEY, self.success_delay_ms, callback)

    # ---- stages ------------------------------------------------------
    def _reauthorize(self, ctx: SubmissionContext) -> Optional[str]:
        ctx.username = self.uc_verify(
            username=ctx.form.username,
            password=ctx.form.password,
            rejected_message=REAUTH_REJECTED_MESSAGE,
            transport_message=REAUTH_TRANSPORT_MESSAGE,
        )
        return None

    def _check_user_exists(self, ctx: SubmissionContext) -> Optional[str]:
        ctx.registry_name = self.uc_user_exists(ctx.form.username)
        return ctx.registry_name

    def _validate_coordinates(self, ctx: SubmissionContext) -> Optional[str]:
        ctx.coordinates = parse_coordinates(ctx.form.coordinates)
        return str(ctx.coordinates)

    def _upload_image(self, ctx: SubmissionContext) -> Optional[str]:
        if ctx.form.image is None:
            ctx.image_url = ""
            return "skipped"
        ctx.image_url = self.uc_upload_image(ctx.form.image)
        return ctx.image_url

    def _save_metadata(self, ctx: SubmissionContext) -> Optional[str]:
        if ctx.coordinates is None:
            raise ValidationError("INVALID_COORDINATES", INVALID_COORDINATES_MESSAGE)
        metadata = PlaceMetadata(
            username=ctx.username,
            place=ctx.form.place,
            administrative_region=ctx.form.administrative_region,
            country=ctx.form.country,
            coordinates=ctx.coordinates,
            image_url=ctx.image_url,
        )
        ctx.saved_image_url = self.uc_save_metadata(metadata)
        return ctx.saved_image_url or None


__all__ = [
    "BUSY_MESSAGE",
    "COMPLETION_KEY",
    "STAGE_BUSY",
    "STAGE_COORDINATES",
    "STAGE_IMAGE_UPLOAD",
    "STAGE_METADATA",
    "STAGE_REAUTHORIZE",
    "STAGE_USER_EXISTS",
    "SUCCESS_MESSAGE",
    "Stage",
    "SubmissionContext",
    "UploadWorkflowController",
    "WorkflowHooks",
]
