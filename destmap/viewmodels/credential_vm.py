from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..domain.entities import Session
from ..domain.ports import SchedulerPort, UseCaseError
from ..domain.session import clear_session, save_session
from ..usecases.upload_workflow import COMPLETION_KEY
from ..usecases.verify_credentials import VerifyCredentials
from .autocomplete_vm import AutocompleteVM
from .form_vm import DestinationFormVM

LOGGER = logging.getLogger(__name__)

VERIFIED_MESSAGE = "Password verified! You can upload now."


@dataclass(frozen=True)
class VerifyOutcome:
    """Result of one verification attempt (``ok`` plus the message shown)."""

    ok: bool
    message: str
    username: str = ""


class CredentialGateVM:
    """Owns the Unverified -> Verified -> (reset) -> Unverified cycle.

    The gate is the only writer of the persisted session: it saves the pair
    after a successful check and wipes it on ``reset``.
    """

    def __init__(
        self,
        form: DestinationFormVM,
        uc_verify: VerifyCredentials,
        *,
        autocomplete: Optional[AutocompleteVM] = None,
        scheduler: Optional[SchedulerPort] = None,
    ) -> None:
        self.form = form
        self.uc_verify = uc_verify
        self.autocomplete = autocomplete
        self.scheduler = scheduler

    @property
    def verified(self) -> bool:
        return self.form.state.verified

    def verify(
        self, username: Optional[str] = None, password: Optional[str] = None
    ) -> VerifyOutcome:
        """Check the pair (defaults to the form fields) against the backend."""
        state = self.form.state
        username = state.username if username is None else username
        password = state.password if password is None else password
        self.form.surface.clear()
        try:
            normalized = self.uc_verify(username=username, password=password)
        except UseCaseError as err:
            LOGGER.info("Verification failed (%s)", err.code)
            state.verified = False
            self.form.surface.show(err.message)
            return VerifyOutcome(ok=False, message=err.message)

        save_session(
            self.form.store,
            Session(username=normalized, password=password, verified=True),
        )
        state.username = username
        state.password = password
        state.verified = True
        LOGGER.info("Verified user %s", normalized)
        self.form.surface.show(VERIFIED_MESSAGE)
        return VerifyOutcome(ok=True, message=VERIFIED_MESSAGE, username=normalized)

    def reset(self) -> None:
        """Forget the session and return the whole form to its empty state."""
        if self.scheduler is not None:
            # a completion from the previous user must not touch the next form
            self.scheduler.cancel(COMPLETION_KEY)
        clear_session(self.form.store)
        self.form.clear()
        self.form.surface.clear()
        if self.autocomplete is not None:
            # The place input is unmounted with the destination fields; the
            # view re-attaches when it renders the next one.
            self.autocomplete.detach()
        LOGGER.info("Credentials reset")


__all__ = ["CredentialGateVM", "VERIFIED_MESSAGE", "VerifyOutcome"]
