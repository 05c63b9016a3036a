"""Use case for checking a username/password pair against the backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from destmap.domain.errors import AuthorizationError, ValidationError
from destmap.domain.naming import normalize_username
from destmap.domain.ports import BackendPort, UseCaseError
from destmap.usecases.error_mapping import map_api_error

REJECTED_MESSAGE = "Incorrect password!"
TRANSPORT_MESSAGE = "Error verifying password"


@dataclass
class VerifyCredentials:
    """POST the normalised pair to ``/api/user/verify-password``."""

    backend: BackendPort

    def __call__(
        self,
        *,
        username: str,
        password: str,
        rejected_message: Optional[str] = None,
        transport_message: Optional[str] = None,
    ) -> str:
        """Return the normalised username when the backend accepts the pair.

        Raises:
            ValidationError: blank username or password (no request sent).
            AuthorizationError: backend rejected the pair (4xx).
            UpstreamError: 5xx, timeout, or connectivity failure.
        """
        normalized = normalize_username(username)
        if not normalized:
            raise ValidationError("USERNAME_REQUIRED", "Username is required.")
        if not password:
            raise ValidationError("PASSWORD_REQUIRED", "Password is required.")
        try:
            self.backend.verify_password(normalized, password)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="AUTH_FAILED",
                default_message=rejected_message or REJECTED_MESSAGE,
                rejection_cls=AuthorizationError,
                transport_message=transport_message or TRANSPORT_MESSAGE,
            ) from exc
        return normalized


__all__ = ["VerifyCredentials"]
