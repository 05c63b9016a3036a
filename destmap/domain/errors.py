"""Domain-level error taxonomy for the destination upload workflow.

Every failure that reaches the form is one of these four kinds. Adapters raise
transport errors; ``destmap.usecases.error_mapping`` converts them into the
matching subclass so view models only ever see ``UseCaseError``.
"""

from __future__ import annotations

from .ports import UseCaseError


class ValidationError(UseCaseError):
    """Input rejected locally; no network call was made."""


class AuthorizationError(UseCaseError):
    """Credential check rejected by the backend."""


class NotFoundError(UseCaseError):
    """Username is not present in the user registry."""


class UpstreamError(UseCaseError):
    """Non-2xx, malformed payload, or transport failure from a remote service."""


__all__ = [
    "AuthorizationError",
    "NotFoundError",
    "UpstreamError",
    "UseCaseError",
    "ValidationError",
]
