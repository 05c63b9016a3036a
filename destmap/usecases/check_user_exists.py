"""Use case confirming a username is present in the user registry."""

from __future__ import annotations

from dataclasses import dataclass

from destmap.domain.errors import NotFoundError
from destmap.domain.naming import registry_username
from destmap.domain.ports import BackendPort, UseCaseError
from destmap.usecases.error_mapping import map_api_error

NOT_FOUND_MESSAGE = "User does not exist. Please register first."
LIST_FAILED_MESSAGE = "Error checking user existence"


@dataclass
class CheckUserExists:
    """Match the registry form of ``username`` against ``/api/user/list``."""

    backend: BackendPort

    def __call__(self, username: str) -> str:
        """Return the registry name (``"Rohit"``) when the user is registered."""
        wanted = registry_username(username)
        try:
            users = self.backend.list_users()
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="USER_LIST_FAILED",
                default_message=LIST_FAILED_MESSAGE,
                transport_message=LIST_FAILED_MESSAGE,
            ) from exc
        if not wanted or wanted not in users:
            raise NotFoundError("USER_NOT_FOUND", NOT_FOUND_MESSAGE)
        return wanted


__all__ = ["CheckUserExists"]
