"""Session persistence over an injected key-value store."""

from __future__ import annotations

from .entities import Session
from .ports import KeyValueStore

USERNAME_KEY = "username"
PASSWORD_KEY = "password"
VERIFIED_KEY = "isVerified"
SESSION_KEYS = (USERNAME_KEY, PASSWORD_KEY, VERIFIED_KEY)


def load_session(store: KeyValueStore) -> Session:
    """Read the persisted session; missing keys yield an unverified, empty one."""
    return Session(
        username=store.get(USERNAME_KEY) or "",
        password=store.get(PASSWORD_KEY) or "",
        verified=(store.get(VERIFIED_KEY) or "") == "true",
    )


def save_session(store: KeyValueStore, session: Session) -> None:
    store.set(USERNAME_KEY, session.username)
    store.set(PASSWORD_KEY, session.password)
    store.set(VERIFIED_KEY, "true" if session.verified else "false")


def clear_session(store: KeyValueStore) -> None:
    store.remove(*SESSION_KEYS)


__all__ = [
    "SESSION_KEYS",
    "clear_session",
    "load_session",
    "save_session",
]
