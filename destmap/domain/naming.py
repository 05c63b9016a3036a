"""Username normalisation shared by the credential gate and the registry check."""

from __future__ import annotations


def normalize_username(raw: str) -> str:
    """Return the identity key sent to the backend: trimmed and lowercase."""
    return (raw or "").strip().lower()


def registry_username(raw: str) -> str:
    """Return the display form stored in the user registry.

    The registry lists names capitalised (``"Rohit"``), so the input is trimmed,
    the first character upper-cased and the remainder lower-cased.
    """
    text = (raw or "").strip()
    if not text:
        return ""
    return text[0].upper() + text[1:].lower()


__all__ = ["normalize_username", "registry_username"]
