"""Runtime settings for the destination form and its remote services.

Values come from three layers, applied in order: dataclass defaults, the
``user_settings.json`` file written by ``StorageLocal``, and ``DESTMAP_*``
environment variables. This module only validates and converts; reading and
writing files is the caller's job.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..domain.entities import MAX_IMAGE_BYTES
from ..utils.logging import env_requests_debug

ENV_PREFIX = "DESTMAP_"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    backend_url: str = ""
    cloudinary_cloud_name: str = ""
    cloudinary_upload_preset: str = ""
    places_api_key: str = ""
    request_timeout_s: int = 30
    upload_timeout_s: int = 120
    success_delay_ms: int = 1500
    reset_after_success: bool = False
    max_image_bytes: int = MAX_IMAGE_BYTES


def _as_text(name: str, value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_flag(name: str, value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _as_count(name: str, value: Any) -> int:
    """Accept ints, floats and numeric strings; reject bools and negatives."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{name} must be an integer.")
    try:
        number = int(value.strip()) if isinstance(value, str) else int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if number < 0:
        raise ValueError(f"{name} must be non-negative.")
    return number


_COERCERS: Dict[str, Callable[[str, Any], Any]] = {
    f.name: {"str": _as_text, "int": _as_count, "bool": _as_flag}[f.type]
    for f in fields(SettingsConfig)
}
_CONFIG_KEYS = tuple(_COERCERS)


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = env_requests_debug()

    # ---------- Read-through properties ----------
    @property
    def backend_url(self) -> str:
        return self.config.backend_url

    @backend_url.setter
    def backend_url(self, value: str) -> None:
        self.config = replace(self.config, backend_url=_as_text("backend_url", value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @property
    def upload_timeout_s(self) -> int:
        return self.config.upload_timeout_s

    @property
    def success_delay_ms(self) -> int:
        return self.config.success_delay_ms

    @property
    def reset_after_success(self) -> bool:
        return self.config.reset_after_success

    @property
    def max_image_bytes(self) -> int:
        return self.config.max_image_bytes

    @property
    def image_upload_enabled(self) -> bool:
        return bool(self.config.cloudinary_cloud_name and self.config.cloudinary_upload_preset)

    # ---------- Validation ----------
    def is_valid(self) -> bool:
        """A backend URL plus positive timeouts and size limit."""
        cfg = self.config
        return bool(cfg.backend_url) and min(
            cfg.request_timeout_s, cfg.upload_timeout_s, cfg.max_image_bytes
        ) > 0

    # ---------- Loading ----------
    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Merge a flat settings mapping into the current config.

        Raises:
            ValueError: For non-mappings, unknown keys, or values that cannot
                be converted. Nothing is applied in that case.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")
        unknown = sorted(str(key) for key in payload if key not in _COERCERS and key != "debug_logging")
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(unknown)}")

        updates = {key: _COERCERS[key](key, payload[key]) for key in _CONFIG_KEYS if key in payload}
        debug = _as_flag("debug_logging", payload["debug_logging"]) if "debug_logging" in payload else None

        if updates:
            self.config = replace(self.config, **updates)
        if debug is not None:
            self.debug_logging = debug

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Apply ``DESTMAP_<KEY>`` environment variables on top of current values.

        Blank variables are ignored so an exported-but-empty name does not
        wipe a value from the settings file.
        """
        env = os.environ if environ is None else environ
        found = {}
        for key in _CONFIG_KEYS:
            raw = env.get(ENV_PREFIX + key.upper())
            if raw and raw.strip():
                found[key] = raw
        if found:
            self.apply_dict(found)

    # ---------- Persistence ----------
    def to_dict(self) -> dict:
        return {**asdict(self.config), "debug_logging": bool(self.debug_logging)}

    def set_debug_logging(self, enabled: bool) -> None:
        self.debug_logging = _as_flag("debug_logging", enabled)

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
