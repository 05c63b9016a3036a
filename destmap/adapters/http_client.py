"""Shared HTTP transport utilities for REST adapters.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations share one timeout policy and one way of turning transport
failures into typed errors.

Dependencies:
    - ``requests`` for network I/O.
    - ``destmap.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by ``BackendRestAdapter``, ``CloudinaryUploadAdapter`` and
      ``GooglePlacesAdapter``.
    - Used only inside adapter layer methods; use cases interact through ports.

Failed requests are never retried. The user resubmits instead.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from requests import exceptions as req_exc

from destmap.adapters.api_errors import ApiTimeoutError


@dataclass
class HttpConfig:
    """Timeout configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for JSON API calls.
        upload_timeout_s: Timeout in seconds for multipart uploads.
    """
    request_timeout_s: float = 30
    upload_timeout_s: float = 120


class HttpSession:
    """Shared requests wrapper applying timeouts and typed transport errors.

    This class is intentionally transport-only. Callers provide endpoint URLs and
    decide how to map non-2xx responses into use-case errors.
    """

    def __init__(self, cfg: Optional[HttpConfig] = None) -> None:
        """Create a session.

        Args:
            cfg: Shared timeout settings; defaults to ``HttpConfig()``.

        Side Effects:
            Creates a persistent ``requests.Session`` object.
        """
        self.session = requests.Session()
        self.cfg = cfg or HttpConfig()

    @staticmethod
    def _headers(accept: str = "application/json", json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": accept}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def get(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send a GET request.

        Args:
            url: Absolute endpoint URL.
            params: Optional query parameter mapping.
            timeout: Optional timeout override in seconds.

        Returns:
            ``requests.Response`` regardless of HTTP status.

        Raises:
            ApiTimeoutError: On timeout or connectivity failure.
        """
        context = f"GET {url}"
        try:
            return self.session.get(
                url,
                params=dict(params) if params else None,
                headers=self._headers(),
                timeout=timeout or self.cfg.request_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send a JSON POST request.

        Raises:
            ApiTimeoutError: On timeout or connectivity failure.

        Side Effects:
            Serializes ``json_body`` with ``json.dumps`` before sending.
        """
        context = f"POST {url}"
        data = None if json_body is None else json.dumps(json_body)
        try:
            return self.session.post(
                url,
                data=data,
                headers=self._headers(json_body=json_body is not None),
                timeout=timeout or self.cfg.request_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc

    def post_multipart(
        self,
        url: str,
        *,
        files: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send a multipart POST request.

        Args:
            url: Absolute endpoint URL.
            files: Multipart mapping consumed by ``requests``. Plain form fields
                are passed as ``(None, value)`` tuples.
            timeout: Optional timeout override in seconds.

        Raises:
            ApiTimeoutError: On timeout or connectivity failure.
        """
        context = f"POST {url}"
        try:
            return self.session.post(
                url,
                files=files,
                headers=self._headers(),
                timeout=timeout or self.cfg.upload_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc


def form_fields(fields: Mapping[str, str]) -> Dict[str, Any]:
    """Encode plain text fields for ``post_multipart`` (browser ``FormData`` shape)."""
    return {name: (None, "" if value is None else str(value)) for name, value in fields.items()}


def join_url(base: str, path: str) -> str:
    """Join a base URL and an absolute path without doubling slashes."""
    if base.endswith("/"):
        base = base[:-1]
    return f"{base}{path}"


__all__ = ["HttpConfig", "HttpSession", "form_fields", "join_url"]
