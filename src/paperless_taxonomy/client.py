"""Core paperless-ngx client with a raw-request escape hatch."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from .resources.custom_fields import CustomFields
from .resources.document_types import DocumentTypes
from .resources.storage_paths import StoragePaths
from .resources.tags import Tags

DEFAULT_URL = os.environ.get("PAPERLESS_URL", "http://localhost:8000")
DEFAULT_TOKEN = os.environ.get("PAPERLESS_API_TOKEN")
DEFAULT_TIMEOUT = int(os.environ.get("PAPERLESS_TIMEOUT", "20"))


class Paperless:
    """Resource-grouped client for the taxonomy endpoints of the paperless-ngx API."""

    tags: Tags
    document_types: DocumentTypes
    storage_paths: StoragePaths
    custom_fields: CustomFields

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        default_timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        """Create a client bound to a paperless-ngx instance.

        Parameters
        ----------
        base_url
            Root URL of the paperless-ngx server, without the ``/api`` suffix.
        token
            API token sent as ``Authorization: Token <token>``.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        raise_on_error
            If True, raise HTTP errors instead of returning None.
        """
        self.base_url = (base_url or DEFAULT_URL).rstrip("/")
        self.token = token if token is not None else DEFAULT_TOKEN
        self.default_timeout = default_timeout or DEFAULT_TIMEOUT
        self.raise_on_error = raise_on_error
        self._logger = logging.getLogger(__name__)
        self._session = session

        self.tags = Tags(self)
        self.document_types = DocumentTypes(self)
        self.storage_paths = StoragePaths(self)
        self.custom_fields = CustomFields(self)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Paperless":
        """Build a client from ``PAPERLESS_URL`` and ``PAPERLESS_API_TOKEN``.

        Raises
        ------
        ValueError
            If either variable is unset.
        """
        base_url = os.environ.get("PAPERLESS_URL")
        token = os.environ.get("PAPERLESS_API_TOKEN")
        if not base_url or not token:
            raise ValueError("PAPERLESS_URL and PAPERLESS_API_TOKEN must be set in the environment")
        return cls(base_url=base_url, token=token, **kwargs)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Token {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """Send a raw request to the paperless-ngx API.

        Parameters
        ----------
        method
            HTTP method (GET, POST, PATCH, DELETE).
        path
            Endpoint path, with or without a leading ``/api``.
        params
            Query parameters for the request.
        json
            JSON payload for the request.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        dict | list | None
            Parsed JSON payload, ``{}`` for a successful empty response, or None
            on failure or non-JSON content.
        """
        if not path.startswith("/"):
            path = "/" + path
        if not path.startswith("/api/"):
            path = "/api" + path
        url = f"{self.base_url}{path}"

        requester = self._session or requests
        try:
            response = requester.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            if self.raise_on_error:
                raise
            error_msg = str(exc)
            try:
                error_body = response.json()
                if isinstance(error_body, dict):
                    if "detail" in error_body:
                        error_msg = f"{exc}\nDetails: {error_body['detail']}"
                    elif error_body:
                        # Field validation errors come back keyed by field name
                        error_msg = f"{exc}\nServer errors: {error_body}"
            except (ValueError, AttributeError, KeyError):
                pass  # Response wasn't JSON or didn't have expected fields
            self._logger.warning("Request failed for %s %s: %s", method, url, error_msg)
            return None
        except Exception as exc:  # noqa: BLE001 - surface request failures
            if self.raise_on_error:
                raise
            self._logger.warning("Request failed for %s %s: %s", method, url, exc)
            return None

        if not response.content:
            # DELETE answers 204 with no body
            return {}
        try:
            payload = response.json()
        except ValueError:  # noqa: PERF203 - only attempt JSON when present
            self._logger.warning("Response from %s %s was not JSON", method, url)
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None
