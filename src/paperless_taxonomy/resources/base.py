"""Base resource helpers."""

from __future__ import annotations

from typing import Any, Optional, TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:  # pragma: no cover
    from ..client import Paperless


class Resource:
    """Shared helpers for resource classes."""

    def __init__(self, client: "Paperless") -> None:
        self._client = client

    @property
    def _logger(self):
        return self._client._logger

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._client.request(method, path, params=params, json=json, timeout=timeout)

    def _get(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("GET", path, params=params, timeout=timeout)

    def _post(
        self,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("POST", path, json=json, timeout=timeout)

    def _delete(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("DELETE", path, params=params, timeout=timeout)

    def _get_all(
        self,
        path: str,
        *,
        page_size: int = 100,
        timeout: Optional[int] = None,
    ) -> list[dict[str, Any]] | None:
        """Fetch every page of a paginated collection.

        Paperless list endpoints answer with ``{"count", "next", "results"}``;
        ``next`` is an absolute URL which is reduced to its path and query so it
        goes through the client like any other request.

        Returns
        -------
        list[dict] or None
            All results in server order, or ``None`` if any page fails.
        """
        results: list[dict[str, Any]] = []
        next_path: Optional[str] = path
        params: Optional[dict[str, Any]] = {"page_size": page_size}
        while next_path:
            response = self._get(next_path, params=params, timeout=timeout)
            if not isinstance(response, dict):
                return None
            page = response.get("results")
            if not isinstance(page, list):
                self._logger.warning("Response from %s missing expected results list.", next_path)
                return None
            results.extend(item for item in page if isinstance(item, dict))

            next_url = response.get("next")
            if isinstance(next_url, str) and next_url:
                parts = urlsplit(next_url)
                next_path = parts.path + (f"?{parts.query}" if parts.query else "")
                # The next link already carries page and page_size
                params = None
            else:
                next_path = None
        return results

    def _created(self, response: object, what: str) -> dict[str, Any] | None:
        """Return the created object from a POST response, or None."""
        if isinstance(response, dict) and "id" in response:
            return response
        if response is not None:
            self._logger.warning("Create %s response missing expected data. Response was %s", what, response)
        return None

    def _delete_each(self, collection: str, ids: list[int], *, timeout: Optional[int] = None) -> bool:
        """Delete ``/<collection>/<id>/`` for each id, stopping at the first failure."""
        for item_id in ids:
            response = self._delete(f"/{collection}/{item_id}/", timeout=timeout)
            if response is None:
                return False
        return True
