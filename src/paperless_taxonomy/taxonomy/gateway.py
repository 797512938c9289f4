"""Remote taxonomy gateways.

A gateway is the narrow capability the reconciliation core needs from the
remote system: list, create and delete for each ``ResourceKind``.
``PaperlessGateway`` talks to a live server through :class:`Paperless`;
``InMemoryGateway`` keeps everything in dicts and is what the tests use.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import Any, Callable, Iterable, Optional, TYPE_CHECKING

import requests

from .errors import CreationFailed, DeletionFailed, GatewayUnavailable
from .types import DesiredResource, RemoteResource, ResourceKind, match_key

if TYPE_CHECKING:  # pragma: no cover
    from ..client import Paperless

_logger = logging.getLogger(__name__)


class TaxonomyGateway(abc.ABC):
    """List/create/delete access to the remote taxonomy."""

    @abc.abstractmethod
    def list(self, kind: ResourceKind) -> list[RemoteResource]:
        """Return every remote resource of ``kind``.

        Raises
        ------
        GatewayUnavailable
            If the inventory cannot be fetched completely.
        """

    @abc.abstractmethod
    def create(self, resource: DesiredResource) -> RemoteResource:
        """Create ``resource`` remotely and return it with its remote id.

        Raises
        ------
        CreationFailed
            If the remote rejects the resource or the call fails.
        """

    @abc.abstractmethod
    def delete(self, kind: ResourceKind, resource_id: int) -> None:
        """Delete a resource. Only ever called by rollback.

        Raises
        ------
        DeletionFailed
            If the resource is gone or the call fails.
        """

    def find(self, kind: ResourceKind, natural_key: str) -> Optional[RemoteResource]:
        """Look up a remote resource by natural key; ``None`` when absent."""
        wanted = match_key(kind, natural_key)
        for remote in self.list(kind):
            if remote.match_key == wanted:
                return remote
        return None


class PaperlessGateway(TaxonomyGateway):
    """Gateway backed by the paperless-ngx REST client."""

    def __init__(self, client: "Paperless") -> None:
        self._client = client

    def _resource(self, kind: ResourceKind):
        return {
            ResourceKind.TAG: self._client.tags,
            ResourceKind.DOCUMENT_TYPE: self._client.document_types,
            ResourceKind.STORAGE_PATH: self._client.storage_paths,
            ResourceKind.CUSTOM_FIELD: self._client.custom_fields,
        }[kind]

    @staticmethod
    def _to_remote(kind: ResourceKind, item: dict[str, Any]) -> Optional[RemoteResource]:
        key_field = "path" if kind is ResourceKind.STORAGE_PATH else "name"
        item_id = item.get("id")
        natural_key = item.get(key_field)
        if not isinstance(item_id, int) or not isinstance(natural_key, str):
            return None
        return RemoteResource(kind, item_id, natural_key)

    def list(self, kind: ResourceKind) -> list[RemoteResource]:
        try:
            items = self._resource(kind).list()
        except requests.RequestException as exc:
            raise GatewayUnavailable(f"Could not list {kind.value}s: {exc}", kind=kind) from exc
        if items is None:
            raise GatewayUnavailable(f"Could not list {kind.value}s", kind=kind)

        output: list[RemoteResource] = []
        for item in items:
            remote = self._to_remote(kind, dict(item))
            if remote is None:
                _logger.warning("Ignoring malformed %s in listing: %s", kind.value, item)
                continue
            output.append(remote)
        return output

    def create(self, resource: DesiredResource) -> RemoteResource:
        kind = resource.kind
        attrs = resource.attributes
        target = self._resource(kind)
        try:
            if kind is ResourceKind.TAG:
                created = target.add(resource.natural_key, color=attrs.get("color"), validation="strict")
            elif kind is ResourceKind.DOCUMENT_TYPE:
                created = target.add(resource.natural_key, validation="strict")
            elif kind is ResourceKind.STORAGE_PATH:
                created = target.add(resource.natural_key, name=attrs.get("name"), validation="strict")
            else:
                created = target.add(
                    resource.natural_key,
                    attrs.get("data_type", "string"),
                    options=attrs.get("options"),
                    validation="strict",
                )
        except (requests.RequestException, ValueError) as exc:
            raise CreationFailed(
                f"Could not create {kind.value} {resource.natural_key!r}: {exc}",
                kind=kind,
                natural_key=resource.natural_key,
            ) from exc
        remote = self._to_remote(kind, dict(created)) if created is not None else None
        if remote is None:
            raise CreationFailed(
                f"Paperless rejected {kind.value} {resource.natural_key!r}",
                kind=kind,
                natural_key=resource.natural_key,
            )
        return remote

    def delete(self, kind: ResourceKind, resource_id: int) -> None:
        try:
            deleted = self._resource(kind).delete(resource_id, validation="strict")
        except (requests.RequestException, ValueError) as exc:
            raise DeletionFailed(
                f"Could not delete {kind.value} {resource_id}: {exc}",
                kind=kind,
                resource_id=resource_id,
            ) from exc
        if not deleted:
            raise DeletionFailed(
                f"Paperless refused to delete {kind.value} {resource_id}",
                kind=kind,
                resource_id=resource_id,
            )


class InMemoryGateway(TaxonomyGateway):
    """Dictionary-backed gateway with failure injection.

    Parameters
    ----------
    fail_list
        Kinds whose ``list`` raises ``GatewayUnavailable``.
    fail_create
        Called with each resource before it is created; a returned string
        makes the create fail with that message.
    fail_delete
        Remote ids whose ``delete`` raises ``DeletionFailed``.
    """

    def __init__(
        self,
        *,
        fail_list: Iterable[ResourceKind] = (),
        fail_create: Optional[Callable[[DesiredResource], Optional[str]]] = None,
        fail_delete: Iterable[int] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._next_id = 1
        self._store: dict[ResourceKind, dict[int, RemoteResource]] = {kind: {} for kind in ResourceKind}
        self.fail_list = set(fail_list)
        self.fail_create = fail_create
        self.fail_delete = set(fail_delete)
        self.calls: list[tuple[str, ResourceKind, object]] = []

    def seed(self, kind: ResourceKind, natural_key: str) -> RemoteResource:
        """Add a resource directly, without recording a create call."""
        with self._lock:
            remote = RemoteResource(kind, self._next_id, natural_key)
            self._store[kind][remote.id] = remote
            self._next_id += 1
        return remote

    def inventory(self, kind: ResourceKind) -> list[RemoteResource]:
        with self._lock:
            return list(self._store[kind].values())

    def calls_of(self, operation: str) -> list[tuple[str, ResourceKind, object]]:
        return [call for call in self.calls if call[0] == operation]

    def list(self, kind: ResourceKind) -> list[RemoteResource]:
        with self._lock:
            self.calls.append(("list", kind, None))
            if kind in self.fail_list:
                raise GatewayUnavailable(f"Could not list {kind.value}s: connection refused", kind=kind)
            return list(self._store[kind].values())

    def create(self, resource: DesiredResource) -> RemoteResource:
        with self._lock:
            self.calls.append(("create", resource.kind, resource.natural_key))
            message = self.fail_create(resource) if self.fail_create else None
            if message:
                raise CreationFailed(
                    f"Could not create {resource.kind.value} {resource.natural_key!r}: {message}",
                    kind=resource.kind,
                    natural_key=resource.natural_key,
                )
            remote = RemoteResource(resource.kind, self._next_id, resource.natural_key)
            self._store[resource.kind][remote.id] = remote
            self._next_id += 1
            return remote

    def delete(self, kind: ResourceKind, resource_id: int) -> None:
        with self._lock:
            self.calls.append(("delete", kind, resource_id))
            if resource_id in self.fail_delete or resource_id not in self._store[kind]:
                raise DeletionFailed(
                    f"Could not delete {kind.value} {resource_id}: not found",
                    kind=kind,
                    resource_id=resource_id,
                )
            del self._store[kind][resource_id]


__all__ = ["InMemoryGateway", "PaperlessGateway", "TaxonomyGateway"]
