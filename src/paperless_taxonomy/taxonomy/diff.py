"""Compare a taxonomy definition with the live remote inventory."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from .definition import TaxonomyDefinition
from .errors import GatewayUnavailable
from .gateway import TaxonomyGateway
from .types import APPLY_ORDER, DesiredResource, RemoteResource, ResourceKind, TaxonomyDiff

_logger = logging.getLogger(__name__)


def fetch_inventory(
    gateway: TaxonomyGateway,
    *,
    max_workers: int = 4,
) -> dict[ResourceKind, list[RemoteResource]]:
    """List every resource kind from ``gateway``.

    The four list calls are read-only and independent, so they run in a thread
    pool unless ``max_workers`` is 0.

    Raises
    ------
    GatewayUnavailable
        If any list call fails. Other exceptions from the gateway are wrapped.
    """
    inventory: dict[ResourceKind, list[RemoteResource]] = {}

    if max_workers == 0:
        for kind in APPLY_ORDER:
            inventory[kind] = _list_kind(gateway, kind)
        return inventory

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(_list_kind, gateway, kind): kind for kind in APPLY_ORDER}
        try:
            for future in as_completed(futures):
                inventory[futures[future]] = future.result()
        except GatewayUnavailable:
            for future in futures:
                future.cancel()
            raise
    return inventory


def _list_kind(gateway: TaxonomyGateway, kind: ResourceKind) -> list[RemoteResource]:
    try:
        return list(gateway.list(kind))
    except GatewayUnavailable:
        raise
    except Exception as exc:  # noqa: BLE001 - any list failure makes the diff unsafe
        raise GatewayUnavailable(f"Could not list {kind.value}s: {exc}", kind=kind) from exc


def _missing(
    desired: tuple[DesiredResource, ...],
    remote: list[RemoteResource],
) -> tuple[tuple[DesiredResource, ...], tuple[str, ...]]:
    present = {item.match_key for item in remote}
    new: list[DesiredResource] = []
    skipped: list[str] = []
    for resource in desired:
        if resource.match_key in present:
            skipped.append(resource.natural_key)
        else:
            new.append(resource)
    return tuple(new), tuple(skipped)


def detect_changes(
    definition: TaxonomyDefinition,
    gateway: TaxonomyGateway,
    *,
    max_workers: int = 4,
) -> TaxonomyDiff:
    """Return the resources of ``definition`` that do not exist remotely.

    Matching is by natural key: case-insensitive names for tags, document
    types and custom fields, normalized path strings for storage paths.
    Declaration order is kept within each kind. Never writes to the remote.

    Raises
    ------
    GatewayUnavailable
        If any inventory cannot be listed; no partial diff is returned.
    """
    inventory = fetch_inventory(gateway, max_workers=max_workers)

    buckets: dict[ResourceKind, tuple[tuple[DesiredResource, ...], tuple[str, ...]]] = {
        kind: _missing(definition.of_kind(kind), inventory[kind]) for kind in APPLY_ORDER
    }
    diff = TaxonomyDiff(
        new_tags=buckets[ResourceKind.TAG][0],
        new_document_types=buckets[ResourceKind.DOCUMENT_TYPE][0],
        new_storage_paths=buckets[ResourceKind.STORAGE_PATH][0],
        new_custom_fields=buckets[ResourceKind.CUSTOM_FIELD][0],
        skipped_tags=buckets[ResourceKind.TAG][1],
        skipped_document_types=buckets[ResourceKind.DOCUMENT_TYPE][1],
        skipped_storage_paths=buckets[ResourceKind.STORAGE_PATH][1],
        skipped_custom_fields=buckets[ResourceKind.CUSTOM_FIELD][1],
        country=definition.country,
    )
    _logger.info(
        "Taxonomy diff for %s: %d tags, %d document types, %d storage paths, %d custom fields to create",
        definition.country,
        len(diff.new_tags),
        len(diff.new_document_types),
        len(diff.new_storage_paths),
        len(diff.new_custom_fields),
    )
    return diff


__all__ = ["detect_changes", "fetch_inventory"]
