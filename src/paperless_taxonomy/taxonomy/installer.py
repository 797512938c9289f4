"""Apply a taxonomy diff, rolling back everything on failure."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from tqdm import tqdm

from .errors import ApplyCancelled, CreationFailed, TaxonomyRolledBack
from .gateway import TaxonomyGateway
from .types import AppliedCounts, CreatedResourceRecord, TaxonomyDiff, UpdateResult

_logger = logging.getLogger(__name__)


class TransactionalInstaller:
    """Create the resources of a diff as one all-or-nothing run.

    Resources are created strictly in sequence: tags, document types, storage
    paths, then custom fields, each kind in declaration order. Every successful
    create is appended to a ledger owned by that ``apply`` call. The first
    failure stops the run and the ledger is deleted in reverse creation order.
    """

    def __init__(self, gateway: TaxonomyGateway, *, show_progress: bool = False) -> None:
        self._gateway = gateway
        self.show_progress = show_progress

    def apply(
        self,
        diff: TaxonomyDiff,
        *,
        cancel: Optional[threading.Event] = None,
        step: str = "update",
    ) -> UpdateResult:
        """Create every resource in ``diff``.

        Parameters
        ----------
        diff
            Diff computed from the current remote state.
        cancel
            Checked before each create; once set, no further resources are
            created and the run is rolled back.
        step
            Name of the calling operation, used in error messages.

        Returns
        -------
        UpdateResult
            Success with per-kind counts. An empty diff makes no gateway calls.

        Raises
        ------
        TaxonomyRolledBack
            If a create failed or the run was cancelled. Its ``orphaned`` list
            names resources rollback could not delete.
        """
        ledger: list[CreatedResourceRecord] = []

        with tqdm(total=len(diff), desc=f"Applying taxonomy {step}", unit=" resources",
                  disable=not self.show_progress) as pbar:
            try:
                for resource in diff:
                    if cancel is not None and cancel.is_set():
                        raise ApplyCancelled(
                            f"Cancelled before creating {resource.kind.value} {resource.natural_key!r}"
                        )
                    try:
                        remote = self._gateway.create(resource)
                    except CreationFailed:
                        raise
                    except Exception as exc:  # noqa: BLE001 - any create failure triggers rollback
                        raise CreationFailed(
                            f"Could not create {resource.kind.value} {resource.natural_key!r}: {exc}",
                            kind=resource.kind,
                            natural_key=resource.natural_key,
                        ) from exc
                    ledger.append(CreatedResourceRecord(resource.kind, remote.id))
                    _logger.debug("Created %s %r (id=%s)", resource.kind.value, resource.natural_key, remote.id)
                    pbar.update(1)
            except (CreationFailed, ApplyCancelled) as exc:
                _logger.warning("Taxonomy %s failed after %d creation(s): %s", step, len(ledger), exc)
                orphaned = self.rollback(ledger)
                raise TaxonomyRolledBack(exc, step=step, orphaned=orphaned) from exc

        applied = AppliedCounts.from_ledger(ledger)
        _logger.info("Taxonomy %s created %d resource(s): %s", step, applied.total, applied.as_dict())
        return UpdateResult(success=True, applied=applied, diff=diff)

    def rollback(self, ledger: Sequence[CreatedResourceRecord]) -> list[tuple[CreatedResourceRecord, str]]:
        """Delete ledger entries last-created-first.

        Every entry is attempted even if earlier deletes fail, and cancellation
        is not consulted.

        Returns
        -------
        list[tuple[CreatedResourceRecord, str]]
            Entries that could not be deleted, with the failure message.
        """
        orphaned: list[tuple[CreatedResourceRecord, str]] = []
        for record in reversed(ledger):
            try:
                self._gateway.delete(record.kind, record.id)
            except Exception as exc:  # noqa: BLE001 - keep deleting the remaining entries
                _logger.warning("Rollback could not delete %s %s: %s", record.kind.value, record.id, exc)
                orphaned.append((record, str(exc)))
        if ledger:
            _logger.info(
                "Rolled back %d of %d created resource(s)",
                len(ledger) - len(orphaned),
                len(ledger),
            )
        return orphaned


__all__ = ["TransactionalInstaller"]
