"""Install and update entry points over the diff engine and installer."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Iterable, Optional

from .definition import TaxonomyDefinition
from .diff import detect_changes
from .errors import TaxonomyRolledBack
from .gateway import TaxonomyGateway
from .installer import TransactionalInstaller
from .types import AppliedCounts, TaxonomyDiff, UpdateOptions, UpdateResult

_logger = logging.getLogger(__name__)


class UpdaterState(str, Enum):
    IDLE = "idle"
    APPLYING = "applying"


class TaxonomyUpdater:
    """Keep a remote taxonomy in line with a definition.

    Nothing is cached between calls: every ``install``/``update`` lists the
    remote inventory again. Calls are not serialized against each other, so
    run at most one against a given server at a time.
    """

    def __init__(
        self,
        gateway: TaxonomyGateway,
        *,
        max_workers: int = 4,
        show_progress: bool = False,
        raise_on_error: bool = True,
    ) -> None:
        """Create an updater.

        Parameters
        ----------
        gateway
            Access to the remote taxonomy.
        max_workers
            Threads used for the inventory reads; 0 lists sequentially.
        show_progress
            Show a progress bar while creating resources.
        raise_on_error
            If False, a rolled-back apply returns a failed ``UpdateResult``
            carrying the error text instead of raising ``TaxonomyRolledBack``.
        """
        self._gateway = gateway
        self.raise_on_error = raise_on_error
        self.max_workers = max_workers
        self._installer = TransactionalInstaller(gateway, show_progress=show_progress)
        self._state = UpdaterState.IDLE

    @property
    def state(self) -> UpdaterState:
        return self._state

    def detect_changes(
        self,
        definition: TaxonomyDefinition,
        *,
        domains: Optional[Iterable[str]] = None,
    ) -> TaxonomyDiff:
        """Diff ``definition`` (optionally restricted to ``domains``) against the remote."""
        scoped = definition.for_domains(tuple(domains) if domains is not None else None)
        return detect_changes(scoped, self._gateway, max_workers=self.max_workers)

    def install(
        self,
        definition: TaxonomyDefinition,
        *,
        domains: Optional[Iterable[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> UpdateResult:
        """Create every resource of ``definition`` that is missing remotely.

        Intended for first-time population; resources that already exist are
        skipped and reported in the result's diff.

        Raises
        ------
        GatewayUnavailable
            If the remote inventory cannot be listed.
        TaxonomyRolledBack
            If a create failed; nothing from this call remains except the
            resources listed in ``orphaned``.
        """
        diff = self.detect_changes(definition, domains=domains)
        return self._apply(diff, cancel=cancel, step="install")

    def update(
        self,
        definition: TaxonomyDefinition,
        options: Optional[UpdateOptions] = None,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> UpdateResult:
        """Apply only what is missing remotely.

        Returns a zero-count success without any write when nothing changed,
        or when ``options.dry_run`` is set. ``options.auto_approve`` does not
        gate additive creation.

        Raises
        ------
        GatewayUnavailable
            If the remote inventory cannot be listed.
        TaxonomyRolledBack
            If a create failed and the run was rolled back.
        """
        options = options or UpdateOptions()
        diff = self.detect_changes(definition, domains=options.domains)

        if not diff.has_changes:
            _logger.info("Taxonomy for %s is up to date", definition.country)
            return UpdateResult(success=True, applied=AppliedCounts(), diff=diff, dry_run=options.dry_run)

        if options.dry_run:
            _logger.info("Dry run: %d resource(s) would be created", len(diff))
            return UpdateResult(success=True, applied=AppliedCounts(), diff=diff, dry_run=True)

        # Retention changes to existing resources are not detected yet, so
        # there is nothing for auto_approve to hold back.
        return self._apply(diff, cancel=cancel, step="update")

    def _apply(
        self,
        diff: TaxonomyDiff,
        *,
        cancel: Optional[threading.Event],
        step: str,
    ) -> UpdateResult:
        if self._state is UpdaterState.APPLYING:
            _logger.warning("Starting a taxonomy %s while another apply is in flight", step)
        self._state = UpdaterState.APPLYING
        try:
            return self._installer.apply(diff, cancel=cancel, step=step)
        except TaxonomyRolledBack as exc:
            if self.raise_on_error:
                raise
            return UpdateResult(success=False, applied=AppliedCounts(), diff=diff, error=str(exc))
        finally:
            self._state = UpdaterState.IDLE


__all__ = ["TaxonomyUpdater", "UpdaterState"]
