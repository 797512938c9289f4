"""Exceptions raised by taxonomy reconciliation."""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .types import CreatedResourceRecord, ResourceKind


class TaxonomyError(Exception):
    """Base class for taxonomy errors."""


class InvalidResourceDefinition(TaxonomyError, ValueError):
    """A desired resource or definition failed validation."""


class GatewayError(TaxonomyError):
    """A remote call made through a gateway failed."""

    def __init__(self, message: str, *, kind: Optional["ResourceKind"] = None) -> None:
        super().__init__(message)
        self.kind = kind


class GatewayUnavailable(GatewayError):
    """A list call failed; no diff can be computed."""


class CreationFailed(GatewayError):
    """The remote rejected or failed a create call."""

    def __init__(
        self,
        message: str,
        *,
        kind: Optional["ResourceKind"] = None,
        natural_key: Optional[str] = None,
    ) -> None:
        super().__init__(message, kind=kind)
        self.natural_key = natural_key


class DeletionFailed(GatewayError):
    """A rollback delete call failed."""

    def __init__(
        self,
        message: str,
        *,
        kind: Optional["ResourceKind"] = None,
        resource_id: Optional[int] = None,
    ) -> None:
        super().__init__(message, kind=kind)
        self.resource_id = resource_id


class ApplyCancelled(TaxonomyError):
    """The caller cancelled an apply run before it finished."""


class TaxonomyRolledBack(TaxonomyError):
    """An apply run failed and everything it created was rolled back.

    Attributes
    ----------
    cause
        The failure that triggered the rollback.
    step
        ``"install"`` or ``"update"``.
    orphaned
        ``(record, message)`` for every created resource whose delete failed.
        These still exist remotely and need manual cleanup.
    """

    def __init__(
        self,
        cause: BaseException,
        *,
        step: str = "update",
        orphaned: Sequence[tuple["CreatedResourceRecord", str]] = (),
    ) -> None:
        self.cause = cause
        self.step = step
        self.orphaned = list(orphaned)
        message = f"{step.capitalize()} failed and was rolled back: {cause}"
        if self.orphaned:
            lines = [
                f"  - {record.kind.value} id={record.id}: {error}"
                for record, error in self.orphaned
            ]
            message += (
                f"\nRollback could not remove {len(self.orphaned)} resource(s):\n"
                + "\n".join(lines)
            )
        super().__init__(message)

    @property
    def clean(self) -> bool:
        """True when every created resource was removed."""
        return not self.orphaned


__all__ = [
    "ApplyCancelled",
    "CreationFailed",
    "DeletionFailed",
    "GatewayError",
    "GatewayUnavailable",
    "InvalidResourceDefinition",
    "TaxonomyError",
    "TaxonomyRolledBack",
]
