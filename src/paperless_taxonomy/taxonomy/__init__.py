"""Taxonomy reconciliation: diff a definition against paperless-ngx and install what is missing."""

from .definition import TAG_PALETTE, TaxonomyDefinition, normalize_country
from .diff import detect_changes
from .errors import (
    ApplyCancelled,
    CreationFailed,
    DeletionFailed,
    GatewayError,
    GatewayUnavailable,
    InvalidResourceDefinition,
    TaxonomyError,
    TaxonomyRolledBack,
)
from .gateway import InMemoryGateway, PaperlessGateway, TaxonomyGateway
from .installer import TransactionalInstaller
from .orchestrator import TaxonomyUpdater, UpdaterState
from .types import (
    AppliedCounts,
    CreatedResourceRecord,
    DesiredResource,
    RemoteResource,
    ResourceKind,
    TaxonomyDiff,
    UpdateOptions,
    UpdateResult,
)

__all__ = [
    "AppliedCounts",
    "ApplyCancelled",
    "CreatedResourceRecord",
    "CreationFailed",
    "DeletionFailed",
    "DesiredResource",
    "GatewayError",
    "GatewayUnavailable",
    "InMemoryGateway",
    "InvalidResourceDefinition",
    "PaperlessGateway",
    "RemoteResource",
    "ResourceKind",
    "TAG_PALETTE",
    "TaxonomyDefinition",
    "TaxonomyDiff",
    "TaxonomyError",
    "TaxonomyGateway",
    "TaxonomyRolledBack",
    "TaxonomyUpdater",
    "TransactionalInstaller",
    "UpdateOptions",
    "UpdateResult",
    "UpdaterState",
    "detect_changes",
    "normalize_country",
]
