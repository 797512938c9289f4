"""Value types shared by the diff engine, installer and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence

from ..resources._common_types import _is_valid_name, _normalize_color
from ..resources.custom_fields_types import _normalize_data_type, _normalize_select_options
from ..utils import normalize_path, path_display_name
from .errors import InvalidResourceDefinition


class ResourceKind(str, Enum):
    """The four taxonomy resource categories."""

    TAG = "tag"
    DOCUMENT_TYPE = "document_type"
    STORAGE_PATH = "storage_path"
    CUSTOM_FIELD = "custom_field"


# Creation order. Custom fields go last since the remote validates their
# data types and options, which makes them the likeliest to be rejected.
APPLY_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.TAG,
    ResourceKind.DOCUMENT_TYPE,
    ResourceKind.STORAGE_PATH,
    ResourceKind.CUSTOM_FIELD,
)


def match_key(kind: ResourceKind, natural_key: str) -> str:
    """Return the comparison form of a natural key.

    Names compare case-insensitively; storage paths compare by their
    normalized string exactly.
    """
    if kind is ResourceKind.STORAGE_PATH:
        return normalize_path(natural_key)
    return natural_key.strip().casefold()


def _validate_attributes(kind: ResourceKind, natural_key: str, attributes: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {
        ResourceKind.TAG: {"color"},
        ResourceKind.DOCUMENT_TYPE: set(),
        ResourceKind.STORAGE_PATH: {"name", "parent"},
        ResourceKind.CUSTOM_FIELD: {"data_type", "options"},
    }[kind]
    unknown = set(attributes) - allowed
    if unknown:
        raise InvalidResourceDefinition(
            f"Unknown {kind.value} attribute(s) for {natural_key!r}: {', '.join(sorted(unknown))}"
        )

    try:
        if kind is ResourceKind.TAG:
            return {"color": _normalize_color(attributes.get("color"))}

        if kind is ResourceKind.STORAGE_PATH:
            name = attributes.get("name") or path_display_name(natural_key)
            if not _is_valid_name(name):
                raise ValueError(f"Invalid storage path name: {name!r}")
            parent = attributes.get("parent")
            if parent is not None:
                parent = normalize_path(parent)
                if not natural_key.startswith(parent.rstrip("/") + "/"):
                    raise ValueError(f"{natural_key!r} is not below parent {parent!r}")
            return {"name": name.strip(), "parent": parent}

        if kind is ResourceKind.CUSTOM_FIELD:
            data_type = _normalize_data_type(attributes.get("data_type", "string"))
            options = attributes.get("options")
            if data_type == "select":
                options = _normalize_select_options(options)
            elif options:
                raise ValueError(f"Options are only valid for select fields, not {data_type}")
            else:
                options = None
            return {"data_type": data_type, "options": options}
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidResourceDefinition(f"Invalid {kind.value} {natural_key!r}: {e}") from e

    return {}


@dataclass(frozen=True)
class DesiredResource:
    """One resource the taxonomy definition wants to exist remotely.

    Attributes are validated and normalized per kind when the object is built:

    - tag: ``color`` (``#rrggbb`` or ``None``)
    - document type: none
    - storage path: ``name`` (defaults to the path without its leading slash), ``parent``
    - custom field: ``data_type``, ``options`` (``select`` only)
    """

    kind: ResourceKind
    natural_key: str
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    domain: Optional[str] = None

    def __post_init__(self) -> None:
        kind = ResourceKind(self.kind)
        if not _is_valid_name(self.natural_key):
            raise InvalidResourceDefinition(f"Invalid {kind.value} natural key: {self.natural_key!r}")
        if kind is ResourceKind.STORAGE_PATH:
            natural_key = normalize_path(self.natural_key)
            if natural_key == "/":
                raise InvalidResourceDefinition(f"Invalid storage path: {self.natural_key!r}")
        else:
            natural_key = self.natural_key.strip()
        attributes = _validate_attributes(kind, natural_key, self.attributes or {})
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "natural_key", natural_key)
        object.__setattr__(self, "attributes", MappingProxyType(attributes))

    @property
    def match_key(self) -> str:
        return match_key(self.kind, self.natural_key)

    @classmethod
    def tag(cls, name: str, *, color: object = None, domain: Optional[str] = None) -> "DesiredResource":
        return cls(ResourceKind.TAG, name, {"color": color}, domain)

    @classmethod
    def document_type(cls, name: str, *, domain: Optional[str] = None) -> "DesiredResource":
        return cls(ResourceKind.DOCUMENT_TYPE, name, {}, domain)

    @classmethod
    def storage_path(
        cls,
        path: str,
        *,
        name: Optional[str] = None,
        parent: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> "DesiredResource":
        return cls(ResourceKind.STORAGE_PATH, path, {"name": name, "parent": parent}, domain)

    @classmethod
    def custom_field(
        cls,
        name: str,
        data_type: str = "string",
        *,
        options: Optional[Sequence[str]] = None,
        domain: Optional[str] = None,
    ) -> "DesiredResource":
        return cls(ResourceKind.CUSTOM_FIELD, name, {"data_type": data_type, "options": options}, domain)


@dataclass(frozen=True)
class RemoteResource:
    """A resource as reported by a gateway list or create call."""

    kind: ResourceKind
    id: int
    natural_key: str

    @property
    def match_key(self) -> str:
        return match_key(self.kind, self.natural_key)


@dataclass(frozen=True)
class CreatedResourceRecord:
    """Ledger entry for a resource created during the current apply run."""

    kind: ResourceKind
    id: int


@dataclass(frozen=True)
class TaxonomyDiff:
    """Desired resources missing remotely, bucketed by kind in declaration order.

    ``skipped_*`` hold the natural keys of desired resources that already exist.
    """

    new_tags: tuple[DesiredResource, ...] = ()
    new_document_types: tuple[DesiredResource, ...] = ()
    new_storage_paths: tuple[DesiredResource, ...] = ()
    new_custom_fields: tuple[DesiredResource, ...] = ()
    skipped_tags: tuple[str, ...] = ()
    skipped_document_types: tuple[str, ...] = ()
    skipped_storage_paths: tuple[str, ...] = ()
    skipped_custom_fields: tuple[str, ...] = ()
    country: Optional[str] = None

    @property
    def has_changes(self) -> bool:
        return any(self.for_kind(kind) for kind in APPLY_ORDER)

    def for_kind(self, kind: ResourceKind) -> tuple[DesiredResource, ...]:
        return {
            ResourceKind.TAG: self.new_tags,
            ResourceKind.DOCUMENT_TYPE: self.new_document_types,
            ResourceKind.STORAGE_PATH: self.new_storage_paths,
            ResourceKind.CUSTOM_FIELD: self.new_custom_fields,
        }[kind]

    def skipped_for_kind(self, kind: ResourceKind) -> tuple[str, ...]:
        return {
            ResourceKind.TAG: self.skipped_tags,
            ResourceKind.DOCUMENT_TYPE: self.skipped_document_types,
            ResourceKind.STORAGE_PATH: self.skipped_storage_paths,
            ResourceKind.CUSTOM_FIELD: self.skipped_custom_fields,
        }[kind]

    def __iter__(self) -> Iterator[DesiredResource]:
        """Iterate new resources in apply order."""
        for kind in APPLY_ORDER:
            yield from self.for_kind(kind)

    def __len__(self) -> int:
        return sum(len(self.for_kind(kind)) for kind in APPLY_ORDER)


@dataclass(frozen=True)
class AppliedCounts:
    """Number of resources created per kind."""

    tags: int = 0
    document_types: int = 0
    storage_paths: int = 0
    custom_fields: int = 0

    @classmethod
    def from_ledger(cls, ledger: Sequence[CreatedResourceRecord]) -> "AppliedCounts":
        kinds = [record.kind for record in ledger]
        return cls(
            tags=kinds.count(ResourceKind.TAG),
            document_types=kinds.count(ResourceKind.DOCUMENT_TYPE),
            storage_paths=kinds.count(ResourceKind.STORAGE_PATH),
            custom_fields=kinds.count(ResourceKind.CUSTOM_FIELD),
        )

    @property
    def total(self) -> int:
        return self.tags + self.document_types + self.storage_paths + self.custom_fields

    def as_dict(self) -> dict[str, int]:
        return {
            "tags": self.tags,
            "document_types": self.document_types,
            "storage_paths": self.storage_paths,
            "custom_fields": self.custom_fields,
        }


@dataclass(frozen=True)
class UpdateOptions:
    """Options for ``TaxonomyUpdater.update``.

    ``auto_approve`` is reserved for retention-policy changes to resources that
    already exist. Those are not detected yet, so it never blocks creation.
    """

    auto_approve: bool = False
    dry_run: bool = False
    domains: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of one ``install`` or ``update`` call."""

    success: bool
    applied: AppliedCounts = field(default_factory=AppliedCounts)
    diff: Optional[TaxonomyDiff] = None
    error: Optional[str] = None
    requires_manual_review: bool = False
    dry_run: bool = False


__all__ = [
    "APPLY_ORDER",
    "AppliedCounts",
    "CreatedResourceRecord",
    "DesiredResource",
    "RemoteResource",
    "ResourceKind",
    "TaxonomyDiff",
    "UpdateOptions",
    "UpdateResult",
    "match_key",
]
