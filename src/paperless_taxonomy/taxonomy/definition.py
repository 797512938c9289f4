"""Versioned, declarative taxonomy definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .errors import InvalidResourceDefinition
from .types import DesiredResource, ResourceKind

# Cycled for tags declared without a color
TAG_PALETTE: tuple[str, ...] = ("#1e90ff", "#32cd32", "#ff6347", "#ffa500", "#9370db", "#20b2aa")

_COUNTRY_ALIASES: dict[str, str] = {
    "AU": "AUS",
    "US": "USA",
    "GB": "GBR",
    "UK": "GBR",
    "AUSTRALIA": "AUS",
    "UNITED STATES": "USA",
    "UNITED KINGDOM": "GBR",
    "GREAT BRITAIN": "GBR",
}


def normalize_country(code: str) -> str:
    """Map a country name or alpha-2 code to ISO 3166-1 alpha-3.

    Unknown values are returned stripped but otherwise unchanged.
    """
    stripped = code.strip()
    return _COUNTRY_ALIASES.get(stripped.upper(), stripped)


@dataclass(frozen=True)
class TaxonomyDefinition:
    """Immutable snapshot of the resources a jurisdiction's taxonomy wants.

    Natural keys must be unique per kind (case-insensitive for names,
    normalized for paths), and so must storage path names (case-insensitive).
    """

    country: str
    resources: tuple[DesiredResource, ...] = ()
    version: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "country", normalize_country(self.country))
        object.__setattr__(self, "resources", tuple(self.resources))
        seen: set[tuple[ResourceKind, str]] = set()
        for resource in self.resources:
            if not isinstance(resource, DesiredResource):
                raise InvalidResourceDefinition(f"Not a DesiredResource: {resource!r}")
            key = (resource.kind, resource.match_key)
            if key in seen:
                raise InvalidResourceDefinition(
                    f"Duplicate {resource.kind.value} in definition: {resource.natural_key!r}"
                )
            seen.add(key)

        # Storage path names are unique on the server.
        path_names: dict[str, str] = {}
        for resource in self.of_kind(ResourceKind.STORAGE_PATH):
            name = resource.attributes["name"].casefold()
            if name in path_names:
                raise InvalidResourceDefinition(
                    f"Storage paths {path_names[name]!r} and {resource.natural_key!r} "
                    f"share the name {resource.attributes['name']!r}"
                )
            path_names[name] = resource.natural_key

    def of_kind(self, kind: ResourceKind) -> tuple[DesiredResource, ...]:
        """Return the resources of ``kind`` in declaration order."""
        return tuple(resource for resource in self.resources if resource.kind is kind)

    @property
    def domains(self) -> tuple[str, ...]:
        output: list[str] = []
        for resource in self.resources:
            if resource.domain is not None and resource.domain not in output:
                output.append(resource.domain)
        return tuple(output)

    def for_domains(self, domains: Optional[Iterable[str]]) -> "TaxonomyDefinition":
        """Return a definition restricted to ``domains``.

        Resources without a domain are shared and always kept. ``None`` returns
        ``self``.
        """
        if domains is None:
            return self
        wanted = set(domains)
        unknown = wanted - set(self.domains)
        if unknown:
            raise InvalidResourceDefinition(f"Unknown domain(s): {', '.join(sorted(unknown))}")
        kept = tuple(
            resource for resource in self.resources
            if resource.domain is None or resource.domain in wanted
        )
        return TaxonomyDefinition(self.country, kept, self.version)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TaxonomyDefinition":
        """Build a definition from plain data, e.g. a parsed YAML file.

        Expected shape::

            {
                "country": "AU",
                "version": "2024.1",
                "domains": {
                    "household": {
                        "tags": ["financial", {"name": "tax", "color": "#ff0000"}],
                        "document_types": ["Invoice"],
                        "storage_paths": ["/household"],
                        "custom_fields": [{"name": "trustee", "data_type": "string"}],
                    },
                },
            }

        A domain without ``storage_paths`` gets ``/<domain>``. Tags without a
        color are assigned ``TAG_PALETTE`` colors in turn. A resource repeated in
        a later domain is kept once, under the first domain that declares it.
        """
        country = data.get("country")
        if not isinstance(country, str) or not country.strip():
            raise InvalidResourceDefinition(f"Invalid country: {country!r}")
        domains = data.get("domains") or {}
        if not isinstance(domains, Mapping):
            raise InvalidResourceDefinition("domains must be a mapping of domain name to resources")

        resources: list[DesiredResource] = []
        seen: set[tuple[ResourceKind, str]] = set()

        def _add(resource: DesiredResource) -> None:
            key = (resource.kind, resource.match_key)
            if key not in seen:
                seen.add(key)
                resources.append(resource)

        tag_count = 0
        for domain, spec in domains.items():
            spec = spec or {}
            if not isinstance(spec, Mapping):
                raise InvalidResourceDefinition(f"Domain {domain!r} must be a mapping")

            for entry in spec.get("tags") or []:
                name, attrs = _split_entry(entry, "name")
                attrs["color"] = attrs.get("color") or TAG_PALETTE[tag_count % len(TAG_PALETTE)]
                _add(DesiredResource(ResourceKind.TAG, name, attrs, domain))
                tag_count += 1

            for entry in spec.get("document_types") or []:
                name, attrs = _split_entry(entry, "name")
                _add(DesiredResource(ResourceKind.DOCUMENT_TYPE, name, attrs, domain))

            for entry in spec.get("storage_paths") or [f"/{domain}"]:
                path, attrs = _split_entry(entry, "path")
                _add(DesiredResource(ResourceKind.STORAGE_PATH, path, attrs, domain))

            for entry in spec.get("custom_fields") or []:
                name, attrs = _split_entry(entry, "name")
                _add(DesiredResource(ResourceKind.CUSTOM_FIELD, name, attrs, domain))

        version = data.get("version")
        return cls(country, tuple(resources), str(version) if version is not None else None)


def _split_entry(entry: object, key_field: str) -> tuple[str, dict[str, Any]]:
    if isinstance(entry, str):
        return entry, {}
    if isinstance(entry, Mapping) and isinstance(entry.get(key_field), str):
        attrs = {k: v for k, v in entry.items() if k != key_field}
        return entry[key_field], attrs
    raise InvalidResourceDefinition(f"Expected a string or a mapping with {key_field!r}: {entry!r}")


__all__ = ["TAG_PALETTE", "TaxonomyDefinition", "normalize_country"]
