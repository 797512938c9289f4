"""CLI demo that syncs a small taxonomy into paperless-ngx.

Run with the virtual environment activated::

    PAPERLESS_URL=http://localhost:8000 PAPERLESS_API_TOKEN=... python examples/demo_update.py

Pass ``--install`` to populate an empty instance, ``--dry-run`` to only show
what would be created.
"""

import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from paperless_taxonomy import (
    Paperless,
    PaperlessGateway,
    TaxonomyDefinition,
    TaxonomyRolledBack,
    TaxonomyUpdater,
    UpdateOptions,
)

logging.basicConfig(level=logging.INFO)

TAXONOMY = {
    "country": "AU",
    "version": "2024.1",
    "domains": {
        "household": {
            "tags": ["financial", "tax", "medical", "insurance"],
            "document_types": ["Invoice", "Receipt", "Tax Return"],
        },
        "family-trust": {
            "tags": ["trust"],
            "document_types": ["Trust Deed", "Trustee Resolution"],
            "custom_fields": [
                {"name": "family-trust-name"},
                {"name": "trust type", "data_type": "select", "options": ["Unit", "Discretionary", "Hybrid"]},
            ],
        },
    },
}


def main() -> int:
    definition = TaxonomyDefinition.from_mapping(TAXONOMY)
    updater = TaxonomyUpdater(PaperlessGateway(Paperless.from_env()), show_progress=True)

    diff = updater.detect_changes(definition)
    for resource in diff:
        print(f"  + {resource.kind.value}: {resource.natural_key}")
    if not diff.has_changes:
        print("Taxonomy is up to date.")
        return 0

    try:
        if "--install" in sys.argv:
            result = updater.install(definition)
        else:
            result = updater.update(definition, UpdateOptions(dry_run="--dry-run" in sys.argv))
    except TaxonomyRolledBack as exc:
        print(exc)
        return 1

    print(f"Applied: {result.applied.as_dict()}{' (dry run)' if result.dry_run else ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
