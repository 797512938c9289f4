import logging
import sys
import unittest
from pathlib import Path

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from paperless_taxonomy.taxonomy import (  # noqa: E402
    DesiredResource,
    GatewayUnavailable,
    InMemoryGateway,
    ResourceKind,
    TaxonomyDefinition,
    detect_changes,
)
from paperless_taxonomy.taxonomy.diff import fetch_inventory  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


def _definition() -> TaxonomyDefinition:
    return TaxonomyDefinition(
        "AUS",
        (
            DesiredResource.tag("Financial"),
            DesiredResource.tag("Tax"),
            DesiredResource.tag("Medical"),
            DesiredResource.document_type("Invoice"),
            DesiredResource.document_type("Receipt"),
            DesiredResource.storage_path("/household"),
            DesiredResource.custom_field("trust-name"),
        ),
    )


class ListFailingGateway(InMemoryGateway):
    def list(self, kind):
        if kind is ResourceKind.DOCUMENT_TYPE:
            raise RuntimeError("socket closed")
        return super().list(kind)


class DetectChangesTests(unittest.TestCase):
    def test_empty_remote_everything_new(self):
        diff = detect_changes(_definition(), InMemoryGateway())
        self.assertTrue(diff.has_changes)
        self.assertEqual([r.natural_key for r in diff.new_tags], ["Financial", "Tax", "Medical"])
        self.assertEqual([r.natural_key for r in diff.new_document_types], ["Invoice", "Receipt"])
        self.assertEqual([r.natural_key for r in diff.new_storage_paths], ["/household"])
        self.assertEqual([r.natural_key for r in diff.new_custom_fields], ["trust-name"])
        self.assertEqual(len(diff), 7)
        self.assertEqual(diff.country, "AUS")

    def test_case_insensitive_name_match(self):
        gateway = InMemoryGateway()
        gateway.seed(ResourceKind.TAG, "financial")
        gateway.seed(ResourceKind.DOCUMENT_TYPE, "INVOICE")
        gateway.seed(ResourceKind.CUSTOM_FIELD, "Trust-Name")
        diff = detect_changes(_definition(), gateway)
        self.assertEqual([r.natural_key for r in diff.new_tags], ["Tax", "Medical"])
        self.assertEqual(diff.skipped_tags, ("Financial",))
        self.assertEqual([r.natural_key for r in diff.new_document_types], ["Receipt"])
        self.assertEqual(diff.new_custom_fields, ())
        self.assertEqual(diff.skipped_custom_fields, ("trust-name",))

    def test_storage_path_normalized_match(self):
        gateway = InMemoryGateway()
        gateway.seed(ResourceKind.STORAGE_PATH, "household/")
        diff = detect_changes(_definition(), gateway)
        self.assertEqual(diff.new_storage_paths, ())
        self.assertEqual(diff.skipped_storage_paths, ("/household",))

    def test_storage_path_case_differs(self):
        gateway = InMemoryGateway()
        gateway.seed(ResourceKind.STORAGE_PATH, "/Household")
        diff = detect_changes(_definition(), gateway)
        self.assertEqual([r.natural_key for r in diff.new_storage_paths], ["/household"])

    def test_same_name_other_kind_does_not_match(self):
        gateway = InMemoryGateway()
        gateway.seed(ResourceKind.DOCUMENT_TYPE, "Financial")
        diff = detect_changes(_definition(), gateway)
        self.assertIn("Financial", [r.natural_key for r in diff.new_tags])

    def test_no_changes(self):
        gateway = InMemoryGateway()
        for resource in _definition().resources:
            gateway.seed(resource.kind, resource.natural_key)
        diff = detect_changes(_definition(), gateway)
        self.assertFalse(diff.has_changes)
        self.assertEqual(len(diff), 0)

    def test_read_only(self):
        gateway = InMemoryGateway()
        detect_changes(_definition(), gateway)
        self.assertEqual(sorted(call[1].value for call in gateway.calls if call[0] == "list"),
                         sorted(kind.value for kind in ResourceKind))
        self.assertEqual(gateway.calls_of("create"), [])
        self.assertEqual(gateway.calls_of("delete"), [])

    def test_iteration_follows_apply_order(self):
        definition = TaxonomyDefinition(
            "AUS",
            (
                DesiredResource.custom_field("trust-name"),
                DesiredResource.storage_path("/household"),
                DesiredResource.document_type("Invoice"),
                DesiredResource.tag("Tax"),
            ),
        )
        diff = detect_changes(definition, InMemoryGateway())
        self.assertEqual(
            [r.kind for r in diff],
            [ResourceKind.TAG, ResourceKind.DOCUMENT_TYPE, ResourceKind.STORAGE_PATH, ResourceKind.CUSTOM_FIELD],
        )

    def test_list_failure_aborts(self):
        gateway = InMemoryGateway(fail_list=[ResourceKind.STORAGE_PATH])
        with self.assertRaises(GatewayUnavailable) as ctx:
            detect_changes(_definition(), gateway)
        self.assertIs(ctx.exception.kind, ResourceKind.STORAGE_PATH)

    def test_list_failure_sequential(self):
        gateway = InMemoryGateway(fail_list=[ResourceKind.TAG])
        with self.assertRaises(GatewayUnavailable):
            detect_changes(_definition(), gateway, max_workers=0)

    def test_unexpected_list_error_wrapped(self):
        with self.assertRaises(GatewayUnavailable) as ctx:
            fetch_inventory(ListFailingGateway())
        self.assertIn("socket closed", str(ctx.exception))
        self.assertIs(ctx.exception.kind, ResourceKind.DOCUMENT_TYPE)

    def test_fetch_inventory_all_kinds(self):
        gateway = InMemoryGateway()
        tag = gateway.seed(ResourceKind.TAG, "x")
        inventory = fetch_inventory(gateway, max_workers=2)
        self.assertEqual(set(inventory), set(ResourceKind))
        self.assertEqual(inventory[ResourceKind.TAG], [tag])
