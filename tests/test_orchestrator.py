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
    TaxonomyRolledBack,
    TaxonomyUpdater,
    UpdateOptions,
    UpdaterState,
)


logging.basicConfig(
    level=logging.CRITICAL,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


def _definition() -> TaxonomyDefinition:
    """5 tags, 3 document types, 2 storage paths, 3 custom fields."""
    return TaxonomyDefinition(
        "Australia",
        (
            DesiredResource.tag("Financial", domain="household"),
            DesiredResource.tag("Tax", domain="household"),
            DesiredResource.tag("Medical", domain="household"),
            DesiredResource.tag("Insurance", domain="household"),
            DesiredResource.tag("Trust", domain="family-trust"),
            DesiredResource.document_type("Invoice", domain="household"),
            DesiredResource.document_type("Receipt", domain="household"),
            DesiredResource.document_type("Trust Deed", domain="family-trust"),
            DesiredResource.storage_path("/household", domain="household"),
            DesiredResource.storage_path("/family-trust", domain="family-trust"),
            DesiredResource.custom_field("family-trust-name", domain="family-trust"),
            DesiredResource.custom_field("trust type", "select", options=["Unit", "Family"], domain="family-trust"),
            DesiredResource.custom_field("settlement date", "date", domain="family-trust"),
        ),
        version="2024.1",
    )


class StateRecordingGateway(InMemoryGateway):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.updater = None
        self.states = []

    def create(self, resource):
        self.states.append(self.updater.state)
        return super().create(resource)


class TaxonomyUpdaterTests(unittest.TestCase):
    def test_install_then_update_is_noop(self):
        gateway = InMemoryGateway()
        updater = TaxonomyUpdater(gateway)

        result = updater.install(_definition())
        self.assertTrue(result.success)
        self.assertEqual(result.applied.as_dict(), {
            "tags": 5, "document_types": 3, "storage_paths": 2, "custom_fields": 3,
        })
        self.assertIsNone(result.error)
        self.assertFalse(result.requires_manual_review)

        creates = len(gateway.calls_of("create"))
        second = updater.update(_definition())
        self.assertTrue(second.success)
        self.assertEqual(second.applied.as_dict(), {
            "tags": 0, "document_types": 0, "storage_paths": 0, "custom_fields": 0,
        })
        self.assertFalse(second.diff.has_changes)
        self.assertEqual(len(gateway.calls_of("create")), creates)

    def test_update_twice_is_idempotent(self):
        gateway = InMemoryGateway()
        updater = TaxonomyUpdater(gateway)
        first = updater.update(_definition(), UpdateOptions(auto_approve=False))
        self.assertEqual(first.applied.total, 13)
        second = updater.update(_definition(), UpdateOptions(auto_approve=False))
        self.assertFalse(second.diff.has_changes)
        self.assertEqual(second.applied.total, 0)

    def test_diff_empty_after_install(self):
        gateway = InMemoryGateway()
        updater = TaxonomyUpdater(gateway)
        updater.install(_definition())
        self.assertEqual(len(updater.detect_changes(_definition())), 0)

    def test_successful_runs_never_delete(self):
        gateway = InMemoryGateway()
        gateway.seed(ResourceKind.TAG, "financial")
        updater = TaxonomyUpdater(gateway)
        updater.install(_definition())
        updater.update(_definition())
        self.assertEqual(gateway.calls_of("delete"), [])

    def test_existing_tag_skipped(self):
        gateway = InMemoryGateway()
        existing = gateway.seed(ResourceKind.TAG, "financial")
        result = TaxonomyUpdater(gateway).install(_definition())
        self.assertEqual(result.applied.tags, 4)
        self.assertEqual(result.diff.skipped_tags, ("Financial",))
        tags = gateway.inventory(ResourceKind.TAG)
        self.assertEqual(len(tags), 5)
        self.assertIn(existing, tags)

    def test_update_without_changes_makes_no_writes(self):
        gateway = InMemoryGateway()
        for resource in _definition().resources:
            key = resource.natural_key
            gateway.seed(resource.kind, key if resource.kind is ResourceKind.STORAGE_PATH else key.upper())
        result = TaxonomyUpdater(gateway).update(_definition())
        self.assertTrue(result.success)
        self.assertEqual(result.applied.total, 0)
        self.assertEqual([call[0] for call in gateway.calls], ["list"] * 4)

    def test_custom_field_failure_rolls_back_whole_update(self):
        def _reject_second_field(resource):
            return "invalid options" if resource.natural_key == "trust type" else None

        gateway = InMemoryGateway(fail_create=_reject_second_field)
        updater = TaxonomyUpdater(gateway)
        before = updater.detect_changes(_definition())

        with self.assertRaises(TaxonomyRolledBack) as ctx:
            updater.update(_definition())
        self.assertIn("rolled back", str(ctx.exception))
        self.assertTrue(str(ctx.exception).startswith("Update failed"))

        after = updater.detect_changes(_definition())
        self.assertEqual(len(after.new_tags), 5)
        self.assertEqual(len(after.new_document_types), 3)
        self.assertEqual(len(after.new_storage_paths), 2)
        self.assertEqual(after.new_custom_fields, before.new_custom_fields)
        self.assertIs(updater.state, UpdaterState.IDLE)

    def test_install_failure_message(self):
        gateway = InMemoryGateway(fail_create=lambda resource: "boom")
        with self.assertRaises(TaxonomyRolledBack) as ctx:
            TaxonomyUpdater(gateway).install(_definition())
        self.assertTrue(str(ctx.exception).startswith("Install failed and was rolled back"))

    def test_failure_as_result(self):
        gateway = InMemoryGateway(fail_create=lambda resource: "boom")
        result = TaxonomyUpdater(gateway, raise_on_error=False).update(_definition())
        self.assertFalse(result.success)
        self.assertEqual(result.applied.total, 0)
        self.assertIn("rolled back", result.error)
        self.assertEqual(len(result.diff), 13)
        self.assertEqual(gateway.inventory(ResourceKind.TAG), [])

    def test_list_failure_propagates(self):
        gateway = InMemoryGateway(fail_list=[ResourceKind.CUSTOM_FIELD])
        with self.assertRaises(GatewayUnavailable):
            TaxonomyUpdater(gateway).update(_definition())
        self.assertEqual(gateway.calls_of("create"), [])

    def test_dry_run(self):
        gateway = InMemoryGateway()
        result = TaxonomyUpdater(gateway).update(_definition(), UpdateOptions(dry_run=True))
        self.assertTrue(result.success)
        self.assertTrue(result.dry_run)
        self.assertEqual(result.applied.total, 0)
        self.assertEqual(len(result.diff), 13)
        self.assertEqual(gateway.calls_of("create"), [])

    def test_dry_run_without_changes(self):
        gateway = InMemoryGateway()
        updater = TaxonomyUpdater(gateway)
        updater.install(_definition())
        result = updater.update(_definition(), UpdateOptions(dry_run=True))
        self.assertTrue(result.success)
        self.assertTrue(result.dry_run)
        self.assertFalse(result.diff.has_changes)
        self.assertEqual(result.applied.total, 0)

    def test_domain_filter(self):
        gateway = InMemoryGateway()
        updater = TaxonomyUpdater(gateway, max_workers=0)
        result = updater.update(_definition(), UpdateOptions(domains=("family-trust",)))
        self.assertEqual(result.applied.as_dict(), {
            "tags": 1, "document_types": 1, "storage_paths": 1, "custom_fields": 3,
        })
        rest = updater.install(_definition(), domains=["household"])
        self.assertEqual(rest.applied.total, 7)

    def test_state_during_apply(self):
        gateway = StateRecordingGateway()
        updater = TaxonomyUpdater(gateway)
        gateway.updater = updater
        self.assertIs(updater.state, UpdaterState.IDLE)
        updater.install(_definition())
        self.assertEqual(set(gateway.states), {UpdaterState.APPLYING})
        self.assertIs(updater.state, UpdaterState.IDLE)

    def test_result_is_immutable(self):
        result = TaxonomyUpdater(InMemoryGateway()).install(_definition())
        with self.assertRaises(AttributeError):
            result.success = False  # type: ignore[misc]
