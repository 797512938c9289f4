import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from paperless_taxonomy.resources.custom_fields import CustomFields  # noqa: E402
from paperless_taxonomy.resources.document_types import DocumentTypes  # noqa: E402
from paperless_taxonomy.resources.storage_paths import StoragePaths  # noqa: E402


class DummyClient:
    def __init__(self) -> None:
        self._logger = logging.getLogger("paperless_taxonomy.tests")

    def request(self, method, path, params=None, json=None, timeout=None):
        return {}


class DocumentTypesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document_types = DocumentTypes(DummyClient())  # type: ignore[arg-type]

    def test_list(self):
        with patch.object(self.document_types, "_get_all", return_value=[{"id": 1}]) as mocked:
            self.assertEqual(self.document_types.list(), [{"id": 1}])
        self.assertEqual(mocked.call_args.args[0], "/document_types/")

    def test_add_payload(self):
        with patch.object(self.document_types, "_post", return_value={"id": 2, "name": "Tax Return"}) as mocked:
            result = self.document_types.add("Tax Return")
        self.assertEqual(result["id"], 2)
        payload = mocked.call_args.kwargs["json"]
        self.assertEqual(payload, {
            "name": "Tax Return",
            "slug": "tax-return",
            "matching_algorithm": 0,
            "is_insensitive": True,
        })

    def test_add_invalid_name(self):
        self.assertIsNone(self.document_types.add(""))
        with self.assertRaises(ValueError):
            self.document_types.add("", validation="strict")

    def test_delete(self):
        with patch.object(self.document_types, "_delete", return_value={}) as mocked:
            self.assertTrue(self.document_types.delete([5, 5, 6]))
        self.assertEqual([call.args[0] for call in mocked.call_args_list], ["/document_types/5/", "/document_types/6/"])

    def test_delete_invalid(self):
        self.assertFalse(self.document_types.delete("x"))  # type: ignore[arg-type]


class StoragePathsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storage_paths = StoragePaths(DummyClient())  # type: ignore[arg-type]

    def test_add_derives_name(self):
        with patch.object(self.storage_paths, "_post", return_value={"id": 3}) as mocked:
            self.storage_paths.add("/household/tax")
        self.assertEqual(mocked.call_args.kwargs["json"], {"name": "household/tax", "path": "/household/tax"})

    def test_add_explicit_name(self):
        with patch.object(self.storage_paths, "_post", return_value={"id": 3}) as mocked:
            self.storage_paths.add("/household", name="Household")
        self.assertEqual(mocked.call_args.kwargs["json"]["name"], "Household")

    def test_add_invalid(self):
        self.assertIsNone(self.storage_paths.add(""))
        self.assertIsNone(self.storage_paths.add("/a", name=" "))
        with self.assertRaises(ValueError):
            self.storage_paths.add("/a", name="", validation="strict")

    def test_delete_failure(self):
        with patch.object(self.storage_paths, "_delete", return_value=None):
            self.assertFalse(self.storage_paths.delete(9))


class CustomFieldsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.custom_fields = CustomFields(DummyClient())  # type: ignore[arg-type]

    def test_add_string(self):
        with patch.object(self.custom_fields, "_post", return_value={"id": 4}) as mocked:
            self.assertEqual(self.custom_fields.add("Trustee"), {"id": 4})
        self.assertEqual(mocked.call_args.kwargs["json"], {"name": "Trustee", "data_type": "string"})

    def test_add_alias_data_type(self):
        with patch.object(self.custom_fields, "_post", return_value={"id": 4}) as mocked:
            self.custom_fields.add("Units", "Number")
        self.assertEqual(mocked.call_args.kwargs["json"]["data_type"], "integer")

    def test_add_select(self):
        with patch.object(self.custom_fields, "_post", return_value={"id": 4}) as mocked:
            self.custom_fields.add("Trust type", "select", options=["Unit", " Family ", "Unit"])
        self.assertEqual(
            mocked.call_args.kwargs["json"]["extra_data"],
            {"select_options": ["Unit", "Family"]},
        )

    def test_add_select_without_options(self):
        with patch.object(self.custom_fields, "_post") as mocked:
            self.assertIsNone(self.custom_fields.add("Trust type", "select"))
        mocked.assert_not_called()
        with self.assertRaises(ValueError):
            self.custom_fields.add("Trust type", "select", validation="strict")

    def test_add_options_on_non_select(self):
        with self.assertRaises(ValueError):
            self.custom_fields.add("Trustee", "string", options=["a"], validation="strict")

    def test_add_unknown_data_type(self):
        with self.assertRaises(ValueError):
            self.custom_fields.add("Trustee", "blob", validation="strict")
        self.assertIsNone(self.custom_fields.add("Trustee", "blob"))

    def test_add_off_sends_as_is(self):
        with patch.object(self.custom_fields, "_post", return_value={"id": 1}) as mocked:
            self.custom_fields.add("Trustee", "blob", validation="off")
        self.assertEqual(mocked.call_args.kwargs["json"]["data_type"], "blob")

    def test_delete(self):
        with patch.object(self.custom_fields, "_delete", return_value={}) as mocked:
            self.assertTrue(self.custom_fields.delete(8))
        self.assertEqual(mocked.call_args.args[0], "/custom_fields/8/")
