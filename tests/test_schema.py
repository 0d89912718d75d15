"""Tests for schemas, records and dataset construction."""

import unittest

from tabular_chatbot.core.data_loader import CLIENT_SCHEMA, TIP_SCHEMA, build_clients
from tabular_chatbot.core.schema import (
    Dataset,
    Field,
    FieldKind,
    FilterMode,
    Record,
    Schema,
    SchemaError,
    canonical_text,
    is_iso_date,
    split_components,
)


class SchemaTests(unittest.TestCase):
    def test_empty_schema_is_rejected(self) -> None:
        with self.assertRaises(SchemaError):
            Schema([])

    def test_duplicate_field_names_are_rejected(self) -> None:
        with self.assertRaises(SchemaError):
            Schema([Field("id", FieldKind.NUMBER), Field("id", FieldKind.TEXT)])

    def test_contains_field_needs_delimiter(self) -> None:
        with self.assertRaises(SchemaError):
            Schema([Field("groups", filter_mode=FilterMode.CONTAINS, delimiter="")])

    def test_field_order_and_lookup(self) -> None:
        self.assertEqual(CLIENT_SCHEMA.names, ("name", "service", "price", "date"))
        self.assertEqual(CLIENT_SCHEMA["price"].kind, FieldKind.NUMBER)
        self.assertIn("date", CLIENT_SCHEMA)
        self.assertNotIn("Date", CLIENT_SCHEMA)
        self.assertEqual([f.name for f in CLIENT_SCHEMA.date_fields], ["date"])
        self.assertEqual([f.name for f in CLIENT_SCHEMA.filterable_fields], ["service"])
        with self.assertRaises(SchemaError):
            CLIENT_SCHEMA["unknown"]


class CanonicalTextTests(unittest.TestCase):
    def test_integral_numbers_drop_decimals(self) -> None:
        self.assertEqual(canonical_text(25.0), "25")
        self.assertEqual(canonical_text(0.0), "0")
        self.assertEqual(canonical_text(7), "7")

    def test_fractional_numbers_and_text(self) -> None:
        self.assertEqual(canonical_text(25.5), "25.5")
        self.assertEqual(canonical_text("Glutes"), "Glutes")
        self.assertEqual(canonical_text(None), "")

    def test_split_components_strips_parts(self) -> None:
        self.assertEqual(
            split_components("Quadriceps, Hamstrings, Glutes", ","),
            ["Quadriceps", "Hamstrings", "Glutes"],
        )
        self.assertEqual(split_components("Calves", ","), ["Calves"])

    def test_iso_date_check(self) -> None:
        self.assertTrue(is_iso_date("2023-12-04"))
        self.assertFalse(is_iso_date("2023-13-04"))
        self.assertFalse(is_iso_date("12/04/2023"))
        self.assertFalse(is_iso_date(20231204))


class DatasetTests(unittest.TestCase):
    def test_record_field_set_must_match_schema(self) -> None:
        with self.assertRaises(SchemaError):
            Dataset("x", TIP_SCHEMA, [{"id": 1, "tip": "Drink water"}])
        with self.assertRaises(SchemaError):
            Dataset("x", TIP_SCHEMA, [{"id": 1, "tip": "Drink water", "category": "General", "extra": 1}])

    def test_values_must_match_field_kind(self) -> None:
        with self.assertRaises(SchemaError):
            Dataset("x", CLIENT_SCHEMA, [{"name": "A B", "service": "cut", "price": "$25.00", "date": "2023-12-04"}])
        with self.assertRaises(SchemaError):
            Dataset("x", CLIENT_SCHEMA, [{"name": "A B", "service": "cut", "price": 25.0, "date": "04/12/2023"}])
        with self.assertRaises(SchemaError):
            Dataset("x", TIP_SCHEMA, [{"id": True, "tip": "t", "category": "c"}])

    def test_records_are_immutable_ordered_mappings(self) -> None:
        ds = Dataset("x", TIP_SCHEMA, [{"category": "General", "tip": "Drink water", "id": 1}])
        record = ds.records[0]
        self.assertIsInstance(record, Record)
        self.assertEqual(list(record), ["id", "tip", "category"])
        self.assertEqual(record.index, 0)
        with self.assertRaises(TypeError):
            record["tip"] = "changed"  # type: ignore[index]

    def test_text_frame_uses_lowercase_canonical_text(self) -> None:
        ds = build_clients()
        self.assertEqual(ds.text_frame["price"].tolist()[0], "25")
        self.assertEqual(ds.text_frame["name"].tolist()[0], "amber collier")
        self.assertEqual(list(ds.frame.columns), list(CLIENT_SCHEMA.names))

    def test_empty_dataset_is_allowed(self) -> None:
        ds = Dataset("empty", TIP_SCHEMA, [])
        self.assertEqual(len(ds), 0)
        self.assertEqual(ds.records, ())


if __name__ == "__main__":
    unittest.main()
