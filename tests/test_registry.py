"""Tests for the keyword -> dataset registry."""

import unittest

from tabular_chatbot.core.data_loader import TIP_SCHEMA, build_hair_tips
from tabular_chatbot.core.registry import (
    DatasetRegistry,
    RegistryError,
    load_salon_registry,
    load_tips_registry,
)
from tabular_chatbot.core.schema import Dataset


class DatasetRegistryTests(unittest.TestCase):
    def test_resolve_is_exact_after_trim_and_lowercase(self) -> None:
        registry = load_tips_registry()
        self.assertIs(registry.resolve("  HAIR TIPS "), registry.resolve("hair tips"))
        self.assertIsNotNone(registry.resolve("Leg Exercises"))
        self.assertIsNone(registry.resolve("hair"))
        self.assertIsNone(registry.resolve("hair tips please"))
        self.assertIsNone(registry.resolve("show clients"))

    def test_keywords_keep_registration_order(self) -> None:
        self.assertEqual(load_tips_registry().keywords, ("hair tips", "nutrition tips", "leg exercises"))
        self.assertEqual(load_salon_registry().keywords, ("show clients",))

    def test_duplicate_keyword_is_construction_error(self) -> None:
        clash = Dataset(" Hair Tips", TIP_SCHEMA, [])
        with self.assertRaises(RegistryError):
            DatasetRegistry([build_hair_tips(), clash])

    def test_empty_keyword_is_construction_error(self) -> None:
        with self.assertRaises(RegistryError):
            DatasetRegistry([Dataset("   ", TIP_SCHEMA, [])])

    def test_registries_are_cached_until_refresh(self) -> None:
        first = load_tips_registry()
        self.assertIs(load_tips_registry(), first)
        refreshed = load_tips_registry(refresh=True)
        self.assertIsNot(refreshed, first)
        self.assertIs(load_tips_registry(), refreshed)


if __name__ == "__main__":
    unittest.main()
