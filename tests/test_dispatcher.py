"""Tests for chat command dispatch."""

import unittest

from tabular_chatbot.conversation.dispatcher import (
    CommandDispatcher,
    DatasetSelected,
    Unrecognized,
    normalize_command,
)
from tabular_chatbot.core.registry import load_salon_registry, load_tips_registry


class CommandDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tips = CommandDispatcher(load_tips_registry())
        self.salon = CommandDispatcher(load_salon_registry())

    def test_case_and_whitespace_variants_select_hair_tips(self) -> None:
        for raw in ("HAIR TIPS", "  hair tips ", "Hair Tips", "\thair tips\n"):
            self.assertEqual(self.tips.dispatch(raw), DatasetSelected("hair tips"), msg=repr(raw))

    def test_every_tips_command(self) -> None:
        self.assertEqual(self.tips.dispatch("nutrition tips"), DatasetSelected("nutrition tips"))
        self.assertEqual(self.tips.dispatch("Leg Exercises"), DatasetSelected("leg exercises"))

    def test_near_misses_are_unrecognized(self) -> None:
        for raw in ("hair tip", "show hair tips", "hair", "tips please", "hairtips"):
            result = self.tips.dispatch(raw)
            self.assertIsInstance(result, Unrecognized, msg=repr(raw))
            self.assertEqual(result.raw_input, raw)

    def test_salon_vocabulary(self) -> None:
        self.assertEqual(self.salon.dispatch("Show Clients"), DatasetSelected("show clients"))
        self.assertIsInstance(self.salon.dispatch("hair tips"), Unrecognized)
        self.assertIsInstance(self.tips.dispatch("show clients"), Unrecognized)

    def test_blank_input(self) -> None:
        result = self.tips.dispatch("   ")
        self.assertIsInstance(result, Unrecognized)
        self.assertTrue(result.is_blank)

    def test_normalize_command(self) -> None:
        self.assertEqual(normalize_command("  Show CLIENTS "), "show clients")
        self.assertEqual(normalize_command(""), "")


if __name__ == "__main__":
    unittest.main()
