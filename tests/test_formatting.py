"""Tests for the table presentation helpers."""

import unittest

from tabular_chatbot.core.data_loader import CLIENT_SCHEMA, build_clients
from tabular_chatbot.core.query_engine import Query, SortDirection, evaluate
from tabular_chatbot.ui.formatting import (
    column_header,
    format_cell,
    header_label,
    page_caption,
    result_to_frame,
)


class FormattingTests(unittest.TestCase):
    def test_header_capitalizes_first_letter_only(self) -> None:
        self.assertEqual(header_label("muscleGroup"), "MuscleGroup")
        self.assertEqual(header_label("price"), "Price")

    def test_sorted_column_gets_arrow(self) -> None:
        self.assertEqual(column_header("price", "price", SortDirection.DESCENDING), "Price ↓")
        self.assertEqual(column_header("price", "price", SortDirection.ASCENDING), "Price ↑")
        self.assertEqual(column_header("name", "price"), "Name")

    def test_currency_cells(self) -> None:
        price = CLIENT_SCHEMA["price"]
        self.assertEqual(format_cell(price, 25.0), "$25.00")
        self.assertEqual(format_cell(price, 0), "$0.00")
        self.assertEqual(format_cell(CLIENT_SCHEMA["service"], "mullet"), "mullet")

    def test_result_frame_follows_schema_order(self) -> None:
        result = evaluate(build_clients(), Query(page_size=2))
        frame = result_to_frame(CLIENT_SCHEMA, result)
        self.assertEqual(list(frame.columns), ["Name", "Service", "Price", "Date"])
        self.assertEqual(frame.iloc[0].tolist(), ["Amber Collier", "mullet", "$25.00", "2023-12-04"])
        self.assertEqual(len(frame), 2)
        self.assertEqual(page_caption(result), "Page 1 of 3")


if __name__ == "__main__":
    unittest.main()
