from __future__ import annotations

from typing import Any, List, Optional

import pandas as pd

from tabular_chatbot.core.query_engine import QueryResult, SortDirection
from tabular_chatbot.core.schema import Field, Schema

SORT_ARROWS = {SortDirection.ASCENDING: "↑", SortDirection.DESCENDING: "↓"}


def header_label(name: str) -> str:
    """Field name with its first letter capitalized ("muscleGroup" -> "MuscleGroup")."""
    return name[:1].upper() + name[1:]


def column_header(name: str, sort_key: Optional[str] = None, direction: SortDirection = SortDirection.ASCENDING) -> str:
    label = header_label(name)
    if sort_key == name:
        return f"{label} {SORT_ARROWS[direction]}"
    return label


def format_cell(f: Field, value: Any) -> Any:
    if f.display == "currency":
        return f"${float(value):.2f}"
    return value


def result_to_frame(schema: Schema, result: QueryResult) -> pd.DataFrame:
    """One row per item, one column per field in schema order, headers capitalized."""
    columns: List[str] = [header_label(f.name) for f in schema]
    rows = [[format_cell(f, item[f.name]) for f in schema] for item in result.items]
    return pd.DataFrame(rows, columns=columns, index=[item.index for item in result.items])


def page_caption(result: QueryResult) -> str:
    return f"Page {result.page} of {result.page_count}"
