from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from tabular_chatbot.core.schema import (
    Dataset,
    Field,
    FilterMode,
    Record,
    Schema,
    canonical_text,
    split_components,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class QueryEngineError(Exception):
    """Base exception for query engine failures."""


class InvalidQueryError(QueryEngineError):
    """
    A Query that breaks its contract with the active schema (unknown sort
    key, unknown or non-filterable filter field, page or page size < 1).

    This is a caller bug. The presentation layer should only offer field
    names drawn from the schema itself.
    """


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class DateRange:
    """Inclusive ISO 8601 (YYYY-MM-DD) bounds. Empty or None means unbounded."""
    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def is_unbounded(self) -> bool:
        return not self.start and not self.end


@dataclass(frozen=True)
class Query:
    """
    Everything the user controls about one table view.

    Instances are immutable; the `with_*` helpers return updated copies.
    """
    search_term: str = ""
    field_filters: Dict[str, str] = field(default_factory=dict, hash=False)
    date_range: DateRange = DateRange()
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASCENDING
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def reset(cls, page_size: int = DEFAULT_PAGE_SIZE) -> "Query":
        return cls(page_size=page_size)

    def with_search(self, term: str) -> "Query":
        return replace(self, search_term=term or "")

    def with_filter(self, field_name: str, value: Any) -> "Query":
        filters = dict(self.field_filters)
        text = "" if value is None else canonical_text(value).strip()
        if text:
            filters[field_name] = text
        else:
            filters.pop(field_name, None)
        return replace(self, field_filters=filters)

    def with_date_range(self, start: Optional[str] = None, end: Optional[str] = None) -> "Query":
        return replace(self, date_range=DateRange(start or None, end or None))

    def with_page(self, page: int) -> "Query":
        return replace(self, page=int(page))

    def with_page_size(self, page_size: int) -> "Query":
        # A new page size invalidates the current page number.
        return replace(self, page_size=int(page_size), page=1)


@dataclass(frozen=True)
class QueryResult:
    items: Tuple[Record, ...]
    total_matches: int
    page_count: int
    page: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total_matches


# ---------------------------------------------------------------------------
# Paging helpers
# ---------------------------------------------------------------------------

def page_count(total_matches: int, page_size: int) -> int:
    if page_size < 1:
        raise InvalidQueryError(f"page_size must be >= 1, got {page_size}")
    if total_matches <= 0:
        return 0
    return math.ceil(total_matches / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Clamp a page number into [1, pages]; 1 when there are no pages."""
    return max(1, min(int(page), max(pages, 1)))


# ---------------------------------------------------------------------------
# Sorting helpers
# ---------------------------------------------------------------------------

def toggle_sort(query: Query, field_name: str) -> Query:
    """
    Header-click semantics: the current sort column flips direction, a new
    column sorts ascending.
    """
    if query.sort_key == field_name:
        return replace(query, sort_direction=query.sort_direction.flipped())
    return replace(query, sort_key=field_name, sort_direction=SortDirection.ASCENDING)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_query(schema: Schema, query: Query) -> None:
    if query.sort_key is not None and query.sort_key not in schema:
        raise InvalidQueryError(
            f"sort_key {query.sort_key!r} is not a field of this schema. Fields: {list(schema.names)}"
        )

    for name in query.field_filters:
        f = schema.get(name)
        if f is None:
            raise InvalidQueryError(
                f"Filter field {name!r} is not a field of this schema. Fields: {list(schema.names)}"
            )
        if not f.filterable:
            raise InvalidQueryError(f"Field {name!r} does not support filtering.")

    if not isinstance(query.page, int) or query.page < 1:
        raise InvalidQueryError(f"page must be a positive integer, got {query.page!r}")
    if not isinstance(query.page_size, int) or query.page_size < 1:
        raise InvalidQueryError(f"page_size must be a positive integer, got {query.page_size!r}")


# ---------------------------------------------------------------------------
# Pipeline stages (each returns a boolean mask aligned with dataset.frame)
# ---------------------------------------------------------------------------

def _all_rows(dataset: Dataset) -> pd.Series:
    return pd.Series(True, index=dataset.frame.index, dtype=bool)


def _search_mask(dataset: Dataset, search_term: str) -> pd.Series:
    term = str(search_term or "").lower()
    if not term:
        return _all_rows(dataset)

    text = dataset.text_frame
    hits = pd.Series(False, index=text.index, dtype=bool)
    for name in text.columns:
        hits = hits | text[name].str.contains(term, regex=False).astype(bool)
    return hits


def _field_filter_mask(dataset: Dataset, f: Field, value: Any) -> pd.Series:
    wanted = canonical_text(value).strip()
    if not wanted:
        return _all_rows(dataset)

    if f.filter_mode is FilterMode.CONTAINS:
        flags = [wanted in split_components(r[f.name], f.delimiter) for r in dataset.records]
    else:
        flags = [canonical_text(r[f.name]) == wanted for r in dataset.records]
    return pd.Series(flags, index=dataset.frame.index, dtype=bool)


def _date_range_mask(dataset: Dataset, date_range: DateRange) -> pd.Series:
    mask = _all_rows(dataset)
    if date_range.is_unbounded:
        return mask

    # ISO dates order correctly as plain strings.
    for f in dataset.schema.date_fields:
        col = dataset.frame[f.name]
        if date_range.start:
            mask = mask & (col >= date_range.start)
        if date_range.end:
            mask = mask & (col <= date_range.end)
    return mask


def _sort(frame: pd.DataFrame, query: Query) -> pd.DataFrame:
    if query.sort_key is None:
        return frame
    # "stable" keeps ties in filtered order for both directions.
    return frame.sort_values(
        by=query.sort_key,
        ascending=query.sort_direction is SortDirection.ASCENDING,
        kind="stable",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def evaluate(dataset: Dataset, query: Query) -> QueryResult:
    """
    Run search -> field filters -> date range -> sort -> paginate.

    Pure function of (dataset, query). Out-of-range pages return no items
    while total_matches and page_count still describe the full match set.
    """
    validate_query(dataset.schema, query)

    mask = _search_mask(dataset, query.search_term)
    for name, value in query.field_filters.items():
        mask = mask & _field_filter_mask(dataset, dataset.schema[name], value)
    mask = mask & _date_range_mask(dataset, query.date_range)

    ordered = _sort(dataset.frame[mask], query)

    total = int(len(ordered))
    start = (query.page - 1) * query.page_size
    positions = ordered.index[start:start + query.page_size]
    items = tuple(dataset.records[int(pos)] for pos in positions)

    logger.debug(
        "Evaluated %r: search=%r filters=%s range=%s sort=%s/%s -> %d matches, page %d (%d items)",
        dataset.keyword,
        query.search_term,
        query.field_filters,
        query.date_range,
        query.sort_key,
        query.sort_direction.value,
        total,
        query.page,
        len(items),
    )

    return QueryResult(
        items=items,
        total_matches=total,
        page_count=page_count(total, query.page_size),
        page=query.page,
        page_size=query.page_size,
    )


def filter_options(dataset: Dataset, field_name: str) -> List[str]:
    """
    Distinct filter values for a field, in first-seen dataset order.

    CONTAINS fields yield their distinct delimited components
    (e.g. "Quadriceps", "Hamstrings", "Glutes", ...).
    """
    f = dataset.schema[field_name]
    seen: Dict[str, None] = {}
    for r in dataset.records:
        if f.filter_mode is FilterMode.CONTAINS:
            values = split_components(r[f.name], f.delimiter)
        else:
            values = [canonical_text(r[f.name])]
        for v in values:
            if v and v not in seen:
                seen[v] = None
    return list(seen)


def active_filters(query: Query) -> Mapping[str, Any]:
    """Filters that actually constrain the result (non-empty values only)."""
    return {k: v for k, v in query.field_filters.items() if canonical_text(v).strip()}
