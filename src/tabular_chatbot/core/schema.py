from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import logging
import pandas as pd

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SchemaError(Exception):
    """Raised when a schema or a dataset's records violate their declared shape."""


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class FilterMode(str, Enum):
    """
    How a per-field filter value is compared against a record.

      - NONE:     the field is not filterable
      - EXACT:    canonical text equality (single-valued categorical fields)
      - CONTAINS: the field holds a delimited list; the filter value must be
                  one whole component of it (e.g. a muscle-group list)
    """
    NONE = "none"
    EXACT = "exact"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Field:
    name: str
    kind: FieldKind = FieldKind.TEXT
    filter_mode: FilterMode = FilterMode.NONE
    delimiter: str = ","
    display: Optional[str] = None  # "currency" or None

    @property
    def filterable(self) -> bool:
        return self.filter_mode is not FilterMode.NONE


def canonical_text(value: Any) -> str:
    """
    Canonical text rendering used for search and exact-match filters.

    Integral numbers drop their decimals (25.0 -> "25"). No currency or
    thousands formatting is applied here; that is a render-time concern.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def split_components(value: Any, delimiter: str) -> List[str]:
    """Split a delimited list value into stripped, non-empty components."""
    text = canonical_text(value)
    return [p.strip() for p in text.split(delimiter) if p.strip()]


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class Schema:
    """Ordered, non-empty sequence of uniquely named fields."""

    def __init__(self, fields: Iterable[Field]) -> None:
        self._fields: Tuple[Field, ...] = tuple(fields)
        if not self._fields:
            raise SchemaError("A schema must declare at least one field.")

        seen: Dict[str, Field] = {}
        for f in self._fields:
            if not f.name:
                raise SchemaError("Field names must be non-empty.")
            if f.name in seen:
                raise SchemaError(f"Duplicate field name in schema: {f.name!r}")
            if f.filter_mode is FilterMode.CONTAINS and not f.delimiter:
                raise SchemaError(f"Field {f.name!r} uses CONTAINS filtering but has no delimiter.")
            seen[f.name] = f
        self._by_name = seen

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self._fields)

    @property
    def date_fields(self) -> Tuple[Field, ...]:
        return tuple(f for f in self._fields if f.kind is FieldKind.DATE)

    @property
    def filterable_fields(self) -> Tuple[Field, ...]:
        return tuple(f for f in self._fields if f.filterable)

    def get(self, name: str) -> Optional[Field]:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> Field:
        try:
            return self._by_name[name]
        except KeyError:
            raise SchemaError(f"Unknown field {name!r}. Schema fields: {list(self.names)}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Schema({', '.join(f'{f.name}:{f.kind.value}' for f in self._fields)})"


class Record(Mapping):
    """
    Immutable ordered mapping of field name -> value.

    `index` is the record's position in its dataset and serves as its
    stable identity (render/sort key). It is not part of equality.
    """

    __slots__ = ("_values", "_index")

    def __init__(self, values: Mapping[str, Any], index: int) -> None:
        self._values: Dict[str, Any] = dict(values)
        self._index = int(index)

    @property
    def index(self) -> int:
        return self._index

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Record(index={self._index}, {self._values!r})"


def _check_value(f: Field, value: Any) -> bool:
    if f.kind is FieldKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if f.kind is FieldKind.DATE:
        return is_iso_date(value)
    return isinstance(value, str)


def _validate_row(schema: Schema, row: Mapping[str, Any], position: int) -> None:
    expected = set(schema.names)
    actual = set(row.keys())
    if actual != expected:
        missing = sorted(expected - actual)
        extra = sorted(actual - expected)
        raise SchemaError(
            f"Record {position} does not match schema. Missing: {missing}, unexpected: {extra}"
        )
    for f in schema:
        if not _check_value(f, row[f.name]):
            raise SchemaError(
                f"Record {position}: field {f.name!r} expects {f.kind.value}, got {row[f.name]!r}"
            )


class Dataset:
    """
    One command's table: a schema plus its ordered, immutable records.

    Built once at startup and shared read-only. Alongside the records it
    keeps a pandas frame of the raw values (numeric columns coerced) and a
    frame of lower-cased canonical text used by search.
    """

    def __init__(
        self,
        keyword: str,
        schema: Schema,
        rows: Iterable[Mapping[str, Any]],
        title: str = "",
        reply: Optional[str] = None,
    ) -> None:
        self.keyword = keyword
        self.schema = schema
        self.title = title or keyword
        self.reply = reply

        records: List[Record] = []
        for pos, row in enumerate(rows):
            _validate_row(schema, row, pos)
            records.append(Record({f.name: row[f.name] for f in schema}, index=pos))
        self._records: Tuple[Record, ...] = tuple(records)

        names = list(schema.names)
        frame = pd.DataFrame.from_records([dict(r) for r in self._records], columns=names)
        for f in schema:
            if f.kind is FieldKind.NUMBER:
                frame[f.name] = pd.to_numeric(frame[f.name])
        self._frame = frame

        self._text = pd.DataFrame(
            {name: [canonical_text(r[name]).lower() for r in self._records] for name in names},
            columns=names,
            index=frame.index,
            dtype=object,
        )

        logger.debug("Built dataset %r with %d records (%s)", keyword, len(self._records), schema)

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def frame(self) -> pd.DataFrame:
        """Raw values, one column per field, positional RangeIndex. Do not mutate."""
        return self._frame

    @property
    def text_frame(self) -> pd.DataFrame:
        """Lower-cased canonical text per field, aligned with `frame`. Do not mutate."""
        return self._text

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Dataset({self.keyword!r}, {len(self._records)} records)"
