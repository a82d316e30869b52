"""
Delimited tabular codec.

One record per row. The file starts with a header row naming the columns; the
column order written by the codec is fixed by its column layout. Rows are split
by pandas. Columns missing from a file decode to :py:data:`ABSENT`. Fields are
never quoted, so values cannot contain the delimiter or line breaks.

"""

from __future__ import annotations

from typing import Mapping, Protocol

from ..core.constants import DecodePolicy
from ..core.exceptions import Malformed, MalformedField
from ..core.models import Record
from ..core.registry import get_checker
from ..core.settings import get_settings
from ..core.stream import RawSpan, TabularBoundary
from ..core.validity import Checker, ValidationOutcome, apply_policy


class _Absent:
    """Marker of a field missing from the source."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

Row = Mapping[str, "str | _Absent"]


class TabularMapping(Protocol):
    """Conversion between table rows and a record type."""

    record_type: type[Record]
    columns: tuple[str, ...]
    required: frozenset[str]

    def from_row(self, row: Row) -> Record:
        """Create a record from a row. Missing fields are ``ABSENT``."""
        ...

    def to_row(self, record: Record) -> dict[str, str]:
        """Create the row of a record."""
        ...


class TabularCodec:
    """
    Codec for delimited tabular records.

    Parameters
    ----------
    mapping : TabularMapping
        Conversion between rows and records.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for the mapping
        record type is used.
    delimiter : str, default="\\t"
    chunksize : int or None, default=None
        Number of rows read at once. If ``None``, the value from the library
        settings is used.

    """

    def __init__(
        self,
        mapping: TabularMapping,
        checker: Checker | None = None,
        delimiter: str = "\t",
        chunksize: int | None = None,
    ):
        self.mapping = mapping
        self.checker = get_checker(mapping.record_type) if checker is None else checker
        self.delimiter = delimiter
        self.chunksize = get_settings().csv_chunksize if chunksize is None else chunksize

    def boundary(self) -> TabularBoundary:
        return TabularBoundary(self.delimiter, self.chunksize)

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Record, ValidationOutcome]:
        row = {x: _field(span.content, x) for x in self.mapping.columns}
        for column in self.mapping.required:
            if row[column] is ABSENT:
                raise Malformed(f"missing required column {column!r}")
        record = self.mapping.from_row(row)
        outcome = apply_policy(self.checker.check(record), policy)
        return record, outcome

    def encode(self, record: Record) -> bytes:
        row = self.mapping.to_row(record)
        values = list()
        for column in self.mapping.columns:
            value = row.get(column, "")
            if self.delimiter in value or "\n" in value or "\r" in value:
                raise MalformedField(column, value, "contains a delimiter or a line break")
            values.append(value)
        return self._format_line(values)

    def header(self) -> bytes:
        return self._format_line(self.mapping.columns)

    def footer(self) -> bytes:
        return b""

    def _format_line(self, values) -> bytes:
        return (self.delimiter.join(values) + "\n").encode()


def _field(content: Mapping, column: str):
    value = content.get(column, ABSENT)
    # pandas fills missing trailing fields with NaN
    return value if isinstance(value, str) else ABSENT
