"""
Streaming engine.

Turns a byte source into a lazy sequence of raw record spans. The engine reads
the source line by line (or delegates to pandas and ElementTree for tabular and
XML sources) and keeps only the current record in memory.

RawSpan : The raw content of one record.
RecordIterator : Forward-only iterator over the spans of a source.
open_spans : Create a RecordIterator from a path, bytes or a file object.

"""

from __future__ import annotations

import csv
import gzip
import io
import logging
import os
import pathlib
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import IO, Any, Iterator, Mapping, Protocol, Union
from xml.parsers.expat import errors as expat_errors

import pandas as pd

from .constants import BEGIN_IONS, CSV_CHUNKSIZE, END_IONS, RECORD_SENTINEL
from .exceptions import Malformed, RecordError, TruncatedRecord

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, bytearray, memoryview, IO]


@dataclass(frozen=True)
class RawSpan:
    """
    Raw content of one record.

    Attributes
    ----------
    index : int
        Ordinal of the record in the source, starting at zero.
    line : int
        Line where the record starts. ``0`` when the position is not known.
    content : Any
        A tuple of lines for block formats, a mapping from column name to field
        text for tabular formats, or an ``Element`` for XML formats.
    context : Mapping[str, str]
        Source level parameters that apply to the record, e.g. MGF parameters
        defined before the first ion section.

    """

    index: int
    line: int
    content: Any
    context: Mapping[str, str] = field(default_factory=dict)


class Boundary(Protocol):
    """Record boundary recognition strategy."""

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        """
        Yield the spans of a stream.

        Errors are yielded instead of raised, so that the iteration may continue
        after a malformed record.

        """
        ...


class RecordIterator:
    """
    Forward-only iterator over the spans of a source.

    Boundary errors are raised by ``next`` and iteration may continue after
    them, except for :py:class:`TruncatedRecord`, which is always the last item.
    The iterator is not restartable and is not safe for concurrent use.

    Parameters
    ----------
    stream : IO
        Opened source.
    boundary : Boundary
        Strategy used to split the source into spans.
    owned : bool
        If ``True``, the stream is closed when the iterator is closed.

    """

    def __init__(self, stream: IO, boundary: Boundary, owned: bool):
        self._closed = False
        self._stream = stream
        self._owned = owned
        self._spans = boundary.split(stream)

    @property
    def closed(self) -> bool:
        """``True`` after the iterator has been exhausted or closed."""
        return self._closed

    def __iter__(self) -> RecordIterator:
        return self

    def __next__(self) -> RawSpan:
        if self._closed:
            raise StopIteration
        try:
            item = next(self._spans)
        except StopIteration:
            self.close()
            raise
        if isinstance(item, RecordError):
            if isinstance(item, TruncatedRecord):
                self.close()
            raise item
        return item

    def close(self):
        """Stop the iteration and release the source if the iterator owns it."""
        if self._closed:
            return
        self._closed = True
        self._spans.close()
        if self._owned:
            self._stream.close()
            logger.debug("Closed source %r.", self._stream)

    def __enter__(self) -> RecordIterator:
        return self

    def __exit__(self, *args):
        self.close()

    def __del__(self):
        if hasattr(self, "_spans"):
            self.close()


def open_spans(source: Source, boundary: Boundary, close_source: bool = False) -> RecordIterator:
    """
    Create a lazy iterator over the record spans of a source.

    Parameters
    ----------
    source : str, os.PathLike, bytes or file object
        Paths are opened in binary mode, files with a ``.gz`` suffix are
        decompressed. File objects may be binary or text streams.
    boundary : Boundary
        Strategy used to recognize record boundaries.
    close_source : bool, default=False
        Close a file object source when the iterator is closed. Sources opened
        from paths or bytes are always closed.

    Returns
    -------
    RecordIterator

    """
    stream, owned = _open_source(source)
    logger.debug("Opened source %r with %s.", stream, type(boundary).__name__)
    return RecordIterator(stream, boundary, owned or close_source)


def _open_source(source: Source) -> tuple[IO, bool]:
    if isinstance(source, (str, os.PathLike)):
        path = pathlib.Path(source)
        if path.suffix == ".gz":
            return gzip.open(path, "rb"), True
        return path.open("rb"), True
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source)), True
    if hasattr(source, "read"):
        return source, False
    msg = f"Expected a path, bytes or a file object. Got {type(source)}."
    raise TypeError(msg)


def _iter_lines(stream: IO) -> Iterator[tuple[int, str]]:
    for number, line in enumerate(stream, start=1):
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        yield number, line.rstrip("\r\n")


class SentinelBoundary:
    """
    Blocks of lines terminated by a sentinel line.

    Blank lines between blocks are ignored.

    Parameters
    ----------
    sentinel : str, default="//"

    """

    def __init__(self, sentinel: str = RECORD_SENTINEL):
        self.sentinel = sentinel

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        lines: list[str] = list()
        index = 0
        start = 0
        for number, line in _iter_lines(stream):
            if not lines and not line.strip():
                continue
            if not lines:
                start = number
            if line.rstrip() == self.sentinel:
                yield RawSpan(index, start, tuple(lines))
                index += 1
                lines = list()
            else:
                lines.append(line)
        if lines:
            msg = f"source ended before the {self.sentinel!r} terminator"
            yield TruncatedRecord(msg, index, start)


class PrefixBoundary:
    """
    Records that start with a header line marked by a prefix.

    Blank lines are ignored. Non-blank lines before the first header are
    reported as malformed. A header at the end of the source without any content
    line is reported as truncated.

    Parameters
    ----------
    prefix : str, default=">"

    """

    def __init__(self, prefix: str = ">"):
        self.prefix = prefix

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        header: str | None = None
        lines: list[str] = list()
        index = 0
        start = 0
        orphan = False
        for number, line in _iter_lines(stream):
            if line.startswith(self.prefix):
                if header is not None:
                    yield RawSpan(index, start, (header, *lines))
                    index += 1
                header = line
                lines = list()
                start = number
            elif not line.strip():
                continue
            elif header is None:
                if not orphan:
                    msg = f"content found before the first {self.prefix!r} header"
                    yield Malformed(msg, index, number)
                orphan = True
            else:
                lines.append(line)

        if header is not None:
            if lines:
                yield RawSpan(index, start, (header, *lines))
            else:
                yield TruncatedRecord("source ended after a record header", index, start)


class LineCountBoundary:
    """
    Records made of a fixed number of lines.

    Blank lines between records are ignored.

    Parameters
    ----------
    count : int, default=4

    """

    def __init__(self, count: int = 4):
        self.count = count

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        block: list[str] = list()
        index = 0
        start = 0
        for number, line in _iter_lines(stream):
            if not block:
                if not line.strip():
                    continue
                start = number
            block.append(line)
            if len(block) == self.count:
                yield RawSpan(index, start, tuple(block))
                index += 1
                block = list()
        if block:
            msg = f"expected {self.count} lines, source ended after {len(block)}"
            yield TruncatedRecord(msg, index, start)


class DelimitedBoundary:
    """
    Sections enclosed by a begin and an end line.

    ``KEY=VALUE`` lines outside the sections are collected as source parameters
    and attached to the following spans as context. Lines starting with a
    comment character are ignored.

    Parameters
    ----------
    begin : str, default="BEGIN IONS"
    end : str, default="END IONS"

    """

    comment_chars = ("#", ";", "!", "/")

    def __init__(self, begin: str = BEGIN_IONS, end: str = END_IONS):
        self.begin = begin
        self.end = end

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        params: dict[str, str] = dict()
        context: Mapping[str, str] = MappingProxyType(params.copy())
        lines: list[str] = list()
        inside = False
        index = 0
        start = 0
        for number, line in _iter_lines(stream):
            stripped = line.strip()
            if inside:
                if stripped == self.end:
                    yield RawSpan(index, start, tuple(lines), context)
                    index += 1
                    inside = False
                elif stripped == self.begin:
                    msg = f"{self.begin!r} found before {self.end!r}"
                    yield Malformed(msg, index, start)
                    index += 1
                    lines = list()
                    start = number
                elif stripped:
                    lines.append(stripped)
            elif stripped == self.begin:
                inside = True
                lines = list()
                start = number
                context = MappingProxyType(params.copy())
            elif not stripped or stripped.startswith(self.comment_chars):
                continue
            elif "=" in stripped:
                key, _, value = stripped.partition("=")
                params[key.strip()] = value.strip()
            else:
                msg = f"unexpected line outside of a {self.begin!r} section"
                yield Malformed(msg, index, number)
        if inside:
            msg = f"source ended before {self.end!r}"
            yield TruncatedRecord(msg, index, start)


class TabularBoundary:
    """
    Rows of a delimited file with a header row, read with pandas.

    Each span content is a mapping from column name to field text. Missing
    trailing fields are ``NaN``. Rows with more fields than the header are
    reported as malformed, with their line number. Fields are never quoted and
    invalid UTF-8 bytes are replaced.

    Parameters
    ----------
    delimiter : str, default="\\t"
    chunksize : int, default=1
        Number of rows read from the source at once.

    """

    def __init__(self, delimiter: str = "\t", chunksize: int = CSV_CHUNKSIZE):
        self.delimiter = delimiter
        self.chunksize = chunksize

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        bad_lines: list[list[str]] = list()
        index = 0
        line = 1
        n_columns = 0
        try:
            reader = pd.read_csv(
                stream,
                sep=self.delimiter,
                dtype=str,
                keep_default_na=False,
                chunksize=self.chunksize,
                engine="python",
                quoting=csv.QUOTE_NONE,
                encoding_errors="replace",
                on_bad_lines=bad_lines.append,
            )
            with reader:
                for chunk in reader:
                    n_columns = len(chunk.columns)
                    yield from self._flush_bad_lines(bad_lines, n_columns, index, line)
                    index += len(bad_lines)
                    line += len(bad_lines)
                    bad_lines.clear()
                    columns = list(chunk.columns)
                    for row in chunk.itertuples(index=False, name=None):
                        line += 1
                        yield RawSpan(index, line, dict(zip(columns, row)))
                        index += 1
                yield from self._flush_bad_lines(bad_lines, n_columns, index, line)
        except pd.errors.EmptyDataError:
            return
        except (pd.errors.ParserError, csv.Error) as e:
            if "EOF" in str(e) or "end of data" in str(e):
                yield TruncatedRecord(str(e), index, line + 1)
            else:
                yield Malformed(str(e), index, line + 1)

    @staticmethod
    def _flush_bad_lines(bad_lines, n_columns, index, line):
        for offset, fields in enumerate(bad_lines, start=1):
            msg = f"expected {n_columns} fields, found {len(fields)}"
            yield Malformed(msg, index + offset - 1, line + offset)


_NO_ELEMENTS = expat_errors.codes[expat_errors.XML_ERROR_NO_ELEMENTS]
_TRUNCATION_CODES = frozenset(
    expat_errors.codes[x]
    for x in (
        expat_errors.XML_ERROR_NO_ELEMENTS,
        expat_errors.XML_ERROR_UNCLOSED_TOKEN,
        expat_errors.XML_ERROR_PARTIAL_CHAR,
    )
)


def local_name(tag: str) -> str:
    """Remove the namespace from an element tag."""
    return tag.rsplit("}", 1)[-1]


class ElementBoundary:
    """
    Child elements of an XML document root, read with ElementTree.

    Each span content is an ``Element``. Elements are removed from the document
    tree once the consumer requests the next span.

    Parameters
    ----------
    tag : str, default="entry"
        Local name of the record elements.

    """

    def __init__(self, tag: str = "entry"):
        self.tag = tag

    def split(self, stream: IO) -> Iterator[RawSpan | RecordError]:
        root = None
        depth = 0
        index = 0
        try:
            for event, element in ET.iterparse(stream, events=("start", "end")):
                if event == "start":
                    if root is None:
                        root = element
                    depth += 1
                    continue
                depth -= 1
                if depth == 1 and local_name(element.tag) == self.tag:
                    yield RawSpan(index, 0, element)
                    index += 1
                    root.remove(element)
        except ET.ParseError as e:
            line = e.position[0]
            if e.code in _TRUNCATION_CODES:
                if root is None and e.code == _NO_ELEMENTS:
                    # empty source
                    return
                yield TruncatedRecord(str(e), index, line)
            else:
                yield Malformed(str(e), index, line)
