"""
Flat text codec.

Records are blocks of ``TAG   value`` lines terminated by a ``//`` line. The tag
occupies a fixed width prefix. Consecutive lines with the same tag hold one
value and are joined with a single space. For itemized tags each unindented line
starts a new item and indented lines continue it.

"""

from __future__ import annotations

import textwrap
from typing import Iterable, Protocol, Sequence

from ..core.constants import RECORD_SENTINEL, TEXT_PREFIX_WIDTH, DecodePolicy
from ..core.models import Record
from ..core.registry import get_checker
from ..core.settings import get_settings
from ..core.stream import RawSpan, SentinelBoundary
from ..core.validity import Checker, ValidationOutcome, apply_policy

Item = tuple[str, str]

# indentation of wrapped lines of an unindented itemized value
CONTINUATION_INDENT = " " * 16


class TextMapping(Protocol):
    """Conversion between tagged items and a record type."""

    record_type: type[Record]
    itemized: frozenset[str]

    def from_items(self, items: list[Item]) -> Record:
        """Create a record from the tagged items of a block."""
        ...

    def to_items(self, record: Record) -> list[Item]:
        """Create the tagged items of a record, in output order."""
        ...


def tokenize(
    lines: Iterable[str],
    itemized: frozenset[str] = frozenset(),
    prefix_width: int = TEXT_PREFIX_WIDTH,
) -> list[Item]:
    """
    Split the lines of a block into tagged items.

    Parameters
    ----------
    lines : Iterable[str]
        Block lines without line terminators.
    itemized : frozenset[str], default=frozenset()
        Tags where each unindented line starts a new item.
    prefix_width : int, default=5
        Width of the tag prefix.

    Returns
    -------
    list[tuple[str, str]]
        (tag, value) pairs, in input order.

    """
    tags: list[str] = list()
    parts: list[list[str]] = list()
    for line in lines:
        tag = line[:prefix_width].rstrip()
        value = line[prefix_width:]
        stripped = value.strip()
        if tags and tags[-1] == tag and (tag not in itemized or value[:1].isspace()):
            if stripped:
                parts[-1].append(stripped)
            continue
        tags.append(tag)
        parts.append([stripped] if stripped else [])
    return [(tag, " ".join(x)) for tag, x in zip(tags, parts)]


def format_items(
    items: Sequence[Item],
    width: int,
    itemized: frozenset[str] = frozenset(),
    prefix_width: int = TEXT_PREFIX_WIDTH,
) -> list[str]:
    """
    Create the lines of a block from tagged items.

    Values longer than `width` are wrapped at spaces. Values starting with
    spaces keep their indentation on every wrapped line.

    """
    lines = list()
    for tag, value in items:
        text = value.lstrip()
        indent = value[: len(value) - len(text)]
        if indent:
            rest = indent
        elif tag in itemized:
            rest = CONTINUATION_INDENT
        else:
            rest = ""
        pieces = _wrap(text.rstrip(), width - len(indent)) or [""]
        for k, piece in enumerate(pieces):
            lead = indent if k == 0 else rest
            lines.append(f"{tag:<{prefix_width}}{lead}{piece}".rstrip())
    return lines


def _wrap(text: str, width: int) -> list[str]:
    if len(text) <= width:
        return [text] if text else []
    return textwrap.wrap(text, width, break_long_words=False, break_on_hyphens=False)


class TextCodec:
    """
    Codec for flat text records.

    Parameters
    ----------
    mapping : TextMapping
        Conversion between tagged items and records.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for the mapping
        record type is used.
    width : int or None, default=None
        Maximum value width. If ``None``, the value from the library settings is
        used.

    """

    def __init__(self, mapping: TextMapping, checker: Checker | None = None, width: int | None = None):
        self.mapping = mapping
        self.checker = get_checker(mapping.record_type) if checker is None else checker
        self.width = get_settings().text_width if width is None else width

    def boundary(self) -> SentinelBoundary:
        return SentinelBoundary(RECORD_SENTINEL)

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Record, ValidationOutcome]:
        items = tokenize(span.content, self.mapping.itemized)
        record = self.mapping.from_items(items)
        outcome = apply_policy(self.checker.check(record), policy)
        return record, outcome

    def encode(self, record: Record) -> bytes:
        items = self.mapping.to_items(record)
        lines = format_items(items, self.width, self.mapping.itemized)
        lines.append(RECORD_SENTINEL)
        return ("\n".join(lines) + "\n").encode()

    def header(self) -> bytes:
        return b""

    def footer(self) -> bytes:
        return b""
