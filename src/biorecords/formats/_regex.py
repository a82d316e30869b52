"""
Regular expression tokenizers.

Alternative implementations of the flat text and tabular tokenizing steps,
kept as a baseline to benchmark the production tokenizers against
(see ``benchmarks/tokenizers.py``). They are not used by any codec.

"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from ..core.constants import TEXT_PREFIX_WIDTH


@lru_cache(maxsize=None)
def _line_pattern(prefix_width: int) -> re.Pattern:
    return re.compile(r"(?P<tag>.{0,%d})(?P<indent>[ \t]*)(?P<value>.*?)\s*$" % prefix_width)


@lru_cache(maxsize=None)
def _delimiter_pattern(delimiter: str) -> re.Pattern:
    return re.compile(re.escape(delimiter))


def tokenize(
    lines: Iterable[str],
    itemized: frozenset[str] = frozenset(),
    prefix_width: int = TEXT_PREFIX_WIDTH,
) -> list[tuple[str, str]]:
    """Regex version of :py:func:`biorecords.formats.text.tokenize`."""
    pattern = _line_pattern(prefix_width)
    tags: list[str] = list()
    parts: list[list[str]] = list()
    for line in lines:
        match = pattern.match(line)
        tag = match.group("tag").rstrip()
        indent = match.group("indent")
        value = match.group("value")
        if tags and tags[-1] == tag and (tag not in itemized or indent):
            if value:
                parts[-1].append(value)
            continue
        tags.append(tag)
        parts.append([value] if value else [])
    return [(tag, " ".join(x)) for tag, x in zip(tags, parts)]


def split_row(line: str, delimiter: str = "\t") -> list[str]:
    """Split an unquoted delimited line into fields."""
    return _delimiter_pattern(delimiter).split(line)
