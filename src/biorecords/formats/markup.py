"""
XML codec.

Records are the child elements of the document root. Element boundaries are
found by ElementTree; mappings read each element through an
:py:class:`ElementCursor` and build elements to encode records.

"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterator, Protocol

from ..core.constants import DecodePolicy
from ..core.models import Record
from ..core.registry import get_checker
from ..core.stream import ElementBoundary, RawSpan, local_name
from ..core.validity import Checker, ValidationOutcome, apply_policy


class ElementCursor:
    """
    Read-only navigation over an element and its descendants.

    Element names are compared without namespace.

    Parameters
    ----------
    element : xml.etree.ElementTree.Element

    """

    def __init__(self, element: ET.Element):
        self.element = element

    @property
    def name(self) -> str:
        """Element local name."""
        return local_name(self.element.tag)

    def children(self, name: str, **attributes: str) -> Iterator[ElementCursor]:
        """Iterate over child elements with a local name and attribute values."""
        for child in self.element:
            if local_name(child.tag) != name:
                continue
            if all(child.get(k) == v for k, v in attributes.items()):
                yield ElementCursor(child)

    def child(self, name: str, **attributes: str) -> ElementCursor | None:
        """Retrieve the first matching child element, or ``None``."""
        return next(self.children(name, **attributes), None)

    def find(self, *path: str) -> ElementCursor | None:
        """Enter nested elements by local name. ``None`` if any step is missing."""
        cursor: ElementCursor | None = self
        for name in path:
            if cursor is None:
                return None
            cursor = cursor.child(name)
        return cursor

    def attribute(self, name: str, default: str = "") -> str:
        """Read an attribute value."""
        return self.element.get(name, default)

    def text(self, default: str = "") -> str:
        """Read the element text, without surrounding whitespace."""
        text = self.element.text
        return default if text is None else text.strip()


class XmlMapping(Protocol):
    """Conversion between XML elements and a record type."""

    record_type: type[Record]
    root_tag: str
    record_tag: str
    namespace: str

    def from_element(self, cursor: ElementCursor) -> Record:
        """Create a record from an element."""
        ...

    def to_element(self, record: Record) -> ET.Element:
        """Create the element of a record."""
        ...


class XmlCodec:
    """
    Codec for XML records.

    Parameters
    ----------
    mapping : XmlMapping
        Conversion between elements and records.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for the mapping
        record type is used.

    """

    def __init__(self, mapping: XmlMapping, checker: Checker | None = None):
        self.mapping = mapping
        self.checker = get_checker(mapping.record_type) if checker is None else checker

    def boundary(self) -> ElementBoundary:
        return ElementBoundary(self.mapping.record_tag)

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Record, ValidationOutcome]:
        record = self.mapping.from_element(ElementCursor(span.content))
        outcome = apply_policy(self.checker.check(record), policy)
        return record, outcome

    def encode(self, record: Record) -> bytes:
        element = self.mapping.to_element(record)
        ET.indent(element, space="  ", level=1)
        return ("  " + ET.tostring(element, encoding="unicode").rstrip() + "\n").encode()

    def header(self) -> bytes:
        namespace = self.mapping.namespace
        text = '<?xml version="1.0" encoding="UTF-8"?>\n'
        text += f'<{self.mapping.root_tag} xmlns="{namespace}">\n'
        return text.encode()

    def footer(self) -> bytes:
        return f"</{self.mapping.root_tag}>\n".encode()
