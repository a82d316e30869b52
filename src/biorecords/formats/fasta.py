"""
FASTA codec.

A record is a header line, ``>`` followed by an identifier and an optional
free text description, and one or more sequence lines. Sequence lines are
concatenated on decode and wrapped at a fixed width on encode.

SequenceEntry : Generic FASTA record.
FastaCodec : FASTA decode and encode.

"""

from __future__ import annotations

from typing import Protocol

from ..core.constants import DecodePolicy
from ..core.exceptions import Malformed
from ..core.models import Record
from ..core.registry import get_checker, register_checker, register_codec
from ..core.settings import get_settings
from ..core.stream import PrefixBoundary, RawSpan
from ..core.validity import Checker, ValidationOutcome, apply_policy


class FastaMapping(Protocol):
    """Conversion between FASTA entries and a record type."""

    record_type: type[Record]

    def from_entry(self, identifier: str, description: str, sequence: str) -> Record:
        """Create a record from the parts of a FASTA entry."""
        ...

    def to_entry(self, record: Record) -> tuple[str, str, str]:
        """Create the identifier, description and sequence of a record."""
        ...


class SequenceEntry(Record):
    """
    Generic FASTA record.

    Attributes
    ----------
    identifier : str
    description : str
    sequence : str

    """

    identifier: str
    description: str = ""
    sequence: str = ""


SEQUENCE_ENTRY_SCHEMA = {
    "identifier": {"type": "string", "empty": False},
    "sequence": {"type": "string", "regex": r"[A-Za-z*\-]+"},
}

register_checker(SequenceEntry, Checker(SEQUENCE_ENTRY_SCHEMA))


class SequenceEntryMapping:
    """Map FASTA entries to :py:class:`SequenceEntry` records."""

    record_type = SequenceEntry

    def from_entry(self, identifier: str, description: str, sequence: str) -> SequenceEntry:
        return SequenceEntry(identifier=identifier, description=description, sequence=sequence)

    def to_entry(self, record: SequenceEntry) -> tuple[str, str, str]:
        return record.identifier, record.description, record.sequence


@register_codec("fasta", suffixes=(".fasta", ".fa", ".faa", ".fna"))
class FastaCodec:
    """
    Codec for FASTA records.

    Parameters
    ----------
    mapping : FastaMapping or None, default=None
        Conversion between entries and records. If ``None``, entries are
        decoded as :py:class:`SequenceEntry` records.
    width : int or None, default=None
        Sequence line width. If ``None``, the value from the library settings is
        used.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for the mapping
        record type is used.

    """

    def __init__(
        self,
        mapping: FastaMapping | None = None,
        width: int | None = None,
        checker: Checker | None = None,
    ):
        self.mapping = SequenceEntryMapping() if mapping is None else mapping
        self.width = get_settings().fasta_width if width is None else width
        self.checker = get_checker(self.mapping.record_type) if checker is None else checker

    def boundary(self) -> PrefixBoundary:
        return PrefixBoundary(">")

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Record, ValidationOutcome]:
        header, *lines = span.content
        identifier, _, description = header[1:].strip().partition(" ")
        if not identifier:
            raise Malformed("FASTA header without identifier")
        sequence = "".join(x.strip() for x in lines)
        record = self.mapping.from_entry(identifier, description.strip(), sequence)
        outcome = apply_policy(self.checker.check(record), policy)
        return record, outcome

    def encode(self, record: Record) -> bytes:
        identifier, description, sequence = self.mapping.to_entry(record)
        header = f">{identifier} {description}" if description else f">{identifier}"
        lines = [header]
        lines.extend(sequence[k : k + self.width] for k in range(0, len(sequence), self.width))
        return ("\n".join(lines) + "\n").encode()

    def header(self) -> bytes:
        return b""

    def footer(self) -> bytes:
        return b""
