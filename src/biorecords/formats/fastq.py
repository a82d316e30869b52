"""
FASTQ codec.

A record is a block of four lines: ``@`` header, sequence, ``+`` separator and
quality. The separator may repeat the header text. A ``length=N`` suffix in the
header sets the read length.

"""

from __future__ import annotations

import re

from ..core.constants import DecodePolicy
from ..core.exceptions import LengthMismatch, Malformed
from ..core.numeric import format_int, parse_int
from ..core.registry import get_checker, register_codec
from ..core.stream import LineCountBoundary, RawSpan
from ..core.validity import Checker, ValidationOutcome, apply_policy
from ..sra.models import Read

_LENGTH_SUFFIX = re.compile(r"(?:^|\s)length=(\S*)$")


@register_codec("fastq", suffixes=(".fastq", ".fq"))
class FastqCodec:
    """
    Codec for FASTQ reads.

    Parameters
    ----------
    write_length : bool, default=False
        Append ``length=N`` to the header of encoded reads.
    repeat_header : bool, default=False
        Repeat the header text after the ``+`` separator of encoded reads.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for
        :py:class:`Read` is used.

    """

    def __init__(
        self,
        write_length: bool = False,
        repeat_header: bool = False,
        checker: Checker | None = None,
    ):
        self.write_length = write_length
        self.repeat_header = repeat_header
        self.checker = get_checker(Read) if checker is None else checker

    def boundary(self) -> LineCountBoundary:
        return LineCountBoundary(4)

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Read, ValidationOutcome]:
        header, sequence, separator, quality = span.content
        if not header.startswith("@"):
            raise Malformed(f"FASTQ header must start with '@': {header!r}")
        if not separator.startswith("+"):
            raise Malformed(f"FASTQ separator must start with '+': {separator!r}")
        if separator[1:] and separator[1:] != header[1:]:
            raise Malformed("FASTQ separator does not repeat the header")
        sequence = sequence.strip()
        quality = quality.strip()
        if len(sequence) != len(quality):
            msg = f"sequence length {len(sequence)} differs from quality length {len(quality)}"
            raise LengthMismatch(msg)

        seq_id, _, description = header[1:].strip().partition(" ")
        description = description.strip()
        length = len(sequence)
        match = _LENGTH_SUFFIX.search(description)
        if match is not None:
            length = parse_int(match.group(1), "u32", "length")
            description = description[: match.start()].strip()

        read = Read(
            seq_id=seq_id,
            description=description,
            length=length,
            sequence=sequence,
            quality=quality,
        )
        outcome = apply_policy(self.checker.check(read), policy)
        return read, outcome

    def encode(self, record: Read) -> bytes:
        header = record.seq_id
        if record.description:
            header += " " + record.description
        if self.write_length:
            header += " length=" + format_int(record.length)
        separator = header if self.repeat_header else ""
        text = f"@{header}\n{record.sequence}\n+{separator}\n{record.quality}\n"
        return text.encode()

    def header(self) -> bytes:
        return b""

    def footer(self) -> bytes:
        return b""
