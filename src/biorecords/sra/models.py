"""Sequencing read records."""

from __future__ import annotations

from ..core.models import Record
from ..core.registry import register_checker
from ..core.validity import Checker


class Read(Record):
    """
    A sequencing read.

    Attributes
    ----------
    seq_id : str
        Read identifier, e.g. ``SRR390728.2``.
    description : str
        Free text following the identifier in the header.
    length : int
        Read length.
    sequence : str
        Nucleotide sequence.
    quality : str
        Phred quality string, one character per base.

    """

    seq_id: str = ""
    description: str = ""
    length: int = 0
    sequence: str = ""
    quality: str = ""


READ_SCHEMA = {
    "seq_id": {"type": "string", "empty": False},
    "length": {"type": "integer", "length_of": "sequence"},
    "sequence": {"type": "string", "pattern": "nucleotide"},
    "quality": {"type": "string", "pattern": "quality", "length_of": "sequence"},
}

READ_CHECKER = register_checker(Read, Checker(READ_SCHEMA))
