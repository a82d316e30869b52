"""
UniProtKB FASTA entries.

Headers have the form::

    >sp|P46406|G3P_RABIT Glyceraldehyde-3-phosphate dehydrogenase OS=Oryctolagus cuniculus OX=9986 GN=GAPDH PE=1 SV=3

FASTA headers do not carry the entry mass, it is computed from the sequence.

"""

from __future__ import annotations

import re

from ..core.exceptions import FieldOutOfRange, MalformedField, WrongArity
from ..core.numeric import parse_int
from ..core.registry import register_codec
from ..formats.fasta import FastaCodec
from .mass import average_mass
from .models import Protein, ProteinEvidence

_KEYS = re.compile(r" (OS|OX|GN|PE|SV)=")

_DATABASES = {"sp": True, "tr": False}


class ProteinFastaMapping:
    """Map UniProtKB FASTA entries to :py:class:`Protein` records."""

    record_type = Protein

    def from_entry(self, identifier: str, description: str, sequence: str) -> Protein:
        parts = identifier.split("|")
        if len(parts) != 3:
            raise WrongArity("id", identifier, "expected db|accession|entry name")
        database, accession, mnemonic = parts
        if database not in _DATABASES:
            raise MalformedField("reviewed", database, "expected sp or tr")
        name, *pairs = _KEYS.split(" " + description)
        values = dict(zip(pairs[::2], pairs[1::2]))
        fields = {
            "id": accession,
            "mnemonic": mnemonic,
            "reviewed": _DATABASES[database],
            "name": name.strip(),
            "organism": values.get("OS", "").strip(),
            "taxonomy": values.get("OX", "").strip(),
            "gene": values.get("GN", "").strip(),
            "sequence": sequence,
            "length": len(sequence),
            "mass": average_mass(sequence),
        }
        if "PE" in values:
            level = parse_int(values["PE"].strip(), "u8", "protein_evidence")
            try:
                fields["protein_evidence"] = ProteinEvidence(level)
            except ValueError as e:
                raise FieldOutOfRange("protein_evidence", values["PE"], "expected a level from 1 to 5") from e
        if "SV" in values:
            fields["sequence_version"] = parse_int(values["SV"].strip(), "u8", "sequence_version")
        return Protein(**fields)

    def to_entry(self, record: Protein) -> tuple[str, str, str]:
        database = "sp" if record.reviewed else "tr"
        identifier = f"{database}|{record.id}|{record.mnemonic}"
        description = f"{record.name} OS={record.organism}"
        if record.taxonomy:
            description += f" OX={record.taxonomy}"
        if record.gene:
            description += f" GN={record.gene}"
        description += f" PE={record.protein_evidence.value}"
        if record.sequence_version:
            description += f" SV={record.sequence_version}"
        return identifier, description, record.sequence


@register_codec("uniprot-fasta")
def fasta_codec(**kwargs) -> FastaCodec:
    """Create a codec for UniProtKB FASTA files."""
    return FastaCodec(ProteinFastaMapping(), **kwargs)
