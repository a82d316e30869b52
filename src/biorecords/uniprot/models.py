"""
UniProt protein entries.

ProteinEvidence : Protein existence level.
Feature : Sequence annotation.
Reference : Literature reference.
Protein : A UniProtKB entry.

"""

from __future__ import annotations

import enum
from copy import deepcopy
from typing import Final

import pydantic

from ..core.exceptions import MalformedField
from ..core.models import Record
from ..core.registry import register_checker
from ..core.validity import Checker

_VERBOSE: Final[dict[int, str]] = {
    1: "Evidence at protein level",
    2: "Evidence at transcript level",
    3: "Inferred from homology",
    4: "Predicted",
    5: "Uncertain",
}


class ProteinEvidence(enum.IntEnum):
    """Protein existence level, from the strongest to the weakest evidence."""

    PROTEIN_LEVEL = 1
    TRANSCRIPT_LEVEL = 2
    INFERRED = 3
    PREDICTED = 4
    UNKNOWN = 5

    @property
    def verbose(self) -> str:
        """Description used in flat text and tabular files."""
        return _VERBOSE[self.value]

    @classmethod
    def from_verbose(cls, text: str) -> ProteinEvidence:
        """
        Create an evidence level from its description, ignoring case.

        Raises
        ------
        MalformedField
            If `text` is not a known description.

        """
        lowered = text.strip().lower()
        for value, description in _VERBOSE.items():
            if description.lower() == lowered:
                return cls(value)
        raise MalformedField("protein_evidence", text)


class Feature(pydantic.BaseModel):
    """
    Sequence annotation.

    Attributes
    ----------
    kind : str
        Feature type, e.g. ``CHAIN`` in flat files or ``chain`` in XML.
    start : int
        First position, starting at one.
    end : int
        Last position, included.
    description : str

    """

    model_config = pydantic.ConfigDict(frozen=True)

    kind: str
    start: int
    end: int
    description: str = ""


class Reference(pydantic.BaseModel):
    """
    Literature reference.

    Attributes
    ----------
    number : int
        Reference number in the entry, starting at one.
    position : str
        What the reference is about, e.g. ``NUCLEOTIDE SEQUENCE [MRNA].``
    title : str
    location : str
        Journal or submission citation.

    """

    model_config = pydantic.ConfigDict(frozen=True)

    number: int
    position: str = ""
    title: str = ""
    location: str = ""


class Protein(Record):
    """
    A UniProtKB entry.

    Attributes
    ----------
    sequence_version : int
    protein_evidence : ProteinEvidence
    mass : int
        Average mass, in Da.
    length : int
        Sequence length.
    gene : str
        Primary gene name.
    id : str
        Primary accession, e.g. ``P46406``.
    mnemonic : str
        Entry name, e.g. ``G3P_RABIT``.
    name : str
        Recommended protein name.
    organism : str
        Scientific name of the source organism.
    proteome : str
        Proteome identifier and component, e.g. ``UP000001811: Unplaced``.
    sequence : str
    taxonomy : str
        NCBI taxonomy identifier.
    reviewed : bool
        ``True`` for Swiss-Prot entries, ``False`` for TrEMBL entries.
    features : tuple[Feature, ...]
    references : tuple[Reference, ...]

    """

    sequence_version: int = 0
    protein_evidence: ProteinEvidence = ProteinEvidence.UNKNOWN
    mass: int = 0
    length: int = 0
    gene: str = ""
    id: str = ""
    mnemonic: str = ""
    name: str = ""
    organism: str = ""
    proteome: str = ""
    sequence: str = ""
    taxonomy: str = ""
    reviewed: bool = False
    features: tuple[Feature, ...] = ()
    references: tuple[Reference, ...] = ()


_FEATURE_SCHEMA = {
    "type": "dict",
    "allow_unknown": True,
    "schema": {
        "kind": {"type": "string", "empty": False},
        "start": {"type": "integer", "min": 1, "lower_or_equal": "end"},
        "end": {"type": "integer", "min": 1},
    },
}

_REFERENCE_SCHEMA = {
    "type": "dict",
    "allow_unknown": True,
    "schema": {"number": {"type": "integer", "min": 1}},
}

PROTEIN_SCHEMA = {
    "sequence_version": {"type": "integer", "min": 1},
    "protein_evidence": {"type": "integer", "allowed": [1, 2, 3, 4]},
    "mass": {"type": "integer", "min": 1},
    "length": {"type": "integer", "length_of": "sequence"},
    "gene": {"type": "string", "empty": True, "pattern": "gene"},
    "id": {"type": "string", "pattern": "accession"},
    "mnemonic": {"type": "string", "pattern": "mnemonic"},
    "name": {"type": "string", "empty": False},
    "organism": {"type": "string", "empty": False},
    "proteome": {"type": "string", "empty": True, "pattern": "proteome"},
    "sequence": {"type": "string", "pattern": "aminoacid"},
    "taxonomy": {"type": "string", "empty": True, "pattern": "taxonomy"},
    "features": {"type": "list", "schema": _FEATURE_SCHEMA},
    "references": {"type": "list", "schema": _REFERENCE_SCHEMA},
}

PROTEIN_CHECKER = register_checker(Protein, Checker(PROTEIN_SCHEMA))

_COMPLETE_SCHEMA = deepcopy(PROTEIN_SCHEMA)
_COMPLETE_SCHEMA["proteome"]["empty"] = False
_COMPLETE_SCHEMA["taxonomy"]["empty"] = False

COMPLETE_CHECKER = Checker(_COMPLETE_SCHEMA)


def is_complete(protein: Protein) -> bool:
    """Check if an entry is valid and has proteome and taxonomy information."""
    return COMPLETE_CHECKER.check(protein).is_valid
