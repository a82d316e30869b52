"""
UniProtKB tab-separated exports.

Two column layouts are supported. The second one renames the sequence version
column and adds the review status.
Integer columns may be empty or use comma-grouped digits, e.g. ``35,780``.
Empty integer columns decode to zero, and zero is written as an empty column.

"""

from __future__ import annotations

from typing import Final

from ..core.constants import CsvSchema
from ..core.numeric import format_optional_int, parse_optional_int
from ..core.registry import register_codec
from ..core.settings import get_settings
from ..formats.tabular import ABSENT, Row, TabularCodec
from .models import Protein, ProteinEvidence

V1_COLUMNS: Final[tuple[str, ...]] = (
    "Sequence version",
    "Protein existence",
    "Mass",
    "Length",
    "Gene names  (primary )",
    "Entry",
    "Entry name",
    "Protein names",
    "Organism",
    "Proteomes",
    "Sequence",
    "Organism ID",
)

V2_COLUMNS: Final[tuple[str, ...]] = ("Version (sequence)",) + V1_COLUMNS[1:] + ("Status",)

# column to (field, kind)
_FIELDS: Final[dict[str, tuple[str, str]]] = {
    "Sequence version": ("sequence_version", "u8"),
    "Version (sequence)": ("sequence_version", "u8"),
    "Mass": ("mass", "u64"),
    "Length": ("length", "u32"),
    "Gene names  (primary )": ("gene", "str"),
    "Entry": ("id", "str"),
    "Entry name": ("mnemonic", "str"),
    "Protein names": ("name", "str"),
    "Organism": ("organism", "str"),
    "Proteomes": ("proteome", "str"),
    "Sequence": ("sequence", "str"),
    "Organism ID": ("taxonomy", "str"),
}


class ProteinTableMapping:
    """
    Map UniProtKB tab-separated rows to :py:class:`Protein` records.

    Parameters
    ----------
    schema : CsvSchema, default=CsvSchema.V2
        Column layout.

    """

    record_type = Protein
    required = frozenset({"Entry", "Sequence"})

    def __init__(self, schema: CsvSchema = CsvSchema.V2):
        self.schema = schema
        self.columns = V2_COLUMNS if schema is CsvSchema.V2 else V1_COLUMNS

    def from_row(self, row: Row) -> Protein:
        fields = dict()
        for column, (field, kind) in _FIELDS.items():
            text = row.get(column, ABSENT)
            if text is ABSENT:
                continue
            if kind == "str":
                fields[field] = text.strip()
            else:
                fields[field] = parse_optional_int(text.strip(), kind, field, thousands=True)
        evidence = row["Protein existence"]
        if evidence:
            fields["protein_evidence"] = ProteinEvidence.from_verbose(evidence)
        status = row.get("Status", ABSENT)
        if status:
            fields["reviewed"] = status.strip().lower() == "reviewed"
        return Protein(**fields)

    def to_row(self, record: Protein) -> dict[str, str]:
        row = dict()
        for column in self.columns:
            if column not in _FIELDS:
                continue
            field, kind = _FIELDS[column]
            value = getattr(record, field)
            row[column] = value if kind == "str" else format_optional_int(value)
        evidence = record.protein_evidence
        row["Protein existence"] = "" if evidence is ProteinEvidence.UNKNOWN else evidence.verbose
        if self.schema is CsvSchema.V2:
            row["Status"] = "reviewed" if record.reviewed else "unreviewed"
        return row


@register_codec("uniprot-csv", suffixes=(".tsv", ".tab"))
def csv_codec(schema: CsvSchema | None = None, **kwargs) -> TabularCodec:
    """
    Create a codec for UniProtKB tab-separated files.

    Parameters
    ----------
    schema : CsvSchema or None, default=None
        Column layout. If ``None``, the value from the library settings is used.
    **kwargs : dict
        Parameters passed to :py:class:`~biorecords.formats.TabularCodec`.

    """
    if schema is None:
        schema = get_settings().csv_schema
    return TabularCodec(ProteinTableMapping(schema), **kwargs)
