"""
UniProtKB flat text entries.

Only the line types that map to :py:class:`Protein` fields are read. Other
line types, e.g. ``CC`` comments or cross references other than proteomes, are
skipped.

"""

from __future__ import annotations

import re
from typing import Final

from ..core.exceptions import FieldOutOfRange, Malformed, MalformedField, WrongArity
from ..core.numeric import parse_int
from ..core.registry import register_codec
from ..formats.text import CONTINUATION_INDENT, Item, TextCodec
from .mass import crc64
from .models import Feature, Protein, ProteinEvidence, Reference

# entry dates are not stored, a fixed date is written
UNKNOWN_DATE: Final[str] = "01-JAN-1970"

SEQUENCE_LINE_WIDTH: Final[int] = 60
SEQUENCE_BLOCK_WIDTH: Final[int] = 10

_SEQUENCE_VERSION = re.compile(r"sequence version ([^.,;\s]+)")
_NAME = re.compile(r"(?:RecName|SubName): Full=([^;]*);")
_GENE = re.compile(r"(?:^|\s)Name=([^;]*);")
_TAXONOMY = re.compile(r"NCBI_TaxID=([^;\s]*)")
_REFERENCE_NUMBER = re.compile(r"\[([^\]]*)\]")
_EVIDENCE = re.compile(r"([^:]*):")
_NOTE = re.compile(r'/note="([^"]*)"')
# evidence tags, e.g. {ECO:0000250|UniProtKB:P04406}
_EVIDENCE_TAG = re.compile(r"\s*\{[^}]*\}")


class ProteinTextMapping:
    """Map UniProtKB flat text entries to :py:class:`Protein` records."""

    record_type = Protein
    itemized = frozenset({"DR", "FT", "RN"})

    def from_items(self, items: list[Item]) -> Protein:
        fields = dict()
        references: list[dict] = list()
        features = list()
        sequence_parts = list()
        for tag, value in items:
            if tag == "ID":
                fields.update(_parse_id(value))
            elif tag == "AC":
                accessions = [x.strip() for x in value.split(";") if x.strip()]
                if accessions:
                    fields["id"] = accessions[0]
            elif tag == "DT":
                match = _SEQUENCE_VERSION.search(value)
                if match is not None:
                    fields["sequence_version"] = parse_int(match.group(1), "u8", "sequence_version")
            elif tag == "DE":
                match = _NAME.search(value)
                if match is not None and "name" not in fields:
                    fields["name"] = _strip_evidence(match.group(1))
            elif tag == "GN":
                match = _GENE.search(value)
                if match is not None:
                    fields["gene"] = _strip_evidence(match.group(1))
            elif tag == "OS":
                fields["organism"] = value[:-1] if value.endswith(".") else value
            elif tag == "OX":
                match = _TAXONOMY.search(value)
                if match is not None:
                    fields["taxonomy"] = match.group(1)
            elif tag == "RN":
                match = _REFERENCE_NUMBER.match(value)
                if match is None:
                    raise MalformedField("references.number", value)
                references.append({"number": parse_int(match.group(1), "u32", "references.number")})
            elif tag in ("RP", "RT", "RL"):
                if not references:
                    raise Malformed(f"{tag} line before the first RN line")
                references[-1].update(_parse_reference_line(tag, value, references[-1]))
            elif tag == "DR":
                if value.startswith("Proteomes;"):
                    fields["proteome"] = _parse_proteome(value)
            elif tag == "PE":
                fields["protein_evidence"] = _parse_evidence(value)
            elif tag == "FT":
                features.append(_parse_feature(value))
            elif tag == "SQ":
                fields["mass"] = _parse_sequence_header(value)
            elif tag == "":
                sequence_parts.append(value.replace(" ", ""))
        if "mnemonic" not in fields:
            raise Malformed("entry without ID line")
        fields["sequence"] = "".join(sequence_parts)
        fields["features"] = tuple(features)
        fields["references"] = tuple(Reference(**x) for x in references)
        return Protein(**fields)

    def to_items(self, record: Protein) -> list[Item]:
        status = "Reviewed;" if record.reviewed else "Unreviewed;"
        length_width = 21 - len(status)
        items = [("ID", f"{record.mnemonic:<24}{status}{record.length:>{length_width}} AA.")]
        items.append(("AC", f"{record.id};"))
        if record.sequence_version:
            items.append(("DT", f"{UNKNOWN_DATE}, sequence version {record.sequence_version}."))
        category = "RecName" if record.reviewed else "SubName"
        items.append(("DE", f"{category}: Full={record.name};"))
        if record.gene:
            items.append(("GN", f"Name={record.gene};"))
        items.append(("OS", f"{record.organism}."))
        if record.taxonomy:
            items.append(("OX", f"NCBI_TaxID={record.taxonomy};"))
        for reference in record.references:
            items.extend(_reference_items(reference))
        if record.proteome:
            proteome, _, component = record.proteome.partition(": ")
            items.append(("DR", f"Proteomes; {proteome}; {component or '-'}."))
        evidence = record.protein_evidence
        items.append(("PE", f"{evidence.value}: {evidence.verbose};"))
        for feature in record.features:
            items.extend(_feature_items(feature))
        sequence = record.sequence
        items.append(
            ("SQ", f"SEQUENCE{record.length:>6} AA;{record.mass:>7} MW;  {crc64(sequence)} CRC64;")
        )
        for k in range(0, len(sequence), SEQUENCE_LINE_WIDTH):
            line = sequence[k : k + SEQUENCE_LINE_WIDTH]
            blocks = [line[j : j + SEQUENCE_BLOCK_WIDTH] for j in range(0, len(line), SEQUENCE_BLOCK_WIDTH)]
            items.append(("", " ".join(blocks)))
        return items


def _parse_id(value: str) -> dict:
    tokens = value.split()
    if len(tokens) < 3:
        raise WrongArity("ID", value, "expected entry name, status and length")
    status = tokens[1].rstrip(";")
    if status not in ("Reviewed", "Unreviewed"):
        raise MalformedField("reviewed", status)
    return {
        "mnemonic": tokens[0],
        "reviewed": status == "Reviewed",
        "length": parse_int(tokens[2], "u32", "length"),
    }


def _parse_reference_line(tag: str, value: str, reference: dict) -> dict:
    if tag == "RP":
        return {"position": value}
    if tag == "RT":
        title = value.rstrip(";").strip().strip('"')
        return {"title": title}
    location = reference.get("location")
    return {"location": f"{location} {value}" if location else value}


def _parse_proteome(value: str) -> str:
    parts = [x.strip() for x in value.rstrip(".").split(";")]
    if len(parts) < 2:
        raise WrongArity("proteome", value, "expected a proteome identifier")
    proteome = parts[1]
    if len(parts) > 2 and parts[2] not in ("", "-"):
        proteome = f"{proteome}: {parts[2]}"
    return proteome


def _parse_evidence(value: str) -> ProteinEvidence:
    match = _EVIDENCE.match(value)
    if match is None:
        raise MalformedField("protein_evidence", value)
    level = parse_int(match.group(1).strip(), "u8", "protein_evidence")
    try:
        return ProteinEvidence(level)
    except ValueError as e:
        raise FieldOutOfRange("protein_evidence", match.group(1), "expected a level from 1 to 5") from e


def _parse_feature(value: str) -> Feature:
    head, _, qualifiers = value.partition(" /")
    tokens = head.split()
    if len(tokens) != 2:
        raise WrongArity("features", value, "expected a feature type and location")
    kind, location = tokens
    first, separator, last = location.partition("..")
    start = parse_int(first.lstrip("<>"), "u32", "features.start")
    end = parse_int(last.lstrip("<>"), "u32", "features.end") if separator else start
    match = _NOTE.search("/" + qualifiers) if qualifiers else None
    description = "" if match is None else match.group(1)
    return Feature(kind=kind, start=start, end=end, description=description)


def _parse_sequence_header(value: str) -> int:
    tokens = value.split()
    if len(tokens) < 5 or tokens[0] != "SEQUENCE":
        raise WrongArity("SQ", value, "expected sequence length and mass")
    return parse_int(tokens[3], "u64", "mass")


def _strip_evidence(text: str) -> str:
    return _EVIDENCE_TAG.sub("", text).strip()


def _reference_items(reference: Reference) -> list[Item]:
    items = [("RN", f"[{reference.number}]")]
    if reference.position:
        items.append(("RP", reference.position))
    if reference.title:
        items.append(("RT", f'"{reference.title}";'))
    if reference.location:
        items.append(("RL", reference.location))
    return items


def _feature_items(feature: Feature) -> list[Item]:
    if feature.start == feature.end:
        location = str(feature.start)
    else:
        location = f"{feature.start}..{feature.end}"
    items = [("FT", f"{feature.kind:<16}{location}")]
    if feature.description:
        items.append(("FT", f'{CONTINUATION_INDENT}/note="{feature.description}"'))
    return items


@register_codec("uniprot-text", suffixes=(".dat", ".txt"))
def text_codec(**kwargs) -> TextCodec:
    """Create a codec for UniProtKB flat text files."""
    return TextCodec(ProteinTextMapping(), **kwargs)
