"""
UniProtKB XML entries.

Entries are the ``entry`` children of the ``uniprot`` root element. Reference
locations are stored in the citation ``name`` attribute. Feature types keep the
XML spelling, e.g. ``chain`` instead of the flat text ``CHAIN``.

"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..core.constants import UNIPROT_NAMESPACE
from ..core.numeric import parse_optional_int
from ..core.registry import register_codec
from ..formats.markup import ElementCursor, XmlCodec
from .mass import crc64
from .models import Feature, Protein, ProteinEvidence, Reference

SWISS_PROT = "Swiss-Prot"
TREMBL = "TrEMBL"


class ProteinXmlMapping:
    """Map UniProtKB XML entries to :py:class:`Protein` records."""

    record_type = Protein
    root_tag = "uniprot"
    record_tag = "entry"
    namespace = UNIPROT_NAMESPACE

    def from_element(self, cursor: ElementCursor) -> Protein:
        fields = {"reviewed": cursor.attribute("dataset") == SWISS_PROT}
        accession = cursor.child("accession")
        if accession is not None:
            fields["id"] = accession.text()
        mnemonic = cursor.child("name")
        if mnemonic is not None:
            fields["mnemonic"] = mnemonic.text()
        fields["name"] = _read_name(cursor)
        gene = cursor.find("gene")
        if gene is not None:
            primary = gene.child("name", type="primary")
            fields["gene"] = "" if primary is None else primary.text()
        organism = cursor.child("organism")
        if organism is not None:
            scientific = organism.child("name", type="scientific")
            fields["organism"] = "" if scientific is None else scientific.text()
            taxonomy = organism.child("dbReference", type="NCBI Taxonomy")
            fields["taxonomy"] = "" if taxonomy is None else taxonomy.attribute("id")
        proteome = cursor.child("dbReference", type="Proteomes")
        if proteome is not None:
            fields["proteome"] = _read_proteome(proteome)
        evidence = cursor.child("proteinExistence")
        if evidence is not None:
            fields["protein_evidence"] = ProteinEvidence.from_verbose(evidence.attribute("type"))
        sequence = cursor.child("sequence")
        if sequence is not None:
            fields["sequence"] = "".join(sequence.text().split())
            fields["length"] = parse_optional_int(sequence.attribute("length"), "u32", "length")
            fields["mass"] = parse_optional_int(sequence.attribute("mass"), "u64", "mass")
            fields["sequence_version"] = parse_optional_int(
                sequence.attribute("version"), "u8", "sequence_version"
            )
        fields["references"] = tuple(_read_reference(x) for x in cursor.children("reference"))
        fields["features"] = tuple(_read_feature(x) for x in cursor.children("feature"))
        return Protein(**fields)

    def to_element(self, record: Protein) -> ET.Element:
        entry = ET.Element("entry", dataset=SWISS_PROT if record.reviewed else TREMBL)
        ET.SubElement(entry, "accession").text = record.id
        ET.SubElement(entry, "name").text = record.mnemonic
        protein = ET.SubElement(entry, "protein")
        category = "recommendedName" if record.reviewed else "submittedName"
        ET.SubElement(ET.SubElement(protein, category), "fullName").text = record.name
        if record.gene:
            gene = ET.SubElement(entry, "gene")
            ET.SubElement(gene, "name", type="primary").text = record.gene
        organism = ET.SubElement(entry, "organism")
        ET.SubElement(organism, "name", type="scientific").text = record.organism
        if record.taxonomy:
            ET.SubElement(organism, "dbReference", type="NCBI Taxonomy", id=record.taxonomy)
        for reference in record.references:
            _write_reference(entry, reference)
        if record.proteome:
            proteome, _, component = record.proteome.partition(": ")
            element = ET.SubElement(entry, "dbReference", type="Proteomes", id=proteome)
            if component:
                ET.SubElement(element, "property", type="component", value=component)
        evidence = record.protein_evidence.verbose.lower()
        ET.SubElement(entry, "proteinExistence", type=evidence)
        for feature in record.features:
            _write_feature(entry, feature)
        sequence = ET.SubElement(
            entry,
            "sequence",
            length=str(record.length),
            mass=str(record.mass),
            checksum=crc64(record.sequence),
            version=str(record.sequence_version),
        )
        sequence.text = record.sequence
        return entry


def _read_name(cursor: ElementCursor) -> str:
    for category in ("recommendedName", "submittedName"):
        name = cursor.find("protein", category, "fullName")
        if name is not None:
            return name.text()
    return ""


def _read_proteome(cursor: ElementCursor) -> str:
    proteome = cursor.attribute("id")
    component = cursor.child("property", type="component")
    if component is not None and component.attribute("value"):
        proteome = f"{proteome}: {component.attribute('value')}"
    return proteome


def _read_reference(cursor: ElementCursor) -> Reference:
    number = parse_optional_int(cursor.attribute("key"), "u32", "references.number")
    citation = cursor.child("citation")
    title = location = ""
    if citation is not None:
        location = citation.attribute("name")
        title_element = citation.child("title")
        title = "" if title_element is None else title_element.text()
    scopes = [x.text() for x in cursor.children("scope")]
    return Reference(number=number, position=" ".join(scopes), title=title, location=location)


def _write_reference(entry: ET.Element, reference: Reference):
    element = ET.SubElement(entry, "reference", key=str(reference.number))
    citation = ET.SubElement(element, "citation", type="journal article", name=reference.location)
    if reference.title:
        ET.SubElement(citation, "title").text = reference.title
    if reference.position:
        ET.SubElement(element, "scope").text = reference.position


def _read_feature(cursor: ElementCursor) -> Feature:
    kind = cursor.attribute("type")
    description = cursor.attribute("description")
    location = cursor.child("location")
    start = end = 0
    if location is not None:
        position = location.child("position")
        if position is not None:
            start = end = parse_optional_int(position.attribute("position"), "u32", "features.start")
        else:
            begin = location.child("begin")
            last = location.child("end")
            if begin is not None:
                start = parse_optional_int(begin.attribute("position"), "u32", "features.start")
            if last is not None:
                end = parse_optional_int(last.attribute("position"), "u32", "features.end")
    return Feature(kind=kind, start=start, end=end, description=description)


def _write_feature(entry: ET.Element, feature: Feature):
    attributes = {"type": feature.kind}
    if feature.description:
        attributes["description"] = feature.description
    element = ET.SubElement(entry, "feature", attributes)
    location = ET.SubElement(element, "location")
    if feature.start == feature.end:
        ET.SubElement(location, "position", position=str(feature.start))
    else:
        ET.SubElement(location, "begin", position=str(feature.start))
        ET.SubElement(location, "end", position=str(feature.end))


@register_codec("uniprot-xml", suffixes=(".xml",))
def xml_codec(**kwargs) -> XmlCodec:
    """Create a codec for UniProtKB XML files."""
    return XmlCodec(ProteinXmlMapping(), **kwargs)
