"""
UniProtKB protein entries in flat text, tab-separated, FASTA and XML formats.

Importing this package registers the ``uniprot-text``, ``uniprot-csv``,
``uniprot-fasta`` and ``uniprot-xml`` codecs.

"""

from . import client
from .fasta import ProteinFastaMapping, fasta_codec
from .markup import ProteinXmlMapping, xml_codec
from .mass import average_mass, crc64
from .models import PROTEIN_CHECKER, Feature, Protein, ProteinEvidence, Reference, is_complete
from .tabular import ProteinTableMapping, csv_codec
from .text import ProteinTextMapping, text_codec

__all__ = [
    "client",
    "PROTEIN_CHECKER",
    "Feature",
    "Protein",
    "ProteinEvidence",
    "ProteinFastaMapping",
    "ProteinTableMapping",
    "ProteinTextMapping",
    "ProteinXmlMapping",
    "Reference",
    "average_mass",
    "crc64",
    "csv_codec",
    "fasta_codec",
    "is_complete",
    "text_codec",
    "xml_codec",
]
