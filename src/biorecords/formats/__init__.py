"""Format codecs: flat text, tabular, FASTA, FASTQ, MGF and XML."""

from .fasta import FastaCodec, SequenceEntry
from .fastq import FastqCodec
from .markup import ElementCursor, XmlCodec
from .mgf import MgfCodec
from .tabular import ABSENT, TabularCodec
from .text import TextCodec

__all__ = [
    "ABSENT",
    "ElementCursor",
    "FastaCodec",
    "FastqCodec",
    "MgfCodec",
    "SequenceEntry",
    "TabularCodec",
    "TextCodec",
    "XmlCodec",
]
