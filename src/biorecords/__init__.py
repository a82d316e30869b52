"""
biorecords
==========

Read and write biological records: protein entries, sequencing reads and mass
spectra.

Provides
    1. Lazy decoding of large record files with strict or lenient policies.
    2. Codecs for flat text, tab-separated, FASTA, FASTQ, MGF and XML files.
    3. Compressed peak lists with a fixed precision guarantee.
    4. Record validity checks shared by every format of a record type.

"""

__version__ = "0.1.0"

from . import core
from . import formats
from . import sra
from . import spectra
from . import uniprot
from . import fileio
from .core.codec import DecodeSession, decode_all, dump, dumps
from .core.constants import DecodePolicy
from .core.peaks import PeakList
from .core.registry import get_codec, get_codec_for_path, list_codecs
from .core.settings import get_settings
