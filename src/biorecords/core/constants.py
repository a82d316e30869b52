"""biorecords constants."""

import enum
from typing import Final


class DecodePolicy(enum.Enum):
    """How semantic validity failures affect a decode session."""

    STRICT = "strict"
    LENIENT = "lenient"


class FieldErrorReason(enum.Enum):
    """Why a field could not be converted or failed a check."""

    MALFORMED = "malformed"
    OUT_OF_RANGE = "out of range"
    WRONG_ARITY = "wrong arity"
    INVALID = "invalid"


class MgfKind(enum.Enum):
    """Mascot Generic Format flavours, named after the tool that writes them."""

    GENERIC = "generic"
    MSCONVERT = "msconvert"
    PAVA = "pava"
    PWIZ = "pwiz"
    FULLMS = "fullms"


class CsvSchema(enum.Enum):
    """UniProt tab-separated export layouts."""

    V1 = "v1"
    V2 = "v2"


INTEGER_WIDTHS: Final[dict[str, tuple[int, int]]] = {
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, 2**32 - 1),
    "u64": (0, 2**64 - 1),
    "i8": (-(2**7), 2**7 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "i64": (-(2**63), 2**63 - 1),
}

UNIPROT_NAMESPACE: Final[str] = "http://uniprot.org/uniprot"
RECORD_SENTINEL: Final[str] = "//"
BEGIN_IONS: Final[str] = "BEGIN IONS"
END_IONS: Final[str] = "END IONS"

FASTA_WIDTH: Final[int] = 60
TEXT_WIDTH: Final[int] = 75
TEXT_PREFIX_WIDTH: Final[int] = 5
CSV_CHUNKSIZE: Final[int] = 1

SETTINGS_ENV: Final[str] = "BIORECORDS_SETTINGS"
UNIPROT_URL: Final[str] = "https://rest.uniprot.org/uniprotkb"
