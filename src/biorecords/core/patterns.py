"""
Shared regular expressions.

Patterns are stored as text in a read-only mapping and compiled on first use.
Compiled patterns are cached for the lifetime of the process.

"""

import re
from functools import lru_cache
from types import MappingProxyType
from typing import Final, Mapping

_ACCESSION = r"(?:[OPQ][0-9][A-Z0-9]{3}[0-9]|[A-NR-Z][0-9](?:[A-Z][A-Z0-9]{2}[0-9]){1,2})"

PATTERNS: Final[Mapping[str, str]] = MappingProxyType(
    {
        # numeric fields
        "integer": r"[+-]?[0-9]+",
        "grouped_integer": r"[+-]?[0-9]{1,3}(?:,[0-9]{3})*",
        "float": r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?",
        # protein entries
        "accession": _ACCESSION,
        "mnemonic": r"(?:[A-Za-z0-9]{1,5}|" + _ACCESSION + r")_[A-Za-z0-9]{1,5}",
        "gene": r"[A-Za-z0-9\-_ /*.@:();'$+]+",
        "aminoacid": r"[ABCDEFGHIJKLMNPQRSTUVWXYZabcdefghijklmnpqrstuvwxyz]+",
        "proteome": r"UP[0-9]{9}(?:: [A-Za-z0-9 ]+)?",
        "taxonomy": r"[0-9]+",
        # sequencing reads
        "nucleotide": r"[ACGTNacgtn]+",
        "quality": r"[!-~]+",
    }
)


@lru_cache(maxsize=None)
def get_pattern(name: str) -> re.Pattern:
    """
    Retrieve a compiled pattern by name.

    Parameters
    ----------
    name : str
        A key of :py:data:`PATTERNS`.

    Returns
    -------
    re.Pattern

    Raises
    ------
    ValueError
        If the pattern name is not defined.

    """
    try:
        return re.compile(PATTERNS[name])
    except KeyError as e:
        msg = f"{name} is not a valid pattern name."
        raise ValueError(msg) from e
