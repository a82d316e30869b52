"""
Sequence derived values: average mass and CRC64 checksum.

"""

from __future__ import annotations

from typing import Final

# average residue masses, in Da
RESIDUE_MASS: Final[dict[str, float]] = {
    "A": 71.0779,
    "C": 103.1429,
    "D": 115.0874,
    "E": 129.114,
    "F": 147.1739,
    "G": 57.0513,
    "H": 137.1393,
    "I": 113.1576,
    "K": 128.1723,
    "L": 113.1576,
    "M": 131.1961,
    "N": 114.1026,
    "P": 97.1152,
    "Q": 128.1292,
    "R": 156.1857,
    "S": 87.0773,
    "T": 101.1039,
    "U": 150.0379,
    "V": 99.1311,
    "W": 186.2099,
    "Y": 163.1733,
}

# water added by the free termini
TERMINI_MASS: Final[float] = 18.015


def average_mass(sequence: str) -> int:
    """
    Compute the average mass of a protein sequence.

    Residues are case-insensitive. Ambiguous residues add no mass.

    Parameters
    ----------
    sequence : str

    Returns
    -------
    int
        Mass in Da, rounded to the nearest integer.

    """
    total = sum(RESIDUE_MASS.get(x, 0.0) for x in sequence.upper())
    return round(total + TERMINI_MASS)


def _make_crc_table() -> tuple[list[int], list[int]]:
    high_poly = 0xD8000000
    table_high = list()
    table_low = list()
    for i in range(256):
        low = i
        high = 0
        for _ in range(8):
            flag = low & 1
            low >>= 1
            if high & 1:
                low |= 1 << 31
            high >>= 1
            if flag:
                high ^= high_poly
        table_high.append(high)
        table_low.append(low)
    return table_high, table_low


_CRC_HIGH, _CRC_LOW = _make_crc_table()


def crc64(sequence: str) -> str:
    """
    Compute the SWISS-PROT CRC64 checksum of a sequence.

    Returns
    -------
    str
        Checksum as 16 uppercase hexadecimal digits.

    """
    high = 0
    low = 0
    for c in sequence:
        shifted = (high & 0xFF) << 24
        next_high = high >> 8
        next_low = (low >> 8) | shifted
        k = (low ^ ord(c)) & 0xFF
        high = next_high ^ _CRC_HIGH[k]
        low = next_low ^ _CRC_LOW[k]
    return f"{high:08X}{low:08X}"
