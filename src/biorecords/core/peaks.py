"""
Peak list model used by spectral records.

PeakList : Ordered sequence of (m/z, intensity) pairs.

"""

from __future__ import annotations

from math import nan
from typing import Iterable, Iterator

import numpy as np

from . import compression
from .exceptions import CorruptPeakList, PrecisionLoss, Unsorted
from .settings import get_settings


class PeakList:
    """
    Ordered sequence of (m/z, intensity) pairs.

    m/z values are stored as float64 and are non-decreasing. Intensity values
    are stored either as float32 or float64. The arrays are read-only: a
    PeakList is not modified after it is created.

    Parameters
    ----------
    mz : array-like
        m/z values, in non-decreasing order.
    intensity : array-like
        Intensity values, with the same size as `mz`.
    dtype : numpy dtype, default=numpy.float64
        Intensity data type. Either ``float32`` or ``float64``.

    Raises
    ------
    Unsorted
        If `mz` is not in non-decreasing order.

    """

    __slots__ = ("_mz", "_intensity")

    def __init__(self, mz, intensity, dtype=np.float64):
        dtype = np.dtype(dtype)
        if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
            msg = f"Intensity dtype must be float32 or float64. Got {dtype}."
            raise ValueError(msg)

        mz = np.array(mz, dtype=np.float64).reshape(-1)
        intensity = np.array(intensity, dtype=dtype).reshape(-1)
        if mz.size != intensity.size:
            msg = "mz and intensity must have the same size."
            raise ValueError(msg)
        if not _is_sorted(mz):
            raise Unsorted("m/z values must be in non-decreasing order.")

        mz.flags.writeable = False
        intensity.flags.writeable = False
        self._mz = mz
        self._intensity = intensity

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, float]], dtype=np.float64) -> PeakList:
        """
        Create a peak list from (m/z, intensity) pairs already sorted by m/z.

        Raises
        ------
        Unsorted
            If the m/z values are not in non-decreasing order.

        """
        mz, intensity = _split_pairs(pairs)
        return cls(mz, intensity, dtype=dtype)

    @classmethod
    def from_pairs_sorting(cls, pairs: Iterable[tuple[float, float]], dtype=np.float64) -> PeakList:
        """
        Create a peak list from (m/z, intensity) pairs in any order.

        Pairs are sorted by m/z with a stable sort. Pairs with equal m/z are
        kept in their input order.

        """
        mz, intensity = _split_pairs(pairs)
        order = np.argsort(mz, kind="stable")
        return cls(mz[order], intensity[order], dtype=dtype)

    @classmethod
    def decompress(cls, data: bytes) -> PeakList:
        """
        Restore a peak list created with :py:meth:`compress`.

        Raises
        ------
        CorruptPeakList
            If the buffer is invalid or the restored m/z values decrease.

        """
        mz, intensity = compression.decode(data)
        try:
            return cls(mz, intensity, dtype=intensity.dtype)
        except Unsorted as e:
            raise CorruptPeakList(str(e)) from e

    @property
    def mz(self) -> np.ndarray:
        """Read-only m/z array."""
        return self._mz

    @property
    def intensity(self) -> np.ndarray:
        """Read-only intensity array."""
        return self._intensity

    @property
    def dtype(self) -> np.dtype:
        """Intensity data type."""
        return self._intensity.dtype

    @property
    def average_mz(self) -> float:
        """Mean m/z value. ``nan`` if the peak list is empty."""
        return float(self._mz.mean()) if self._mz.size else nan

    @property
    def average_intensity(self) -> float:
        """Mean intensity value. ``nan`` if the peak list is empty."""
        return float(self._intensity.mean()) if self._intensity.size else nan

    def compress(self, tolerance: float | None = None) -> bytes:
        """
        Create a compressed representation of the peak list.

        Parameters
        ----------
        tolerance : float or None, default=None
            Maximum absolute deviation between an original value and the value
            restored by :py:meth:`decompress`. Zero stores exact values. If
            ``None``, the ``compression_tolerance`` setting is used.

        Returns
        -------
        bytes

        Raises
        ------
        PrecisionLoss
            If the restored values deviate from the original values by more
            than `tolerance`.

        """
        if tolerance is None:
            tolerance = get_settings().compression_tolerance
        data = compression.encode(self._mz, self._intensity, tolerance)
        mz, intensity = compression.decode(data)
        mz_error = _max_deviation(self._mz, mz)
        intensity_error = _max_deviation(self._intensity, intensity)
        if max(mz_error, intensity_error) > tolerance:
            msg = (
                f"compressed values deviate up to {max(mz_error, intensity_error)}, "
                f"larger than the tolerance {tolerance}"
            )
            raise PrecisionLoss(msg)
        return data

    def __len__(self) -> int:
        return self._mz.size

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return zip(self._mz.tolist(), self._intensity.tolist())

    def __eq__(self, other) -> bool:
        if not isinstance(other, PeakList):
            return NotImplemented
        return (
            self.dtype == other.dtype
            and np.array_equal(self._mz, other._mz)
            and np.array_equal(self._intensity, other._intensity)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PeakList(size={len(self)}, dtype={self.dtype})"


def _split_pairs(pairs: Iterable[tuple[float, float]]) -> tuple[np.ndarray, np.ndarray]:
    pairs = list(pairs)
    if not pairs:
        return np.zeros(0), np.zeros(0)
    array = np.array(pairs, dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != 2:
        msg = "pairs must be a sequence of (mz, intensity) tuples."
        raise ValueError(msg)
    return array[:, 0], array[:, 1]


def _is_sorted(x: np.ndarray) -> bool:
    return bool(np.all(x[1:] >= x[:-1]))


def _max_deviation(x: np.ndarray, y: np.ndarray) -> float:
    if not x.size:
        return 0.0
    return float(np.max(np.abs(x.astype(np.float64) - y.astype(np.float64))))
