"""
Lossy compression of peak list arrays.

m/z values are stored as fixed point integers with a scale derived from the
requested absolute tolerance, delta encoded and compressed with zlib. Intensity
values use the same fixed point scheme without delta encoding. A tolerance of
zero stores the raw float values. A block whose values cannot be restored within
the tolerance from fixed point integers is stored raw, with a scale of zero.

Buffer layout: a header with the ``HEADER`` dtype followed by the zlib
compressed m/z block and intensity block. Block sizes are stored in the header.

"""

import zlib

import numpy as np

from .exceptions import CorruptPeakList

MAGIC = b"BRPK"
VERSION = 1

HEADER = np.dtype(
    [
        ("magic", "S4"),
        ("version", "u1"),
        ("itemsize", "u1"),
        ("size", "<u4"),
        ("mz_scale", "<f8"),
        ("intensity_scale", "<f8"),
        ("mz_nbytes", "<u4"),
        ("intensity_nbytes", "<u4"),
    ]
)

# fixed point values must fit in an int64 after delta encoding and be exact in a float64
_MAX_FIXED_POINT = 2.0**52


def encode(mz: np.ndarray, intensity: np.ndarray, tolerance: float) -> bytes:
    """
    Compress m/z and intensity arrays.

    Parameters
    ----------
    mz : array[float64]
        Non-decreasing m/z values.
    intensity : array[float32] or array[float64]
    tolerance : float
        Maximum absolute deviation allowed for each restored value.

    Returns
    -------
    bytes

    """
    if tolerance < 0.0:
        msg = f"tolerance must be a non-negative number. Got {tolerance}."
        raise ValueError(msg)

    mz_data, mz_scale = _to_fixed_point(mz, tolerance, delta=True)
    intensity_data, intensity_scale = _to_fixed_point(intensity, tolerance, delta=False)
    mz_block = zlib.compress(mz_data)
    intensity_block = zlib.compress(intensity_data)

    header = np.zeros(1, dtype=HEADER)
    header["magic"] = MAGIC
    header["version"] = VERSION
    header["itemsize"] = intensity.dtype.itemsize
    header["size"] = mz.size
    header["mz_scale"] = mz_scale
    header["intensity_scale"] = intensity_scale
    header["mz_nbytes"] = len(mz_block)
    header["intensity_nbytes"] = len(intensity_block)
    return header.tobytes() + mz_block + intensity_block


def decode(data: bytes) -> tuple[np.ndarray, np.ndarray]:
    """
    Restore m/z and intensity arrays from a compressed buffer.

    Raises
    ------
    CorruptPeakList
        If the buffer is not a valid compressed peak list.

    """
    if len(data) < HEADER.itemsize:
        raise CorruptPeakList("buffer is smaller than the peak list header")
    header = np.frombuffer(data, dtype=HEADER, count=1)[0]
    if header["magic"] != MAGIC or header["version"] != VERSION:
        raise CorruptPeakList("buffer is not a compressed peak list")
    if header["itemsize"] not in (4, 8):
        raise CorruptPeakList(f"invalid intensity item size: {header['itemsize']}")

    size = int(header["size"])
    start = HEADER.itemsize
    mz_end = start + int(header["mz_nbytes"])
    intensity_end = mz_end + int(header["intensity_nbytes"])
    if intensity_end != len(data):
        raise CorruptPeakList("block sizes do not match the buffer size")

    try:
        mz_bytes = zlib.decompress(data[start:mz_end])
        intensity_bytes = zlib.decompress(data[mz_end:intensity_end])
    except zlib.error as e:
        raise CorruptPeakList(str(e)) from e

    mz = _from_fixed_point(mz_bytes, float(header["mz_scale"]), size, delta=True)
    intensity = _from_fixed_point(
        intensity_bytes, float(header["intensity_scale"]), size, delta=False
    )
    dtype = np.float32 if header["itemsize"] == 4 else np.float64
    return mz, intensity.astype(dtype)


def _to_fixed_point(x: np.ndarray, tolerance: float, delta: bool) -> tuple[bytes, float]:
    raw = x.astype(np.float64)
    if not tolerance:
        return raw.tobytes(), 0.0

    scale = 1.0 / tolerance
    scaled = raw * scale
    if not np.all(np.isfinite(scaled)) or np.any(np.abs(scaled) > _MAX_FIXED_POINT):
        return raw.tobytes(), 0.0
    fixed = np.rint(scaled).astype(np.int64)
    # restored values are cast back to the input dtype by the decoder
    restored = (fixed / scale).astype(x.dtype).astype(np.float64)
    if np.any(np.abs(restored - raw) > tolerance):
        return raw.tobytes(), 0.0
    if delta:
        fixed = np.diff(fixed, prepend=np.int64(0))
    return fixed.tobytes(), scale


def _from_fixed_point(data: bytes, scale: float, size: int, delta: bool) -> np.ndarray:
    itemsize = 8
    if len(data) != size * itemsize:
        raise CorruptPeakList("block size does not match the number of peaks")
    if not scale:
        return np.frombuffer(data, dtype=np.float64).copy()

    fixed = np.frombuffer(data, dtype=np.int64)
    if delta:
        if np.any(fixed[1:] < 0):
            raise CorruptPeakList("m/z values are not in non-decreasing order")
        fixed = np.cumsum(fixed)
    return fixed / scale
