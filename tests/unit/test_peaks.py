import math

import numpy as np
import pytest

from biorecords.core import compression
from biorecords.core.exceptions import CorruptPeakList, Unsorted
from biorecords.core.peaks import PeakList


@pytest.fixture
def peaks():
    mz = [205.9304178, 257.5238596, 257.5260786, 288.2038337, 296.4852054]
    intensity = [0.0, 457.499206543, 742.1607666016, 1740.2529296875, 0.0]
    return PeakList(mz, intensity)


def test_peak_list_arrays_are_read_only(peaks):
    with pytest.raises(ValueError):
        peaks.mz[0] = 1.0
    with pytest.raises(ValueError):
        peaks.intensity[0] = 1.0


def test_peak_list_unsorted_raises():
    with pytest.raises(Unsorted):
        PeakList([100.0, 99.0], [5.0, 3.0])


def test_peak_list_size_mismatch_raises():
    with pytest.raises(ValueError):
        PeakList([100.0, 101.0], [5.0])


def test_peak_list_invalid_dtype_raises():
    with pytest.raises(ValueError):
        PeakList([100.0], [5.0], dtype=np.int32)


def test_from_pairs_sorted_input():
    pairs = [(99.0, 3.0), (100.0, 5.0)]
    assert PeakList.from_pairs(pairs) == PeakList.from_pairs_sorting(pairs)


def test_from_pairs_unsorted_input_raises():
    with pytest.raises(Unsorted):
        PeakList.from_pairs([(100.0, 5.0), (99.0, 3.0)])


def test_from_pairs_sorting():
    peaks = PeakList.from_pairs_sorting([(100.0, 5.0), (99.0, 3.0)])
    assert peaks.mz.tolist() == [99.0, 100.0]
    assert peaks.intensity.tolist() == [3.0, 5.0]


def test_from_pairs_sorting_is_stable():
    pairs = [(100.0, 1.0), (99.0, 2.0), (100.0, 3.0), (99.0, 4.0)]
    peaks = PeakList.from_pairs_sorting(pairs)
    assert list(peaks) == [(99.0, 2.0), (99.0, 4.0), (100.0, 1.0), (100.0, 3.0)]


def test_from_pairs_sorting_random_pairs_are_non_decreasing():
    rng = np.random.default_rng(7)
    for _ in range(20):
        pairs = rng.uniform(50.0, 2000.0, size=(rng.integers(0, 100), 2))
        peaks = PeakList.from_pairs_sorting(pairs.tolist())
        assert np.all(np.diff(peaks.mz) >= 0)
        assert len(peaks) == pairs.shape[0]


def test_from_pairs_empty():
    peaks = PeakList.from_pairs([])
    assert len(peaks) == 0
    assert math.isnan(peaks.average_mz)
    assert math.isnan(peaks.average_intensity)


def test_averages(peaks):
    assert peaks.average_mz == pytest.approx(np.mean(peaks.mz))
    assert peaks.average_intensity == pytest.approx(np.mean(peaks.intensity))


def test_peak_list_is_not_hashable(peaks):
    with pytest.raises(TypeError):
        hash(peaks)


def test_float32_intensity():
    peaks = PeakList([100.0, 200.0], [1.5, 2.5], dtype=np.float32)
    assert peaks.dtype == np.float32
    assert peaks != PeakList([100.0, 200.0], [1.5, 2.5])


@pytest.mark.parametrize("tolerance", [0.0, 1e-6, 1e-3, 0.5])
def test_compress_decompress_within_tolerance(peaks, tolerance):
    data = peaks.compress(tolerance)
    restored = PeakList.decompress(data)
    assert len(restored) == len(peaks)
    assert np.max(np.abs(restored.mz - peaks.mz)) <= tolerance
    assert np.max(np.abs(restored.intensity - peaks.intensity)) <= tolerance


def test_compress_zero_tolerance_is_exact(peaks):
    assert PeakList.decompress(peaks.compress()) == peaks


def test_compress_tolerance_from_settings(monkeypatch, tmp_path, peaks):
    path = tmp_path / "settings.json"
    path.write_text('{"compression_tolerance": 0.5}')
    monkeypatch.setenv("BIORECORDS_SETTINGS", str(path))
    assert peaks.compress() == peaks.compress(0.5)


def test_compress_random_peak_lists():
    rng = np.random.default_rng(42)
    for tolerance in (1e-4, 1e-2):
        mz = np.sort(rng.uniform(100.0, 2000.0, size=500))
        intensity = rng.uniform(0.0, 1e6, size=500)
        peaks = PeakList(mz, intensity)
        restored = PeakList.decompress(peaks.compress(tolerance))
        assert np.max(np.abs(restored.mz - mz)) <= tolerance
        assert np.max(np.abs(restored.intensity - intensity)) <= tolerance


def test_compress_keeps_intensity_dtype():
    peaks = PeakList([100.0, 200.0], [1.5, 2.5], dtype=np.float32)
    restored = PeakList.decompress(peaks.compress(0.01))
    assert restored.dtype == np.float32


def test_compress_empty_peak_list():
    peaks = PeakList([], [])
    assert PeakList.decompress(peaks.compress(0.1)) == peaks


def test_compress_negative_tolerance_raises(peaks):
    with pytest.raises(ValueError):
        peaks.compress(-1.0)


def test_compress_tolerance_below_fixed_point_resolution():
    for mz, tolerance in (([5000.0, 5000.5], 1e-12), ([1e10], 1e-10)):
        peaks = PeakList(mz, [1.0] * len(mz))
        restored = PeakList.decompress(peaks.compress(tolerance))
        assert np.array_equal(restored.mz, peaks.mz)
        assert np.max(np.abs(restored.intensity - peaks.intensity)) <= tolerance


def test_compress_stores_blocks_independently():
    # m/z values too large for the tolerance, intensities stored as fixed point
    peaks = PeakList([1e10, 2e10], [1.0, 2.0])
    data = peaks.compress(1e-7)
    header = np.frombuffer(data, dtype=compression.HEADER, count=1)[0]
    assert header["mz_scale"] == 0.0
    assert header["intensity_scale"] > 0.0
    restored = PeakList.decompress(data)
    assert np.array_equal(restored.mz, peaks.mz)
    assert np.max(np.abs(restored.intensity - peaks.intensity)) <= 1e-7


def test_decompress_invalid_magic_raises(peaks):
    data = bytearray(peaks.compress(0.01))
    data[:4] = b"XXXX"
    with pytest.raises(CorruptPeakList):
        PeakList.decompress(bytes(data))


def test_decompress_truncated_buffer_raises(peaks):
    data = peaks.compress(0.01)
    with pytest.raises(CorruptPeakList):
        PeakList.decompress(data[:-3])
    with pytest.raises(CorruptPeakList):
        PeakList.decompress(data[:5])


def test_decompress_corrupted_block_raises(peaks):
    data = bytearray(peaks.compress(0.01))
    start = compression.HEADER.itemsize
    data[start : start + 4] = b"\x00\x00\x00\x00"
    with pytest.raises(CorruptPeakList):
        PeakList.decompress(bytes(data))


def test_decompress_decreasing_mz_raises():
    mz = np.array([100.0, 99.0])
    intensity = np.array([1.0, 1.0])
    data = compression.encode(mz, intensity, 0.0)
    with pytest.raises(CorruptPeakList):
        PeakList.decompress(data)
