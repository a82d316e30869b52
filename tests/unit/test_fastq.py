import pytest

from biorecords.core.codec import DecodeSession, decode_all, dumps
from biorecords.core.constants import DecodePolicy
from biorecords.core.exceptions import LengthMismatch, Malformed, TruncatedRecord
from biorecords.formats import FastqCodec
from biorecords.sra import Read


@pytest.fixture
def codec():
    return FastqCodec()


def test_decode_single_read(codec):
    (read,) = decode_all(b"@r1\nACGT\n+\n!!!!\n", codec)
    assert read == Read(seq_id="r1", description="", length=4, sequence="ACGT", quality="!!!!")


def test_decode_file(codec, data_dir, srr390728_2, srr390728_3):
    assert decode_all(data_dir / "srr390728.fastq", codec) == [srr390728_2, srr390728_3]


def test_encode_with_length_and_repeated_header(data_dir, srr390728_2, srr390728_3):
    codec = FastqCodec(write_length=True, repeat_header=True)
    expected = (data_dir / "srr390728.fastq").read_bytes()
    assert dumps([srr390728_2, srr390728_3], codec) == expected


def test_encode_default(codec, srr390728_2):
    lines = dumps([srr390728_2], codec).decode().splitlines()
    assert lines[0] == "@SRR390728.2 2"
    assert lines[2] == "+"


@pytest.mark.parametrize("policy", [DecodePolicy.STRICT, DecodePolicy.LENIENT])
def test_quality_length_mismatch(codec, policy):
    data = b"@r1\nACGT\n+\n!!!\n"
    session = DecodeSession(data, codec, policy)
    if policy is DecodePolicy.STRICT:
        with pytest.raises(LengthMismatch):
            list(session)
    else:
        (item,) = list(session)
        assert isinstance(item.error, LengthMismatch)
        assert item.record is None


def test_missing_quality_line_is_truncated(codec):
    with pytest.raises(TruncatedRecord):
        decode_all(b"@r1\nACGT\n+\n", codec, DecodePolicy.LENIENT)


@pytest.mark.parametrize(
    "data",
    [
        b"r1\nACGT\n+\n!!!!\n",
        b"@r1\nACGT\n-\n!!!!\n",
        b"@r1\nACGT\n+r2\n!!!!\n",
    ],
)
def test_malformed_lines(codec, data):
    with pytest.raises(Malformed):
        decode_all(data, codec)


def test_malformed_length_suffix(codec):
    with pytest.raises(Malformed):
        decode_all(b"@r1 length=abc\nACGT\n+\n!!!!\n", codec)


def test_invalid_nucleotide(codec):
    data = b"@r1\nACXT\n+\n!!!!\n"
    (item,) = list(DecodeSession(data, codec, DecodePolicy.LENIENT))
    assert item.outcome.fields == ["sequence"]
