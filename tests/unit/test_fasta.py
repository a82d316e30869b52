import pytest

from biorecords.core.codec import DecodeSession, decode_all, dumps
from biorecords.core.constants import DecodePolicy
from biorecords.core.exceptions import InvalidRecord, Malformed, TruncatedRecord
from biorecords.core.registry import get_codec
from biorecords.formats import FastaCodec, SequenceEntry


@pytest.fixture
def codec():
    return FastaCodec()


def test_decode(codec):
    data = b">seq1 first sequence\nACGT\nACGT\n\n>seq2\nMKV\n"
    records = decode_all(data, codec)
    assert records == [
        SequenceEntry(identifier="seq1", description="first sequence", sequence="ACGTACGT"),
        SequenceEntry(identifier="seq2", description="", sequence="MKV"),
    ]


def test_encode_wraps_sequence(codec):
    record = SequenceEntry(identifier="seq1", description="a b", sequence="A" * 130)
    lines = dumps([record], codec).decode().splitlines()
    assert lines[0] == ">seq1 a b"
    assert [len(x) for x in lines[1:]] == [60, 60, 10]


def test_encode_custom_width():
    codec = FastaCodec(width=4)
    record = SequenceEntry(identifier="seq1", sequence="ACGTAC")
    assert dumps([record], codec) == b">seq1\nACGT\nAC\n"


def test_encode_then_decode(codec):
    records = [
        SequenceEntry(identifier="seq1", description="first", sequence="ACGT" * 40),
        SequenceEntry(identifier="seq2", sequence="MKV"),
    ]
    assert decode_all(dumps(records, codec), codec) == records


def test_content_before_first_header(codec):
    data = b"ACGT\n>seq1\nACGT\n"
    with pytest.raises(Malformed):
        decode_all(data, codec, DecodePolicy.STRICT)
    items = list(DecodeSession(data, codec, DecodePolicy.LENIENT))
    assert isinstance(items[0].error, Malformed)
    assert items[1].record.identifier == "seq1"


def test_header_without_sequence_is_truncated(codec):
    with pytest.raises(TruncatedRecord):
        decode_all(b">seq1\nACGT\n>seq2\n", codec, DecodePolicy.LENIENT)


def test_header_without_identifier(codec):
    with pytest.raises(Malformed):
        decode_all(b">\nACGT\n", codec)


def test_invalid_sequence(codec):
    data = b">seq1\nACG1\n"
    with pytest.raises(InvalidRecord):
        decode_all(data, codec, DecodePolicy.STRICT)
    (item,) = list(DecodeSession(data, codec, DecodePolicy.LENIENT))
    assert item.outcome.fields == ["sequence"]


def test_registered_codec():
    assert isinstance(get_codec("fasta"), FastaCodec)
