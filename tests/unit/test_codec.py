import io

import pytest

from biorecords.core.codec import DecodeSession, decode_all, dump, dumps
from biorecords.core.constants import DecodePolicy, FieldErrorReason
from biorecords.core.exceptions import InvalidRecord, LengthMismatch, TruncatedRecord
from biorecords.formats import FastqCodec
from biorecords.sra import Read

# the first read declares a length different from its sequence length
ONE_INVALID = b"@r1 length=70\nACGT\n+\n!!!!\n@r2\nACGT\n+\n!!!!\n"


@pytest.fixture
def codec():
    return FastqCodec()


def test_session_default_policy_is_strict(codec):
    assert DecodeSession(b"", codec).policy is DecodePolicy.STRICT


def test_session_valid_records(codec, srr390728_2, srr390728_3, data_dir):
    session = DecodeSession(data_dir / "srr390728.fastq", codec)
    items = list(session)
    assert [x.record for x in items] == [srr390728_2, srr390728_3]
    assert all(x.ok and x.outcome.is_valid for x in items)
    assert [x.index for x in items] == [0, 1]


def test_session_strict_invalid_record_raises(codec):
    session = DecodeSession(ONE_INVALID, codec, DecodePolicy.STRICT)
    with pytest.raises(InvalidRecord) as excinfo:
        list(session)
    error = excinfo.value
    assert error.index == 0
    assert error.line == 1
    assert error.outcome.fields == ["length"]


def test_session_lenient_invalid_record_is_returned(codec):
    session = DecodeSession(ONE_INVALID, codec, DecodePolicy.LENIENT)
    first, second = list(session)
    assert first.ok
    assert first.record.length == 70
    assert not first.outcome.is_valid
    assert first.outcome.fields == ["length"]
    assert first.outcome.reasons[0].reason is FieldErrorReason.INVALID
    assert second.outcome.is_valid
    assert second.record.seq_id == "r2"


def test_session_lenient_structural_error_continues(codec):
    data = b"@r1\nACGT\n+\n!!!\n@r2\nACGT\n+\n!!!!\n"
    first, second = list(DecodeSession(data, codec, DecodePolicy.LENIENT))
    assert not first.ok
    assert first.record is None
    assert isinstance(first.error, LengthMismatch)
    assert first.error.index == 0
    assert first.error.line == 1
    assert second.record.seq_id == "r2"


def test_session_strict_structural_error_raises(codec):
    data = b"@r1\nACGT\n+\n!!!\n"
    with pytest.raises(LengthMismatch):
        list(DecodeSession(data, codec, DecodePolicy.STRICT))


@pytest.mark.parametrize("policy", [DecodePolicy.STRICT, DecodePolicy.LENIENT])
def test_session_truncated_source_raises(codec, policy):
    data = b"@r1\nACGT\n+\n!!!!\n@r2\nACGT\n"
    session = iter(DecodeSession(data, codec, policy))
    assert next(session).record.seq_id == "r1"
    with pytest.raises(TruncatedRecord):
        next(session)


def test_session_records_skips_failures(codec):
    data = b"@r1\nACGT\n+\n!!!\n@r2\nACGT\n+\n!!!!\n"
    records = list(DecodeSession(data, codec, DecodePolicy.LENIENT).records())
    assert [x.seq_id for x in records] == ["r2"]


def test_session_is_lazy(codec):
    # the error in the second record is not found until it is requested
    data = b"@r1\nACGT\n+\n!!!!\n@r2\nACGT\n+\n!!!\n"
    session = iter(DecodeSession(data, codec, DecodePolicy.STRICT))
    assert next(session).record.seq_id == "r1"
    with pytest.raises(LengthMismatch):
        next(session)


def test_dropping_partly_consumed_session_closes_source(codec):
    source = io.BytesIO(b"@r1\nACGT\n+\n!!!!\n@r2\nACGT\n+\n!!!!\n")
    items = iter(DecodeSession(source, codec, close_source=True))
    assert next(items).record.seq_id == "r1"
    assert not source.closed
    del items
    assert source.closed


def test_session_policy_from_settings(codec, monkeypatch, tmp_path):
    path = tmp_path / "settings.json"
    path.write_text('{"policy": "lenient"}')
    monkeypatch.setenv("BIORECORDS_SETTINGS", str(path))
    records = decode_all(ONE_INVALID, codec)
    assert len(records) == 2


def test_decode_all_strict(codec):
    with pytest.raises(InvalidRecord):
        decode_all(ONE_INVALID, codec, DecodePolicy.STRICT)


def test_dump(codec, srr390728_2):
    sink = io.BytesIO()
    n = dump([srr390728_2, srr390728_2], sink, codec)
    assert n == 2
    assert sink.getvalue().count(b"@SRR390728.2") == 2


def test_dump_strict_invalid_record_raises(codec, srr390728_2):
    invalid = srr390728_2.model_copy(update={"length": 70})
    with pytest.raises(InvalidRecord) as excinfo:
        dumps([srr390728_2, invalid], codec, DecodePolicy.STRICT)
    assert excinfo.value.index == 1


def test_dump_lenient_writes_invalid_records(codec, srr390728_2):
    invalid = srr390728_2.model_copy(update={"length": 70})
    data = dumps([invalid], codec, DecodePolicy.LENIENT)
    assert data.startswith(b"@SRR390728.2")


def test_encode_then_decode(codec):
    read = Read(seq_id="r1", length=4, sequence="ACGT", quality="!!!!")
    assert decode_all(dumps([read], codec), codec) == [read]
