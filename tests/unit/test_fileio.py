import pytest

from biorecords import fileio
from biorecords.core.codec import DecodeSession
from biorecords.core.constants import DecodePolicy
from biorecords.core.exceptions import CodecNotRegistered, InvalidRecord
from biorecords.formats import FastqCodec
from biorecords.uniprot import fasta_codec


def test_read_codec_from_suffix(data_dir, srr390728_2, srr390728_3):
    assert fileio.read(data_dir / "srr390728.fastq") == [srr390728_2, srr390728_3]


def test_read_codec_name(data_dir, gapdh, bsa):
    proteins = fileio.read(data_dir / "proteins.tsv", "uniprot-csv")
    assert proteins == [gapdh, bsa]


def test_read_unknown_suffix(tmp_path):
    path = tmp_path / "reads.unknown"
    path.write_bytes(b"")
    with pytest.raises(CodecNotRegistered):
        fileio.read(path)


def test_iter_read_is_lazy(data_dir):
    session = fileio.iter_read(data_dir / "srr390728.fastq")
    assert isinstance(session, DecodeSession)
    assert next(iter(session)).record.seq_id == "SRR390728.2"


def test_write_then_read(tmp_path, srr390728_2, srr390728_3):
    path = tmp_path / "reads.fq"
    n = fileio.write([srr390728_2, srr390728_3], path)
    assert n == 2
    assert fileio.read(path) == [srr390728_2, srr390728_3]


def test_write_then_read_gzip(tmp_path, gapdh, bsa):
    path = tmp_path / "proteins.fasta.gz"
    fileio.write([gapdh, bsa], path, fasta_codec())
    assert path.read_bytes()[:2] == b"\x1f\x8b"
    proteins = fileio.read(path, "uniprot-fasta")
    assert [x.id for x in proteins] == ["P46406", "P02769"]


def test_write_strict(tmp_path, srr390728_2):
    invalid = srr390728_2.model_copy(update={"length": 1})
    with pytest.raises(InvalidRecord):
        fileio.write([invalid], tmp_path / "reads.fastq", policy=DecodePolicy.STRICT)
    assert list(tmp_path.iterdir()) == []


def test_write_strict_keeps_existing_file(tmp_path, srr390728_2, srr390728_3):
    path = tmp_path / "reads.fastq"
    fileio.write([srr390728_2], path)
    content = path.read_bytes()
    invalid = srr390728_3.model_copy(update={"length": 1})
    with pytest.raises(InvalidRecord):
        fileio.write([srr390728_2, invalid], path, policy=DecodePolicy.STRICT)
    assert path.read_bytes() == content
    assert list(tmp_path.iterdir()) == [path]


def test_loads_and_dumps(srr390728_2):
    codec = FastqCodec(write_length=True)
    data = fileio.dumps([srr390728_2], codec)
    assert data.startswith(b"@SRR390728.2 2 length=72\n")
    assert fileio.loads(data, "fastq") == [srr390728_2]


def test_loads_lenient(srr390728_2):
    data = b"@r1\nACGT\n+\n!!!\n" + fileio.dumps([srr390728_2], "fastq")
    assert fileio.loads(data, "fastq", DecodePolicy.LENIENT) == [srr390728_2]


def test_loads_without_codec():
    with pytest.raises(ValueError):
        fileio.loads(b"", None)
