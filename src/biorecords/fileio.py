"""
Functions to read and write record files.

The codec is selected from the file suffix unless a codec, or the name of a
registered codec, is given.

read : Decode every record of a file.
iter_read : Lazily decode the records of a file.
write : Encode records into a file.
loads : Decode every record of a bytes object.
dumps : Encode records into bytes.

"""

from __future__ import annotations

import gzip
import logging
import os
import pathlib
from typing import Iterable

from .core import codec as _codec
from .core.codec import Codec, DecodeSession
from .core.constants import DecodePolicy
from .core.models import Record
from .core.registry import get_codec, get_codec_for_path

logger = logging.getLogger(__name__)


def _resolve_codec(codec: Codec | str | None, path: str | os.PathLike | None = None) -> Codec:
    if isinstance(codec, str):
        return get_codec(codec)
    if codec is None:
        if path is None:
            raise ValueError("A codec is required when no file path is given.")
        return get_codec_for_path(path)
    return codec


def read(
    path: str | os.PathLike,
    codec: Codec | str | None = None,
    policy: DecodePolicy | None = None,
) -> list[Record]:
    """
    Decode every record of a file.

    Parameters
    ----------
    path : str or os.PathLike
        Path to the file. Files with a ``.gz`` suffix are decompressed.
    codec : Codec, str or None, default=None
        Codec or registered codec name. If ``None``, the codec is selected
        using the file suffix.
    policy : DecodePolicy or None, default=None
        Decode policy. If ``None``, the value from the library settings is used.

    Returns
    -------
    list[Record]
        Decoded records. Under a lenient policy, failed records are skipped.

    """
    return list(iter_read(path, codec, policy).records())


def iter_read(
    path: str | os.PathLike,
    codec: Codec | str | None = None,
    policy: DecodePolicy | None = None,
) -> DecodeSession:
    """
    Lazily decode the records of a file.

    Parameters
    ----------
    path : str or os.PathLike
    codec : Codec, str or None, default=None
    policy : DecodePolicy or None, default=None

    Returns
    -------
    DecodeSession
        The file is opened when the session is iterated and closed when the
        iteration ends.

    See Also
    --------
    read

    """
    codec = _resolve_codec(codec, path)
    logger.debug("Reading %s with %s.", path, type(codec).__name__)
    return DecodeSession(path, codec, policy=policy)


def write(
    records: Iterable[Record],
    path: str | os.PathLike,
    codec: Codec | str | None = None,
    policy: DecodePolicy = DecodePolicy.LENIENT,
) -> int:
    """
    Encode records into a file.

    Parameters
    ----------
    records : Iterable[Record]
    path : str or os.PathLike
        Output file. Existing files are replaced once every record has been
        written. Files with a ``.gz`` suffix are compressed.
    codec : Codec, str or None, default=None
    policy : DecodePolicy, default=DecodePolicy.LENIENT
        If strict, invalid records stop the export and `path` is left
        unchanged.

    Returns
    -------
    int
        Number of records written.

    Raises
    ------
    InvalidRecord
        If the policy is strict and a record is invalid.

    """
    path = pathlib.Path(path)
    codec = _resolve_codec(codec, path)
    # records are written to a sibling file that replaces `path` on success
    partial = path.with_name(f".{path.name}.part")
    try:
        with open(partial, "wb") as fout:
            if path.suffix == ".gz":
                with gzip.GzipFile(path.name, "wb", fileobj=fout) as gz_out:
                    n = _codec.dump(records, gz_out, codec, policy)
            else:
                n = _codec.dump(records, fout, codec, policy)
    except Exception:
        partial.unlink(missing_ok=True)
        raise
    os.replace(partial, path)
    logger.debug("Wrote %d records to %s.", n, path)
    return n


def loads(data: bytes, codec: Codec | str, policy: DecodePolicy | None = None) -> list[Record]:
    """Decode every record of a bytes object. See :py:func:`read`."""
    return list(DecodeSession(data, _resolve_codec(codec), policy=policy).records())


def dumps(
    records: Iterable[Record],
    codec: Codec | str,
    policy: DecodePolicy = DecodePolicy.LENIENT,
) -> bytes:
    """Encode records into bytes. See :py:func:`write`."""
    return _codec.dumps(records, _resolve_codec(codec), policy)
