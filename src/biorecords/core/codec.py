"""
Decode and encode contract shared by every format.

Codec : Interface implemented by each format codec.
Decoded : One item of a decode session.
DecodeSession : Lazy decoding of a source with a fixed policy.

"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import IO, Iterable, Iterator, Protocol

from .constants import DecodePolicy
from .exceptions import InvalidRecord, RecordError, TruncatedRecord
from .models import Record
from .settings import get_settings
from .stream import Boundary, RawSpan, Source, open_spans
from .validity import VALID, Checker, ValidationOutcome

logger = logging.getLogger(__name__)


class Codec(Protocol):
    """Decode and encode interface of a record format."""

    checker: Checker

    def boundary(self) -> Boundary:
        """Create the strategy used to split a source into spans."""
        ...

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Record, ValidationOutcome]:
        """
        Create a record from a span.

        Raises
        ------
        RecordError
            If the span is not a valid record for the format. Invalid records
            raise :py:class:`InvalidRecord` only if the policy is strict.

        """
        ...

    def encode(self, record: Record) -> bytes:
        """Serialize a record."""
        ...

    def header(self) -> bytes:
        """Content written before the first record of a collection."""
        ...

    def footer(self) -> bytes:
        """Content written after the last record of a collection."""
        ...


@dataclass(frozen=True)
class Decoded:
    """
    One item of a decode session.

    Attributes
    ----------
    index : int
        Ordinal of the record in the source.
    record : Record or None
        The decoded record. ``None`` if decoding failed.
    outcome : ValidationOutcome
        Validity check result. Under a strict policy it is always valid.
    error : RecordError or None
        The error found while decoding the record.

    """

    index: int
    record: Record | None = None
    outcome: ValidationOutcome = VALID
    error: RecordError | None = None

    @property
    def ok(self) -> bool:
        """``True`` if a record was decoded."""
        return self.error is None


class DecodeSession:
    """
    Decode the records of a source.

    Parameters
    ----------
    source : str, os.PathLike, bytes or file object
        Record source. See :py:func:`biorecords.core.stream.open_spans`.
    codec : Codec
        The codec of the source format.
    policy : DecodePolicy or None, default=None
        Decode policy, fixed for the lifetime of the session. If ``None``, the
        policy from the library settings is used.
    close_source : bool, default=False
        Close file object sources when the iteration ends.

    Under a strict policy, the first error stops the iteration and is raised.
    Under a lenient policy, failed records are yielded as :py:class:`Decoded`
    items with the error set and the iteration continues. A truncated source
    raises :py:class:`TruncatedRecord` under both policies.

    """

    def __init__(
        self,
        source: Source,
        codec: Codec,
        policy: DecodePolicy | None = None,
        close_source: bool = False,
    ):
        self._source = source
        self._codec = codec
        self._policy = get_settings().policy if policy is None else policy
        self._close_source = close_source

    @property
    def policy(self) -> DecodePolicy:
        """The session decode policy."""
        return self._policy

    @property
    def codec(self) -> Codec:
        """The session codec."""
        return self._codec

    def __iter__(self) -> Iterator[Decoded]:
        spans = open_spans(self._source, self._codec.boundary(), self._close_source)
        with spans:
            while True:
                try:
                    span = next(spans)
                except StopIteration:
                    return
                except RecordError as e:
                    yield self._fail(e)
                    continue

                try:
                    record, outcome = self._codec.decode(span, self._policy)
                except RecordError as e:
                    yield self._fail(e.locate(span.index, span.line))
                    continue

                if not outcome.is_valid:
                    logger.debug("Record %d is invalid: %s.", span.index, outcome.fields)
                yield Decoded(span.index, record, outcome)

    def records(self) -> Iterator[Record]:
        """Yield the decoded records, skipping failures."""
        for item in self:
            if item.record is not None:
                yield item.record

    def _fail(self, error: RecordError) -> Decoded:
        # truncated sources end the session under every policy
        if self._policy is DecodePolicy.STRICT or isinstance(error, TruncatedRecord):
            raise error
        logger.warning("Skipping record %d: %s", error.index, error)
        return Decoded(error.index, error=error)


def decode_all(source: Source, codec: Codec, policy: DecodePolicy | None = None) -> list[Record]:
    """Decode every record of a source, skipping failures under a lenient policy."""
    return list(DecodeSession(source, codec, policy).records())


def dump(
    records: Iterable[Record],
    sink: IO,
    codec: Codec,
    policy: DecodePolicy = DecodePolicy.LENIENT,
) -> int:
    """
    Write records to a binary sink.

    Parameters
    ----------
    records : Iterable[Record]
    sink : binary file object
    codec : Codec
    policy : DecodePolicy, default=DecodePolicy.LENIENT
        If strict, each record is checked before it is written and an invalid
        record stops the export.

    Returns
    -------
    int
        Number of records written.

    Raises
    ------
    InvalidRecord
        If the policy is strict and a record is invalid.

    """
    sink.write(codec.header())
    n = 0
    for index, record in enumerate(records):
        if policy is DecodePolicy.STRICT:
            outcome = codec.checker.check(record)
            if not outcome.is_valid:
                raise InvalidRecord(outcome, index=index)
        sink.write(codec.encode(record))
        n += 1
    sink.write(codec.footer())
    return n


def dumps(
    records: Iterable[Record],
    codec: Codec,
    policy: DecodePolicy = DecodePolicy.LENIENT,
) -> bytes:
    """Serialize records into bytes. See :py:func:`dump`."""
    buffer = io.BytesIO()
    dump(records, buffer, codec, policy)
    return buffer.getvalue()
