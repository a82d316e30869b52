"""biorecords custom exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import FieldErrorReason

if TYPE_CHECKING:
    from .validity import ValidationOutcome


class RecordError(ValueError):
    """
    Base class for errors found while decoding a record.

    Parameters
    ----------
    message : str
        Error description.
    index : int, default=-1
        Ordinal of the record in the source, ``-1`` if unknown.
    line : int, default=0
        Line where the record starts, ``0`` if unknown.

    """

    def __init__(self, message: str, index: int = -1, line: int = 0):
        super().__init__(message)
        self.message = message
        self.index = index
        self.line = line

    def locate(self, index: int, line: int) -> RecordError:
        """Set the record position if it was not known when the error was raised."""
        if self.index < 0:
            self.index = index
        if not self.line:
            self.line = line
        return self

    def __str__(self) -> str:
        if self.line:
            return f"{self.message} (line {self.line})"
        return self.message


class Malformed(RecordError):
    """Exception raised when the record syntax violates the format grammar."""


class OutOfRange(RecordError):
    """Exception raised when a value violates a hard numeric constraint."""


class LengthMismatch(RecordError):
    """Exception raised when two fields that must have the same length differ."""


class TruncatedRecord(RecordError):
    """Exception raised when the source ends in the middle of a record."""


class InvalidRecord(RecordError):
    """Exception raised in strict mode when a record fails its validity checks."""

    def __init__(self, outcome: ValidationOutcome, index: int = -1, line: int = 0):
        reasons = "; ".join(str(x) for x in outcome.reasons)
        super().__init__(f"invalid record: {reasons}", index, line)
        self.outcome = outcome


class FieldError(RecordError):
    """
    Describe a single field that could not be converted or failed a check.

    Parameters
    ----------
    field : str
        Field name.
    text : str
        Raw field text.
    reason : FieldErrorReason
    detail : str, default=""
        Additional description.

    """

    def __init__(
        self,
        field: str,
        text: str,
        reason: FieldErrorReason,
        detail: str = "",
    ):
        msg = f"{field or 'field'}: {reason.value} value {text!r}"
        if detail:
            msg += f", {detail}"
        super().__init__(msg)
        self.field = field
        self.text = text
        self.reason = reason
        self.detail = detail

    def __eq__(self, other) -> bool:
        if not isinstance(other, FieldError):
            return NotImplemented
        return (self.field, self.text, self.reason, self.detail) == (
            other.field,
            other.text,
            other.reason,
            other.detail,
        )

    def __hash__(self) -> int:
        return hash((self.field, self.text, self.reason, self.detail))


class MalformedField(FieldError, Malformed):
    """Exception raised when a field text does not follow its syntax."""

    def __init__(self, field: str, text: str, detail: str = ""):
        super().__init__(field, text, FieldErrorReason.MALFORMED, detail)


class FieldOutOfRange(FieldError, OutOfRange):
    """Exception raised when a numeric field does not fit its declared width."""

    def __init__(self, field: str, text: str, detail: str = ""):
        super().__init__(field, text, FieldErrorReason.OUT_OF_RANGE, detail)


class WrongArity(FieldError, Malformed):
    """Exception raised when a field has an unexpected number of items."""

    def __init__(self, field: str, text: str, detail: str = ""):
        super().__init__(field, text, FieldErrorReason.WRONG_ARITY, detail)


class PeakListError(ValueError):
    """Base class for peak list numeric contract violations."""


class Unsorted(PeakListError):
    """Exception raised when m/z values are not in non-decreasing order."""


class PrecisionLoss(PeakListError):
    """Exception raised when compression cannot honor the requested tolerance."""


class CorruptPeakList(PeakListError):
    """Exception raised when a compressed peak list cannot be restored."""


class CodecNotRegistered(ValueError):
    """Exception raised when trying to fetch a non-registered codec."""


class CheckerNotRegistered(ValueError):
    """Exception raised when trying to fetch a checker for an unknown record type."""
