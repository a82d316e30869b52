"""
Semantic checks applied to decoded records.

Each record type defines a Cerberus schema describing its semantic rules and
registers a :py:class:`Checker` built from it. The checks only look at the
record field values.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import cerberus

from .constants import DecodePolicy, FieldErrorReason
from .exceptions import FieldError, InvalidRecord
from .models import Record
from .patterns import get_pattern


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of checking a record.

    Attributes
    ----------
    reasons : tuple[FieldError, ...]
        The failed checks. An empty tuple means that the record is valid.

    """

    reasons: tuple[FieldError, ...] = ()

    @property
    def is_valid(self) -> bool:
        """``True`` if no check failed."""
        return not self.reasons

    @property
    def fields(self) -> list[str]:
        """Names of the fields that failed a check."""
        return [x.field for x in self.reasons]


VALID = ValidationOutcome()


class RecordValidator(cerberus.Validator):
    """Cerberus validator with cross-field rules used by record schemas."""

    def _validate_lower_or_equal(self, other, field, value):
        """
        Tests if a value is lower or equal than the value of other field.

        The rule's arguments are validated against this schema:
        {"type": "string"}
        """
        if (other not in self.document) or (self.document[other] is None):
            return False
        if value > self.document[other]:
            msg = "{} must be lower or equal than {}".format(field, other)
            self._error(field, msg)

    def _validate_length_of(self, other, field, value):
        """
        Tests if a value, or its length, is equal to the length of other field.

        The rule's arguments are validated against this schema:
        {"type": "string"}
        """
        if other not in self.document:
            return False
        size = value if isinstance(value, int) else len(value)
        if size != len(self.document[other]):
            msg = "{} must be equal to the length of {}".format(field, other)
            self._error(field, msg)

    def _validate_pattern(self, name, field, value):
        """
        Tests if a string matches a named pattern of the pattern table.

        The rule's arguments are validated against this schema:
        {"type": "string"}
        """
        # cerberus does not skip custom rules for empty values
        if not value and self.schema[field].get("empty", False):
            return
        if get_pattern(name).fullmatch(value) is None:
            msg = "{} does not match the {} pattern".format(field, name)
            self._error(field, msg)

    def _validate_nonzero(self, nonzero, field, value):
        """
        Tests if a value is different from zero.

        The rule's arguments are validated against this schema:
        {"type": "boolean"}
        """
        if nonzero and not value:
            self._error(field, "{} must be different from zero".format(field))


class Checker:
    """
    Check records against a Cerberus schema.

    Parameters
    ----------
    schema : dict
        Cerberus schema with the record rules.
    validator_class : type[RecordValidator], default=RecordValidator
        Validator class that implements the custom rules used in `schema`.

    """

    def __init__(self, schema: dict, validator_class: type[RecordValidator] = RecordValidator):
        self.schema = schema
        self.validator_class = validator_class

    def check(self, record: Record) -> ValidationOutcome:
        """
        Check a record.

        Parameters
        ----------
        record : Record

        Returns
        -------
        ValidationOutcome

        """
        document = record.to_document()
        # validators store the last document, a new one is used on each check
        validator = self.validator_class(self.schema, allow_unknown=True)
        if validator.validate(document, normalize=False):
            return VALID
        reasons = tuple(_flatten_errors(validator.errors, document, ""))
        return ValidationOutcome(reasons)


def apply_policy(outcome: ValidationOutcome, policy: DecodePolicy) -> ValidationOutcome:
    """
    Apply a decode policy to a validation outcome.

    Raises
    ------
    InvalidRecord
        If the policy is strict and the outcome is invalid.

    """
    if policy is DecodePolicy.STRICT and not outcome.is_valid:
        raise InvalidRecord(outcome)
    return outcome


def _flatten_errors(errors: Mapping, document: Any, prefix: str):
    # cerberus nests errors of sub-documents and list items inside dictionaries
    for field, messages in errors.items():
        path = f"{prefix}.{field}" if prefix else str(field)
        try:
            value = document[field]
        except (KeyError, IndexError, TypeError):
            value = None
        for message in messages:
            if isinstance(message, Mapping):
                yield from _flatten_errors(message, value, path)
            else:
                text = "" if value is None else str(value)
                yield FieldError(path, text, FieldErrorReason.INVALID, message)
