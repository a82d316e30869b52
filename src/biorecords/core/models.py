"""Base data model shared by every record type."""

from __future__ import annotations

from typing import Any

import pydantic


class Record(pydantic.BaseModel):
    """
    Base class for decoded records.

    Record inherits from pydantic BaseModel. Record types are created by
    inheritance of this class and setting data fields using Pydantic's standard
    approach. Records are frozen: codecs build a new record for each decoded
    span and never modify it after it is returned.

    """

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def to_document(self) -> dict[str, Any]:
        """Create the mapping used by validity checks."""
        return self.model_dump()
